from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.utils.supabase_client_handlers import SupabaseConnectionProvider
from app.utils.clerk_client_handlers import ClerkClientProvider
from app.routes.clerk_webhook_routes import clerk_webhook_router
from app.configs.app_settings import settings
import logging

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # before yield = code to run during startup
    # the provider only connects on first use, the app owns its lifetime through app.state
    app.state.supabase_provider = SupabaseConnectionProvider()
    app.state.clerk_provider = ClerkClientProvider()
    logger.info("✅ Supabase / Clerk client providers ready")

    yield
    # after yield = code to run during shutdown
    await app.state.supabase_provider.close()
    await app.state.clerk_provider.close()
    logger.info("✅ Supabase / Clerk clients closed")


app = FastAPI(title="Clerk User Sync API", version="1.0.0", lifespan=lifespan)


# Global Exception Handler for anything a route / dependency didn't turn into an HTTPException
# (downstream driver errors, bad payload shape...). HTTPException subclasses keep their own handler.
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log and map unexpected errors to a generic 500"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Adjust this in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(clerk_webhook_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {"message": "Welcome to Clerk User Sync API"}


# local run: `python -m app.main` (or `uvicorn app.main:app --reload` from the project root)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
