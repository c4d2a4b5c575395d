from fastapi import Request
from supabase import acreate_client, AsyncClient
from app.configs.app_settings import settings
from app.custom_error import ConfigurationError
from typing import Awaitable, Callable, Optional
import asyncio
import logging

logger = logging.getLogger(__name__)

# logics explain:
# 1. During app startup, the lifespan block builds ONE SupabaseConnectionProvider and stores it on app.state (no module level global)
# 2. Nothing connects at startup. The first request that needs the database calls provider.connect(), which starts the connection task
# 3. Any other request arriving while that task is still running awaits the very same task, so only one connection attempt is ever in flight
# 4. Once resolved, the client is kept on the provider and handed back right away on every later call (no re-validation)
# 5. If the attempt fails, nothing is cached: the error goes up to the caller and the next call starts a fresh attempt

# the check of "_pending" and its assignment happen with no await in between.
# asyncio runs one coroutine at a time on the loop, so that check-then-set can't interleave with another request -> no lock needed.

ClientFactory = Callable[[str, str], Awaitable[AsyncClient]]


class SupabaseConnectionProvider:
    """Lazily creates and caches one Supabase AsyncClient per application"""

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None, client_factory: ClientFactory = acreate_client):
        # url / key fall back to settings at connect() time, not here
        self._url = url
        self._key = key
        self._client_factory = client_factory
        self._client: Optional[AsyncClient] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def client(self) -> Optional[AsyncClient]:
        return self._client

    @property
    def is_connecting(self) -> bool:
        return self._pending is not None and self._client is None

    async def connect(self) -> AsyncClient:
        """Return the shared client, creating it on first call"""

        if self._client is not None:
            return self._client

        url = self._url or settings.SUPABASE_URL
        key = self._key or settings.SUPABASE_KEY

        if not url:
            raise ConfigurationError("SUPABASE_URL")
        if not key:
            raise ConfigurationError("SUPABASE_KEY")

        if self._pending is None:
            logger.info("Connecting to Supabase...")
            self._pending = asyncio.ensure_future(self._client_factory(url, key))

        pending = self._pending

        try:
            # shield: a cancelled caller (client disconnect, timeout) must not cancel the attempt other callers share
            client = await asyncio.shield(pending)
        except asyncio.CancelledError:
            # the attempt itself was cancelled (close() during connect), so it can never resolve -> forget it
            if pending.cancelled() and self._pending is pending:
                self._pending = None
            raise
        except Exception as e:
            logger.error(f"❌ Supabase connection error: {str(e)}")
            # only clear the slot if nobody has already replaced it with a newer attempt
            if self._pending is pending:
                self._pending = None
            raise

        if self._client is None:
            self._client = client
            logger.info("✅ Successfully connected to Supabase")

        return self._client

    async def close(self):
        """Drop the cached client during shutdown"""
        # Supabase client doesn't have explicit close method, but we reset the reference
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self._client = None


def get_connection_provider(request: Request) -> SupabaseConnectionProvider:
    """Dependency function to get the provider built in the app lifespan"""
    provider = getattr(request.app.state, "supabase_provider", None)
    if provider is None:
        raise RuntimeError("Supabase connection provider not initialized. Build it in the app lifespan.")
    return provider

