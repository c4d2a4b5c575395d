from fastapi import Request
from clerk_backend_api import Clerk
from app.configs.app_settings import settings
from app.custom_error import ConfigurationError
from typing import Optional
import httpx
import logging

logger = logging.getLogger(__name__)

# Clerk Backend SDK client, used server-side only (metadata write-back after a user.created webhook).
# same lifetime rules as the supabase provider: built by the app lifespan, kept on app.state, created on first use,
# closed on shutdown. it needs CLERK_SECRET_KEY (not the webhook secret), from Clerk dashboard -> API Keys.

# we hand the SDK our own httpx clients, so shutdown can close the connections it opened


class ClerkClientProvider:
    """Lazily creates and caches one Clerk backend client per application"""

    def __init__(self, secret_key: Optional[str] = None):
        self._secret_key = secret_key
        self._client: Optional[Clerk] = None
        self._http_client: Optional[httpx.Client] = None
        self._async_http_client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> Optional[Clerk]:
        return self._client

    def get(self) -> Clerk:
        """Return the shared Clerk client, creating it on first call"""

        if self._client is not None:
            return self._client

        secret_key = self._secret_key or settings.CLERK_SECRET_KEY
        if not secret_key:
            raise ConfigurationError("CLERK_SECRET_KEY")

        self._http_client = httpx.Client()
        self._async_http_client = httpx.AsyncClient()
        self._client = Clerk(bearer_auth=secret_key, client=self._http_client, async_client=self._async_http_client)
        logger.info("✅ Clerk backend client initialized")
        return self._client

    async def close(self):
        """Close the underlying http clients during shutdown"""
        if self._async_http_client is not None:
            await self._async_http_client.aclose()
        if self._http_client is not None:
            self._http_client.close()
        self._async_http_client = None
        self._http_client = None
        self._client = None


def get_clerk_provider(request: Request) -> ClerkClientProvider:
    """Dependency function to get the Clerk provider built in the app lifespan"""
    provider = getattr(request.app.state, "clerk_provider", None)
    if provider is None:
        raise RuntimeError("Clerk client provider not initialized. Build it in the app lifespan.")
    return provider
