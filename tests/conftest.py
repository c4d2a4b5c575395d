"""Shared fixtures: a signed-webhook helper and TestClients.

`client` keeps the real route -> service -> provider chain and only swaps the client factories
(supabase connect, Clerk SDK, UserService) for mocks. `bare_client` swaps nothing.
"""

from __future__ import annotations

import base64
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from svix.webhooks import Webhook

from app.configs.app_settings import settings
from app.main import app
from app.models.user_models import UserResponse
from app.routes.clerk_webhook_routes import canonical_body
from app.utils.clerk_client_handlers import ClerkClientProvider, get_clerk_provider
from app.utils.supabase_client_handlers import SupabaseConnectionProvider, get_connection_provider

WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"clerk-user-sync-test-signing-key").decode()


def sign_payload(payload: dict, secret: str = WEBHOOK_SECRET) -> tuple[str, dict]:
    """Return the canonical body and a full set of valid svix headers for it."""
    body = canonical_body(payload)
    msg_id = f"msg_{uuid.uuid4().hex}"
    now = datetime.now(tz=timezone.utc)
    signature = Webhook(secret).sign(msg_id, now, body)
    headers = {
        "svix-id": msg_id,
        "svix-timestamp": str(int(now.timestamp())),
        "svix-signature": signature,
        "content-type": "application/json",
    }
    return body, headers


def make_user_row(**overrides) -> dict:
    row = {
        "id": "6f1f0b7e-0c1e-4c59-9a8e-3c1f2b9d7a10",
        "clerk_id": "u1",
        "email": "a@b.com",
        "username": "bob",
        "first_name": "Bob",
        "last_name": "Lee",
        "photo": "http://img",
        "plan_id": 1,
        "credit_balance": 10,
    }
    row.update(overrides)
    return row


@pytest.fixture
def user_payload() -> dict:
    return {
        "id": "u1",
        "email_addresses": [{"email_address": "a@b.com"}],
        "username": "bob",
        "first_name": "Bob",
        "last_name": "Lee",
        "image_url": "http://img",
    }


@pytest.fixture
def webhook_secret(monkeypatch) -> str:
    monkeypatch.setattr(settings, "CLERK_WEBHOOK_SECRET", WEBHOOK_SECRET)
    return WEBHOOK_SECRET


@pytest.fixture
def user_service() -> MagicMock:
    service = MagicMock()
    service.create_user = AsyncMock(return_value=UserResponse(**make_user_row()))
    service.update_user = AsyncMock(return_value=UserResponse(**make_user_row(username="bobby")))
    service.delete_user = AsyncMock(return_value=UserResponse(**make_user_row()))
    return service


@pytest.fixture
def clerk_client() -> MagicMock:
    client = MagicMock()
    client.users.update_metadata_async = AsyncMock(return_value=None)
    return client


@pytest.fixture
def supabase_factory() -> AsyncMock:
    return AsyncMock(return_value=MagicMock())


@pytest.fixture
def clerk_provider(clerk_client) -> MagicMock:
    provider = MagicMock(spec=ClerkClientProvider)
    provider.get.return_value = clerk_client
    return provider


@pytest.fixture
def client(webhook_secret, user_service, supabase_factory, clerk_provider):
    supabase_provider = SupabaseConnectionProvider("https://db.example.co", "service-key", client_factory=supabase_factory)
    app.dependency_overrides[get_connection_provider] = lambda: supabase_provider
    app.dependency_overrides[get_clerk_provider] = lambda: clerk_provider
    with patch("app.services.clerk_webhook_services.UserService", return_value=user_service):
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def bare_client(webhook_secret, monkeypatch):
    """No overrides at all, and no database / Clerk configuration"""
    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    monkeypatch.setattr(settings, "SUPABASE_KEY", None)
    monkeypatch.setattr(settings, "CLERK_SECRET_KEY", None)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
