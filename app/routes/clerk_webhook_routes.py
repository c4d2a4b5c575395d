from fastapi import APIRouter, Request, Depends, Response
from fastapi.responses import PlainTextResponse
from app.utils.supabase_client_handlers import SupabaseConnectionProvider, get_connection_provider
from app.utils.clerk_client_handlers import ClerkClientProvider, get_clerk_provider
from app.services.clerk_webhook_services import ClerkWebhookService
from app.models.clerk_webhook_models import ClerkWebhookEvent
from app.configs.app_settings import settings
from app.custom_error import ConfigurationError
from svix.webhooks import Webhook, WebhookVerificationError
import json
import logging

logger = logging.getLogger(__name__)

clerk_webhook_router = APIRouter(prefix="/webhooks", tags=["Webhooks"])

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


async def get_clerk_webhook_service(
    supabase_provider: SupabaseConnectionProvider = Depends(get_connection_provider),
    clerk_provider: ClerkClientProvider = Depends(get_clerk_provider),
) -> ClerkWebhookService:
    """Dependency to get ClerkWebhookService instance (nothing connects until an event needs it)"""
    return ClerkWebhookService(supabase_provider, clerk_provider)


def canonical_body(payload) -> str:
    """Serialize a parsed JSON body back to the compact form Clerk signs (same as JS JSON.stringify)"""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


# ################################################################################################################################


@clerk_webhook_router.post("/clerk", response_model=None)
async def clerk_webhook(request: Request, webhook_service: ClerkWebhookService = Depends(get_clerk_webhook_service)):
    """Handle Clerk webhook events"""

    # secret is read per request, a missing one is a server misconfiguration -> 500
    webhook_secret = settings.CLERK_WEBHOOK_SECRET
    if not webhook_secret:
        raise ConfigurationError("CLERK_WEBHOOK_SECRET")

    # If the necessary headers are missing, return an error response
    svix_headers = {name: request.headers.get(name) for name in SVIX_HEADERS}
    if not all(svix_headers.values()):
        return PlainTextResponse("Error occurred -- no svix headers", status_code=400)

    try:
        payload = await request.json()
    except ValueError as e:
        logger.error(f"Webhook body is not valid JSON: {str(e)}")
        return PlainTextResponse("Error occurred -- invalid JSON body", status_code=400)

    body = canonical_body(payload)

    # Verify the webhook signature
    webhook = Webhook(webhook_secret)
    try:
        verified_payload = webhook.verify(body, svix_headers)
    except WebhookVerificationError as e:
        logger.error(f"Error verifying webhook: {str(e)}")
        return PlainTextResponse("Error occurred", status_code=400)

    event = ClerkWebhookEvent(**verified_payload)

    result = await webhook_service.handle_event(event)
    if result is not None:
        return result

    logger.info(f"Webhook with ID {event.clerk_user_id} and type {event.type}")
    logger.info(f"Webhook body: {body}")

    return Response(content="", status_code=200)
