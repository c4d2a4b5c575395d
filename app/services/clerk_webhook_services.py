from app.utils.supabase_client_handlers import SupabaseConnectionProvider
from app.utils.clerk_client_handlers import ClerkClientProvider
from app.models.clerk_webhook_models import ClerkWebhookEvent, ClerkEventType, WebhookSyncResult
from app.models.user_models import UserCreate, UserUpdate
from app.services.user_services import UserService
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class ClerkWebhookService:
    # the providers are only asked for a client inside the branch that needs it,
    # so an event we don't sync never opens a database connection or builds a Clerk client
    def __init__(self, supabase_provider: SupabaseConnectionProvider, clerk_provider: ClerkClientProvider):
        self.supabase_provider = supabase_provider
        self.clerk_provider = clerk_provider

    async def _get_user_service(self) -> UserService:
        return UserService(await self.supabase_provider.connect())

    async def handle_event(self, event: ClerkWebhookEvent) -> Optional[WebhookSyncResult]:
        """Dispatch a verified webhook event to its user-sync handler.

        Returns None for event types we don't sync, so the route can answer with an empty 200.
        Errors from the user service / Clerk API are not caught here, they propagate as 500.
        """

        event_type = event.event_type

        if event_type is ClerkEventType.USER_CREATED:
            return await self.handle_user_created(event)
        elif event_type is ClerkEventType.USER_UPDATED:
            return await self.handle_user_updated(event)
        elif event_type is ClerkEventType.USER_DELETED:
            return await self.handle_user_deleted(event)
        else:
            logger.info(f"Unhandled event type: {event.type}")
            return None

    # --------------------------------------------------------------------------------------------------------------------

    async def handle_user_created(self, event: ClerkWebhookEvent) -> WebhookSyncResult:
        """Handle user.created webhook event"""

        user_data = event.data
        clerk_user_id = user_data["id"]

        new_user = UserCreate(
            clerk_id=clerk_user_id,
            email=user_data["email_addresses"][0]["email_address"],
            username=user_data.get("username"),
            first_name=user_data.get("first_name"),
            last_name=user_data.get("last_name"),
            photo=user_data.get("image_url"),
        )

        user_service = await self._get_user_service()
        created_user = await user_service.create_user(new_user)

        # write our row id back onto the Clerk user, so the frontend session can read it from publicMetadata
        if created_user:
            await self.clerk_provider.get().users.update_metadata_async(user_id=clerk_user_id, public_metadata={"userId": created_user.id})
            logger.info(f"Clerk metadata updated for user {clerk_user_id}")

        return WebhookSyncResult(message="User created successfully", user=created_user)

    # --------------------------------------------------------------------------------------------------------------------

    async def handle_user_updated(self, event: ClerkWebhookEvent) -> WebhookSyncResult:
        """Handle user.updated webhook event"""

        user_data = event.data

        updated_user_details = UserUpdate(
            username=user_data.get("username"),
            first_name=user_data.get("first_name"),
            last_name=user_data.get("last_name"),
            photo=user_data.get("image_url"),
        )

        user_service = await self._get_user_service()
        updated_user = await user_service.update_user(user_data["id"], updated_user_details)

        return WebhookSyncResult(message="User updated successfully", user=updated_user)

    # --------------------------------------------------------------------------------------------------------------------

    async def handle_user_deleted(self, event: ClerkWebhookEvent) -> WebhookSyncResult:
        """Handle user.deleted webhook event"""

        user_service = await self._get_user_service()
        deleted_user = await user_service.delete_user(event.data["id"])

        return WebhookSyncResult(message="User deleted successfully", user=deleted_user)
