from pydantic import BaseModel
from typing import Dict, Any, Optional
from enum import Enum
from app.models.user_models import UserResponse


class ClerkEventType(str, Enum):
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"


class ClerkWebhookEvent(BaseModel):
    data: Dict[str, Any]
    object: Optional[str] = None
    type: str

    @property
    def event_type(self) -> Optional[ClerkEventType]:
        """Known event kind, or None for anything we don't sync"""
        try:
            return ClerkEventType(self.type)
        except ValueError:
            return None

    @property
    def clerk_user_id(self) -> Optional[str]:
        return self.data.get("id")


class WebhookSyncResult(BaseModel):
    message: str
    user: Optional[UserResponse] = None
