from fastapi import HTTPException
from supabase import AsyncClient
from app.models.user_models import UserCreate, UserUpdate, UserResponse
from app.custom_error import DatabaseError, ServerError
from typing import Optional
import logging

# recall __name__ is a special variable in Python that represents the name of the current module.
logger = logging.getLogger(__name__)

USERS_TABLE = "users"


class UserService:
    def __init__(self, supabase_client: AsyncClient):
        self.supabase_client = supabase_client

    async def create_user(self, user: UserCreate) -> UserResponse:
        """Insert a new user row mirrored from Clerk"""
        try:
            result = await self.supabase_client.table(USERS_TABLE).insert(user.model_dump()).execute()

            if not result.data:
                raise DatabaseError("Failed to create user")

            logger.info(f"✅ User created in Supabase: {user.clerk_id}")
            return UserResponse(**result.data[0])

        except Exception as e:
            logger.error(f"Error in create_user: {str(e)}")
            if isinstance(e, HTTPException):
                raise e
            raise ServerError(f"Server operation failed: {str(e)}")

    # -----------------------------------------------------------------------------------------------------------------------

    async def update_user(self, clerk_id: str, user: UserUpdate) -> UserResponse:
        """Update the user row matching clerk_id"""
        try:
            result = await self.supabase_client.table(USERS_TABLE).update(user.model_dump()).eq("clerk_id", clerk_id).execute()

            # no matching row -> nothing comes back
            if not result.data:
                raise DatabaseError("User update failed")

            logger.info(f"✅ User updated in Supabase: {clerk_id}")
            return UserResponse(**result.data[0])

        except Exception as e:
            logger.error(f"Error in update_user: {str(e)}")
            if isinstance(e, HTTPException):
                raise e
            raise ServerError(f"Server operation failed: {str(e)}")

    # -----------------------------------------------------------------------------------------------------------------------

    async def delete_user(self, clerk_id: str) -> Optional[UserResponse]:
        """Delete the user row matching clerk_id and return what was deleted"""
        try:
            existing_result = await self.supabase_client.table(USERS_TABLE).select("*").eq("clerk_id", clerk_id).execute()

            if not existing_result.data:
                raise DatabaseError("User not found")

            # Delete will also remove targeted row records in related tables (CASCADE)
            result = await self.supabase_client.table(USERS_TABLE).delete().eq("clerk_id", clerk_id).execute()

            if not result.data:
                logger.error(f"❌ Delete returned no rows for user: {clerk_id}")
                return None

            logger.info(f"✅ User deleted from Supabase: {clerk_id}")
            return UserResponse(**result.data[0])

        except Exception as e:
            logger.error(f"Error in delete_user: {str(e)}")
            if isinstance(e, HTTPException):
                raise e
            raise ServerError(f"Server operation failed: {str(e)}")
