from pydantic import BaseModel
from typing import Optional
from datetime import datetime

# field names mirror the "users" table columns, so model_dump() output can go straight into insert / update


class UserCreate(BaseModel):
    clerk_id: str
    email: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    photo: Optional[str] = None


class UserUpdate(BaseModel):
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    photo: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    clerk_id: str
    email: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    photo: Optional[str] = None
    plan_id: int = 1
    credit_balance: int = 10
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
