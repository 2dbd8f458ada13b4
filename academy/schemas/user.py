from typing import Optional
from pydantic import BaseModel, EmailStr, UUID4, field_validator
from datetime import datetime


class UserBase(BaseModel):
    email: EmailStr
    full_name: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        # Guest bookings are matched to accounts by email
        return value.lower()


# POST /auth/register
class UserCreate(UserBase):
    password: str


# POST /auth/admin/register
class AdminCreate(UserCreate):
    admin_secret: str


# PATCH /me
class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class User(UserBase):
    id: UUID4
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
    user: User
