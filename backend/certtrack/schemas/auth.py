from pydantic import BaseModel, EmailStr, Field, field_serializer
from pydantic.alias_generators import to_camel
from datetime import datetime

from certtrack.models import UserRole


class CamelModel(BaseModel):
    """Base for request/response bodies; JSON keys are camelCase"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class UserRegister(CamelModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr


class UserLogin(CamelModel):
    username: str
    password: str


class UserResponse(CamelModel):
    """Public projection of a user; the password hash is never included"""
    id: str
    username: str
    full_name: str
    email: str
    role: UserRole
    created_at: datetime

    @field_serializer('role')
    def serialize_role(self, value: UserRole) -> str:
        return value.value


class LoginResponse(CamelModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
