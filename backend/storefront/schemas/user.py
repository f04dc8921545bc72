from pydantic import BaseModel, EmailStr
from datetime import datetime
from storefront.models.enums import Role


class UserBase(BaseModel):
    name: str
    email: EmailStr
    picture: str | None = None


class User(UserBase):
    id: str
    role: Role
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class FollowResult(BaseModel):
    store_id: int
    is_following: bool
