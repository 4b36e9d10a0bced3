from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.enums import Role, MembershipTier


class UserBase(BaseModel):
    name: str
    email: EmailStr
    tel: str = Field(pattern=r"^[0-9]{10}$")


class UserCreate(UserBase):
    password: str = Field(min_length=6)


class UserRoleUpdate(BaseModel):
    role: Role
    # required for hotelManager, ignored otherwise
    responsible_hotel_id: Optional[int] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserOut(UserBase):
    id: int
    role: Role
    responsible_hotel_id: Optional[int] = None
    credit: float
    membership_points: float
    membership_tier: MembershipTier
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenOut(BaseModel):
    access_token: str
    role: Role
    token_type: str = "bearer"
