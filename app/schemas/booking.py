from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from app.models.enums import BookingStatus, MembershipTier
from app.schemas.common import to_naive_utc
from app.schemas.payment import PaymentOut


class BookingCreate(BaseModel):
    check_in_date: datetime
    check_out_date: datetime
    # Validated by the booking service so a bad value is a 400, not a 422
    method: Optional[str] = None

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)


class BookingUpdate(BaseModel):
    # status XOR dates; combination is rejected by the booking service
    status: Optional[str] = None
    check_in_date: Optional[datetime] = None
    check_out_date: Optional[datetime] = None

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)


class BookingOut(BaseModel):
    id: int
    user_id: int
    room_id: int
    hotel_id: int
    check_in_date: datetime
    check_out_date: datetime
    status: BookingStatus
    tier_at_booking: MembershipTier
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingCreated(BaseModel):
    booking: BookingOut
    payment: PaymentOut
