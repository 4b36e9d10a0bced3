from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.enums import RoomType
from app.schemas.common import to_naive_utc


class PeriodIn(BaseModel):
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_order(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class PeriodOut(BaseModel):
    start_date: datetime
    end_date: datetime
    booking_id: Optional[int] = None

    model_config = {"from_attributes": True}


class RoomCreate(BaseModel):
    type: RoomType = RoomType.STANDARD
    number: int
    price: float = Field(gt=0)
    unavailable_periods: List[PeriodIn] = []


class RoomOut(BaseModel):
    id: int
    hotel_id: int
    type: RoomType
    number: int
    price: float
    unavailable_periods: List[PeriodOut] = []

    model_config = {"from_attributes": True}
