from typing import Optional

from pydantic import BaseModel, Field


class HotelBase(BaseModel):
    name: str = Field(max_length=50)
    address: str
    tel: Optional[str] = None


class HotelCreate(HotelBase):
    pass


class HotelOut(HotelBase):
    id: int

    model_config = {"from_attributes": True}
