from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.models.enums import PaymentStatus, PaymentMethod


class PaymentUpdate(BaseModel):
    # Plain strings: invalid values are reported as 400 by the payment service
    status: Optional[str] = None
    method: Optional[str] = None


class PaymentOut(BaseModel):
    id: int
    booking_id: int
    user_id: int
    amount: float
    status: PaymentStatus
    method: PaymentMethod
    payment_date: datetime
    canceled_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
