from datetime import datetime

from sqlalchemy import Column, Integer, Float, DateTime, Enum, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.models.enums import PaymentStatus, PaymentMethod, enum_values


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    amount = Column(Float, nullable=False)

    status = Column(
        Enum(PaymentStatus, name="paymentstatus", values_callable=enum_values),
        nullable=False,
        default=PaymentStatus.UNPAID,
    )
    method = Column(
        Enum(PaymentMethod, name="paymentmethod", values_callable=enum_values),
        nullable=False,
    )

    payment_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    canceled_at = Column(DateTime, nullable=True)

    booking = relationship("Booking", back_populates="payments")
    user = relationship("User")

    # One completed payment per booking
    __table_args__ = (
        Index(
            "uq_payment_completed_per_booking",
            "booking_id",
            unique=True,
            postgresql_where=text("status = 'completed'"),
            sqlite_where=text("status = 'completed'"),
        ),
    )
