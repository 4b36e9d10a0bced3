from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.models.enums import BookingStatus, MembershipTier, enum_values


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)

    check_in_date = Column(DateTime, nullable=False)
    check_out_date = Column(DateTime, nullable=False)

    status = Column(
        Enum(BookingStatus, name="bookingstatus", values_callable=enum_values),
        nullable=False,
        default=BookingStatus.PENDING,
    )

    # Snapshot of the user's tier when the booking was made
    tier_at_booking = Column(
        Enum(MembershipTier, name="membershiptier", values_callable=enum_values),
        nullable=False,
        default=MembershipTier.NONE,
    )

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="bookings")
    room = relationship("Room")
    hotel = relationship("Hotel", back_populates="bookings")
    payments = relationship("Payment", back_populates="booking")

    __table_args__ = (
        CheckConstraint("check_out_date > check_in_date", name="ck_booking_dates"),
    )
