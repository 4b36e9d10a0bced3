from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.models.enums import Role, MembershipTier, enum_values


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    tel = Column(String(10), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    role = Column(
        Enum(Role, name="role", values_callable=enum_values),
        nullable=False,
        default=Role.USER,
    )

    # Hotel managers only
    responsible_hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=True)

    # Accumulators, only ever incremented by the booking lifecycle
    credit = Column(Float, nullable=False, default=0.0)
    membership_points = Column(Float, nullable=False, default=0.0)
    membership_tier = Column(
        Enum(MembershipTier, name="membershiptier", values_callable=enum_values),
        nullable=False,
        default=MembershipTier.NONE,
    )

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    responsible_hotel = relationship("Hotel")
    bookings = relationship("Booking", back_populates="user")
