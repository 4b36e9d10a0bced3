from sqlalchemy import Column, Integer, Float, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.models.enums import RoomType, enum_values


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)

    type = Column(
        Enum(RoomType, name="roomtype", values_callable=enum_values),
        nullable=False,
        default=RoomType.STANDARD,
    )
    number = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)

    hotel = relationship("Hotel", back_populates="rooms")

    # Dates on which the room cannot be newly booked
    unavailable_periods = relationship(
        "RoomUnavailablePeriod",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="RoomUnavailablePeriod.start_date",
    )

    __table_args__ = (UniqueConstraint("hotel_id", "number", name="uq_hotel_room_number"),)


class RoomUnavailablePeriod(Base):
    __tablename__ = "room_unavailable_periods"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)

    # Owning booking; NULL for periods blocked by staff
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True, index=True)

    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    room = relationship("Room", back_populates="unavailable_periods")
