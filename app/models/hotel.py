from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from app.db.session import Base


class Hotel(Base):
    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)
    address = Column(String, nullable=False)
    tel = Column(String, nullable=True)

    rooms = relationship("Room", back_populates="hotel", cascade="all, delete")
    bookings = relationship("Booking", back_populates="hotel")
