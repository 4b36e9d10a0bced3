from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from app.db.session import Base
from app.models.enums import LogType, enum_values


class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(Enum(LogType, name="logtype", values_callable=enum_values), nullable=False)
    action = Column(String, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)
