from sqlalchemy.exc import SQLAlchemyError

from app.db.session import SessionLocal
from app.models.enums import LogType
from app.models.log import Log
from app.core.logging_config import get_logger

logger = get_logger()


def record_audit(user_id: int, log_type: LogType, action: str) -> None:
    """Write an audit entry in its own session; failures are logged only."""
    db = SessionLocal()
    try:
        db.add(Log(user_id=user_id, type=log_type, action=action))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Audit entry not saved | User={user_id} | {log_type.value} | {action} -> {e}")
    finally:
        db.close()
