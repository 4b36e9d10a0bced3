from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.core.auth_utils import decode_token
from app.core.exceptions import Unauthorized, Forbidden
from app.models.enums import Role
from app.models.user import User

security = HTTPBearer(auto_error=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    if credentials is None:
        raise Unauthorized("Not authorized to access this route")

    payload = decode_token(credentials.credentials)

    user = db.query(User).filter(User.email == payload["sub"]).first()
    if not user:
        raise Unauthorized("User not found")

    # Role in the token must still match the stored role
    if user.role.value != payload["role"]:
        raise Unauthorized("Invalid role")

    return user


def require_roles(*roles: Role):
    def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise Forbidden(f"User role {user.role.value} is not authorized to access this route")
        return user

    return checker
