from jose import jwt, JWTError

from app.core.config import JWT_SECRET, JWT_ALGORITHM
from app.core.exceptions import Unauthorized


def decode_token(token: str):
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid or expired token")

    if "sub" not in payload or "role" not in payload:
        raise Unauthorized("Invalid token payload")

    return payload
