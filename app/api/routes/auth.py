from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_current_user, require_roles
from app.core.exceptions import HotelNotFound, InvalidRequest, NotFound, Unauthorized
from app.core.jwt import create_access_token
from app.core.logging_config import get_logger
from app.core.security import hash_password, verify_password
from app.models.enums import Role
from app.models.hotel import Hotel
from app.models.user import User
from app.schemas.user import UserCreate, UserLogin, UserOut, UserRoleUpdate, TokenOut

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = get_logger()


# =====================================================================
#                               REGISTER
# =====================================================================
@router.post("/register", response_model=UserOut, status_code=201)
def register(data: UserCreate, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == data.email).first():
        raise InvalidRequest("User already exists")

    user = User(
        name=data.name,
        tel=data.tel,
        email=data.email,
        password_hash=hash_password(data.password),
        role=Role.USER,
    )

    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User registered | {user.email} | {user.role.value}")

    return user


# =====================================================================
#                                LOGIN
# =====================================================================
@router.post("/login", response_model=TokenOut)
def login(data: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email).first()

    if not user or not verify_password(data.password, user.password_hash):
        raise Unauthorized("Invalid credentials")

    token = create_access_token({"sub": user.email, "role": user.role.value})

    return {"access_token": token, "role": user.role, "token_type": "bearer"}


# =====================================================================
#                                  ME
# =====================================================================
@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user


# =====================================================================
#                         CHANGE ROLE  (Admin Only)
# =====================================================================
@router.put("/users/{user_id}/role", response_model=UserOut)
def change_role(
    user_id: int,
    data: UserRoleUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_roles(Role.ADMIN)),
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound(f"No user with the id of {user_id}")

    hotel_id = None
    if data.role == Role.HOTEL_MANAGER:
        if data.responsible_hotel_id is None:
            raise InvalidRequest("Hotel managers need a responsible hotel")
        if not db.query(Hotel).filter(Hotel.id == data.responsible_hotel_id).first():
            raise HotelNotFound(f"No hotel with the id of {data.responsible_hotel_id}")
        hotel_id = data.responsible_hotel_id

    previous = user.role
    user.role = data.role
    user.responsible_hotel_id = hotel_id
    db.commit()
    db.refresh(user)

    logger.info(f"Role changed | User={user.id} | {previous.value} -> {user.role.value} | by admin {admin.id}")

    return user
