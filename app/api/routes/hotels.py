from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, require_roles
from app.core.exceptions import HotelNotFound, InvalidRequest
from app.models.enums import Role
from app.models.hotel import Hotel
from app.models.user import User
from app.schemas.hotel import HotelCreate, HotelOut

router = APIRouter(prefix="/hotels", tags=["Hotels"])


# =====================================================================
# CREATE HOTEL  (Admin Only)
# =====================================================================
@router.post("/", response_model=HotelOut, status_code=201)
def create_hotel(
    data: HotelCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_roles(Role.ADMIN)),
):
    if db.query(Hotel).filter(Hotel.name == data.name).first():
        raise InvalidRequest(f"Hotel '{data.name}' already exists")

    hotel = Hotel(name=data.name, address=data.address, tel=data.tel)

    db.add(hotel)
    db.commit()
    db.refresh(hotel)

    return hotel


# =====================================================================
# LIST HOTELS
# =====================================================================
@router.get("/", response_model=list[HotelOut])
def list_hotels(page: int = 1, limit: int = 25, db: Session = Depends(get_db)):
    hotels = (
        db.query(Hotel)
        .order_by(Hotel.name)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return hotels


# =====================================================================
# HOTEL DETAILS
# =====================================================================
@router.get("/{hotel_id}", response_model=HotelOut)
def get_hotel(hotel_id: int, db: Session = Depends(get_db)):
    hotel = db.query(Hotel).filter(Hotel.id == hotel_id).first()
    if not hotel:
        raise HotelNotFound(f"No hotel with the id of {hotel_id}")
    return hotel
