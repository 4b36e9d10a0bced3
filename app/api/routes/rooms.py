from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from app.core.config import ROOM_CACHE_TTL
from app.core.dependencies import get_db, require_roles
from app.core.exceptions import Forbidden, HotelNotFound, InvalidRequest, RoomNotFound, RoomUnavailable
from app.core.redis import get_cache, set_cache, delete_cache, hotel_rooms_key
from app.models.enums import Role
from app.models.hotel import Hotel
from app.models.room import Room, RoomUnavailablePeriod
from app.models.user import User
from app.schemas.room import RoomCreate, RoomOut
from app.utils.availability import find_conflict

router = APIRouter(tags=["Rooms"])


# =====================================================================
# CREATE ROOM  (Admin or the hotel's manager)
# =====================================================================
@router.post("/hotels/{hotel_id}/rooms", response_model=RoomOut, status_code=201)
def create_room(
    hotel_id: int,
    data: RoomCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(Role.ADMIN, Role.HOTEL_MANAGER)),
):
    hotel = db.query(Hotel).filter(Hotel.id == hotel_id).first()
    if not hotel:
        raise HotelNotFound(f"No hotel with the id of {hotel_id}")

    if user.role == Role.HOTEL_MANAGER and user.responsible_hotel_id != hotel_id:
        raise Forbidden("You do not manage this hotel")

    if db.query(Room).filter(Room.hotel_id == hotel_id, Room.number == data.number).first():
        raise InvalidRequest(f"Room {data.number} already exists in this hotel")

    if find_conflict(data.unavailable_periods):
        raise RoomUnavailable("Unavailable periods must not overlap")

    room = Room(hotel_id=hotel_id, type=data.type, number=data.number, price=data.price)
    room.unavailable_periods = [
        RoomUnavailablePeriod(start_date=p.start_date, end_date=p.end_date)
        for p in data.unavailable_periods
    ]

    db.add(room)
    db.commit()
    db.refresh(room)

    delete_cache(hotel_rooms_key(hotel_id))

    return room


# =====================================================================
# LIST ROOMS OF A HOTEL  (cached)
# =====================================================================
@router.get("/hotels/{hotel_id}/rooms", response_model=list[RoomOut])
def list_rooms(hotel_id: int, db: Session = Depends(get_db)):
    key = hotel_rooms_key(hotel_id)

    cached = get_cache(key)
    if cached is not None:
        return cached

    if not db.query(Hotel).filter(Hotel.id == hotel_id).first():
        raise HotelNotFound(f"No hotel with the id of {hotel_id}")

    rooms = db.query(Room).filter(Room.hotel_id == hotel_id).order_by(Room.number).all()
    payload = jsonable_encoder([RoomOut.model_validate(r) for r in rooms])

    set_cache(key, payload, ttl=ROOM_CACHE_TTL)

    return payload


# =====================================================================
# ROOM DETAILS
# =====================================================================
@router.get("/rooms/{room_id}", response_model=RoomOut)
def get_room(room_id: int, db: Session = Depends(get_db)):
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        raise RoomNotFound(f"No room with the id of {room_id}")
    return room
