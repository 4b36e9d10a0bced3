from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_current_user
from app.models.user import User
from app.schemas.booking import BookingCreate, BookingCreated, BookingOut, BookingUpdate
from app.services import booking_service

router = APIRouter(tags=["Bookings"])


# ---------------------------------------------------------------------
# CREATE BOOKING
# ---------------------------------------------------------------------
@router.post("/rooms/{room_id}/bookings", response_model=BookingCreated, status_code=201)
def create_booking(
    room_id: int,
    data: BookingCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    booking, payment = booking_service.create_booking(
        db, room_id, user, data.check_in_date, data.check_out_date, data.method
    )
    return {"booking": booking, "payment": payment}


# ---------------------------------------------------------------------
# LIST / GET
# ---------------------------------------------------------------------
@router.get("/bookings", response_model=list[BookingOut])
def list_bookings(
    hotel_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return booking_service.list_bookings(db, user, hotel_id=hotel_id)


@router.get("/bookings/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return booking_service.get_booking(db, booking_id, user)


# ---------------------------------------------------------------------
# UPDATE (status XOR dates)
# ---------------------------------------------------------------------
@router.put("/bookings/{booking_id}", response_model=BookingOut)
def update_booking(
    booking_id: int,
    data: BookingUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return booking_service.update_booking(
        db,
        booking_id,
        user,
        status=data.status,
        check_in=data.check_in_date,
        check_out=data.check_out_date,
    )


# ---------------------------------------------------------------------
# CANCEL (refund to credit)
# ---------------------------------------------------------------------
@router.post("/bookings/{booking_id}/cancel", response_model=BookingOut)
def cancel_booking(booking_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return booking_service.cancel_booking(db, booking_id, user)


# ---------------------------------------------------------------------
# DELETE (admin)
# ---------------------------------------------------------------------
@router.delete("/bookings/{booking_id}")
def delete_booking(booking_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    booking_service.delete_booking(db, booking_id, user)
    return {"success": True, "data": {}}
