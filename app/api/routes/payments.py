from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_current_user
from app.models.user import User
from app.schemas.payment import PaymentOut, PaymentUpdate
from app.services import payment_service

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("/", response_model=list[PaymentOut])
def list_payments(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return payment_service.list_payments(db, user)


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(payment_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return payment_service.get_payment(db, payment_id, user)


@router.put("/{payment_id}", response_model=PaymentOut)
def update_payment(
    payment_id: int,
    data: PaymentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return payment_service.update_payment(db, payment_id, user, status=data.status, method=data.method)
