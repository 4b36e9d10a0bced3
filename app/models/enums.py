from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"
    CHECKED_IN = "checkedIn"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"


class PaymentMethod(str, Enum):
    CARD = "Card"
    BANK = "Bank"
    THAI_QR = "ThaiQR"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    HOTEL_MANAGER = "hotelManager"


class MembershipTier(str, Enum):
    NONE = "none"
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"


class RoomType(str, Enum):
    STANDARD = "standard"
    SUPERIOR = "superior"
    DELUXE = "deluxe"
    SUITE = "suite"


class LogType(str, Enum):
    REFUND = "REFUND"
    PAYMENT = "PAYMENT"
    WARNING = "WARNING"
    MEMBERSHIP = "MEMBERSHIP"


def enum_values(enum_cls):
    """Persist enum values ("checkedIn"), not member names ("CHECKED_IN")."""
    return [member.value for member in enum_cls]
