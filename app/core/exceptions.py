"""
Domain errors of the booking API.

Every failure a caller can see is one of these. Each carries the HTTP status
it maps to and a short error kind used in the response body; the handlers in
``app.main`` turn them into ``{"success": false, "error": ..., "message": ...}``.
"""

from fastapi import status


class BookingAPIError(Exception):
    """Base class for all categorized failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def error(self) -> str:
        return self.__class__.__name__


# ---------------- VALIDATION ----------------
class InvalidDateRange(BookingAPIError):
    default_message = "Check-out date must be after check-in date."


class StayTooLong(BookingAPIError):
    default_message = "User can only book up to 3 nights."


class RoomUnavailable(BookingAPIError):
    default_message = "Room is not available for the selected dates."


class InvalidRequest(BookingAPIError):
    default_message = "Invalid request."


class InvalidStatus(BookingAPIError):
    default_message = "Invalid status."


class InvalidTransition(BookingAPIError):
    default_message = "Status transition is not allowed."


class InvalidPaymentMethod(BookingAPIError):
    default_message = "Invalid payment method. Allowed values: Card, Bank, ThaiQR."


class BookingNotCancelable(BookingAPIError):
    default_message = "Booking cannot be canceled at this stage."


class NoRefundablePayment(BookingAPIError):
    default_message = "No completed payment found for refund."


class RefundDenied(BookingAPIError):
    default_message = "Refund failed. No refundable amount available."


class PaymentAlreadyCompleted(BookingAPIError):
    default_message = "A completed payment already exists for this booking."


# ---------------- POLICY ----------------
class PolicyError(BookingAPIError):
    default_message = "No policy rule applies."


class PolicyUndefined(PolicyError):
    default_message = "Refund policy has no rule for this stay length."


class InvalidMembershipPoints(PolicyError):
    default_message = "Membership points cannot be negative."


# ---------------- ACCESS ----------------
class Unauthorized(BookingAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this resource."


class Forbidden(BookingAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Your role is not allowed to perform this action."


# ---------------- LOOKUPS ----------------
class NotFound(BookingAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class HotelNotFound(NotFound):
    default_message = "Hotel not found."


class RoomNotFound(NotFound):
    default_message = "Room not found."


class BookingNotFound(NotFound):
    default_message = "Booking not found."


class RoomMissingForBooking(NotFound):
    default_message = "Room not found for this booking."


class PaymentNotFound(NotFound):
    default_message = "Payment not found."


# ---------------- INFRASTRUCTURE ----------------
class PersistenceFailure(BookingAPIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Could not save changes. Nothing was modified."


class InternalError(BookingAPIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error."


class NotificationFailure(Exception):
    """Raised inside the mailer; never leaves the notification helpers."""
