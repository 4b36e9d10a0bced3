# Import every model so relationships resolve and metadata is complete
from app.db.session import Base  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.hotel import Hotel  # noqa: F401
from app.models.room import Room, RoomUnavailablePeriod  # noqa: F401
from app.models.booking import Booking  # noqa: F401
from app.models.payment import Payment  # noqa: F401
from app.models.log import Log  # noqa: F401
