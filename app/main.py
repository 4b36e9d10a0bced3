from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.db import base  # noqa: F401
from app.api.routes import auth, hotels, rooms, bookings, payments
from app.core.exceptions import BookingAPIError, InternalError

# ⭐ Import logging system
from app.core.logging_config import get_logger

logger = get_logger()

app = FastAPI(
    title="Hotel Booking API",
    version="1.0.0",
    description="API for Hotels, Rooms, Bookings, Payments and Refunds"
)


# ⭐ Request Logging Middleware
@app.middleware("http")
async def log_requests(request, call_next):
    logger.info(f"REQUEST: {request.method} {request.url}")

    try:
        response = await call_next(request)
        logger.info(f"RESPONSE: {response.status_code} {request.url}")
        return response

    except Exception as e:
        logger.error(f"ERROR: {request.url} -> {str(e)}")
        raise e


# ⭐ Categorized failures -> {"success": false, "error": ..., "message": ...}
@app.exception_handler(BookingAPIError)
async def booking_error_handler(request: Request, exc: BookingAPIError):
    if exc.status_code >= 500:
        logger.error(f"{exc.error}: {request.method} {request.url} -> {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.error, "message": exc.message},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error: {request.method} {request.url}")
    error = InternalError()
    return JSONResponse(
        status_code=error.status_code,
        content={"success": False, "error": error.error, "message": error.message},
    )


# ⭐ CORS (important for frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Can restrict later for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------- ROUTERS --------
app.include_router(auth.router)
app.include_router(hotels.router)
app.include_router(rooms.router)
app.include_router(bookings.router)
app.include_router(payments.router)


@app.get("/", tags=["Root"])
def root():
    return {"message": "Backend running successfully"}
