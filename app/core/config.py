import os
from dotenv import load_dotenv

load_dotenv()

# -------- DATABASE --------
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./hotel_booking.db")

# -------- AUTH --------
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

# -------- REDIS / CELERY --------
REDIS_URL = os.getenv("REDIS_URL")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL") or REDIS_URL or "redis://localhost:6379/0"
ROOM_CACHE_TTL = int(os.getenv("ROOM_CACHE_TTL", 60))

# -------- BOOKING POLICY --------
PAYMENT_TIMEOUT_SECONDS = int(os.getenv("PAYMENT_TIMEOUT_SECONDS", 30))
MAX_NIGHTS = int(os.getenv("MAX_NIGHTS", 3))

# -------- LOGGING --------
LOG_DIR = os.getenv("LOG_DIR", "logs")

# -------- MAIL --------
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", 465))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_FROM = os.getenv("SMTP_FROM") or SMTP_USER
