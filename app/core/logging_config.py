"""
loguru sinks for the booking API.

Everything at INFO goes to app.log. Records bound with ``log_type`` are
copied to the file of their category so booking, payment and refund trails
can be read on their own. ERROR and above also land in errors.log.
"""

import os

from loguru import logger

from app.core.config import LOG_DIR

LINE_FORMAT = "{time} | {level} | {message}"

# file name -> log_type values routed to it
CATEGORY_FILES = {
    "bookings.log": ("booking",),
    "payments.log": ("payment",),
    "refunds.log": ("refund", "membership"),
}

os.makedirs(LOG_DIR, exist_ok=True)

logger.remove()

logger.add(
    f"{LOG_DIR}/app.log",
    rotation="1 week",
    retention="4 weeks",
    level="INFO",
    enqueue=True,
    format=LINE_FORMAT,
)

for filename, log_types in CATEGORY_FILES.items():
    logger.add(
        f"{LOG_DIR}/{filename}",
        rotation="1 week",
        retention="8 weeks" if filename == "refunds.log" else "4 weeks",
        level="INFO",
        enqueue=True,
        filter=lambda record, log_types=log_types: record["extra"].get("log_type") in log_types,
        format=LINE_FORMAT,
    )

logger.add(
    f"{LOG_DIR}/errors.log",
    rotation="1 week",
    retention="8 weeks",
    level="ERROR",
    enqueue=True,
)


def get_logger():
    return logger
