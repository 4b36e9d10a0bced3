import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.core import config
from app.core.exceptions import NotificationFailure
from app.core.logging_config import get_logger

logger = get_logger()

SIGNATURE = "The TCC Hotel Booking Team"


def _send(to: str, subject: str, html: str) -> None:
    if not config.SMTP_HOST:
        logger.warning(f"SMTP not configured, skipping mail '{subject}' to {to}")
        return

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = config.SMTP_FROM
    msg["To"] = to
    msg.attach(MIMEText(html, "html"))

    try:
        with smtplib.SMTP_SSL(config.SMTP_HOST, config.SMTP_PORT, timeout=10) as server:
            if config.SMTP_USER and config.SMTP_PASSWORD:
                server.login(config.SMTP_USER, config.SMTP_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        raise NotificationFailure(f"Failed to send '{subject}' to {to}: {e}") from e

    logger.info(f"Mail '{subject}' sent to {to}")


def _deliver(to: str, subject: str, html: str) -> bool:
    # Mail never fails the caller
    try:
        _send(to, subject, html)
        return True
    except NotificationFailure as e:
        logger.error(str(e))
        return False


# ---------------------------------------------------------------------
# REFUND NOTICE
# ---------------------------------------------------------------------
def send_refund_notice(email: str, name: str, booking_id: int, amount: float) -> bool:
    html = f"""
    <div style="font-family: Arial, sans-serif; color: #333;">
        <h2>Your booking has been canceled</h2>
        <p>Dear <strong>{name}</strong>,</p>
        <p>Booking <strong>#{booking_id}</strong> was canceled on
        {datetime.utcnow():%Y-%m-%d %H:%M} UTC.</p>
        <p>A refund of <strong>{amount:,.2f}</strong> has been added to your account credit.</p>
        <p>Best regards,<br><strong>{SIGNATURE}</strong></p>
    </div>
    """
    return _deliver(email, "[No-reply] Refund Processed", html)


# ---------------------------------------------------------------------
# PAYMENT STATUS NOTICE
# ---------------------------------------------------------------------
def send_payment_status_notice(email: str, name: str, booking_id: int, status: str) -> bool:
    html = f"""
    <div style="font-family: Arial, sans-serif; color: #333;">
        <h2>Payment update</h2>
        <p>Dear <strong>{name}</strong>,</p>
        <p>The payment for booking <strong>#{booking_id}</strong> is now
        <strong>{status}</strong>.</p>
        <p>Best regards,<br><strong>{SIGNATURE}</strong></p>
    </div>
    """
    return _deliver(email, f"[No-reply] Payment {status}", html)
