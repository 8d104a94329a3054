import logging
import smtplib
from email.message import EmailMessage

from fastapi.concurrency import run_in_threadpool

from app.core.config import settings

logger = logging.getLogger(__name__)


def _send_smtp(message: EmailMessage) -> None:
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as smtp:
        smtp.starttls()
        if settings.SMTP_USER:
            smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD or "")
        smtp.send_message(message)


async def send_email(to: str, subject: str, body: str) -> None:
    """Send through SMTP when configured, otherwise write the mail to the log."""
    if not settings.SMTP_HOST:
        logger.info("EMAIL to=%s subject=%s\n%s", to, subject, body)
        return

    message = EmailMessage()
    message["From"] = settings.MAIL_FROM
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body)
    await run_in_threadpool(_send_smtp, message)


def password_reset_link(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"


async def send_password_reset(to: str, token: str) -> None:
    link = password_reset_link(token)
    body = (
        "A password reset was requested for your QuizGrad account.\n\n"
        f"Open this link within {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes to choose a new password:\n"
        f"{link}\n\n"
        "If you did not ask for this, you can ignore this email."
    )
    await send_email(to, "Reset your QuizGrad password", body)
