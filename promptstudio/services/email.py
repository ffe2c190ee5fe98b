"""
Transactional email over SMTP.

Sending is a side effect of a request that already succeeded, so every
failure is logged and reported as False rather than raised. With no SMTP
host configured, messages are logged and skipped.
"""
import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from promptstudio.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _build_message(recipient: str, subject: str, html: str, text: str) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.smtp_from
    msg["To"] = recipient
    msg.attach(MIMEText(text, "plain"))
    msg.attach(MIMEText(html, "html"))
    return msg


def _send(msg: MIMEMultipart) -> None:
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as server:
        server.starttls()
        if settings.smtp_user:
            server.login(settings.smtp_user, settings.smtp_password)
        server.send_message(msg)


async def send_email(recipient: str, subject: str, html: str, text: str) -> bool:
    if not settings.email_enabled:
        logger.info("Email disabled, not sending %r to %s", subject, recipient)
        return False

    msg = _build_message(recipient, subject, html, text)
    try:
        await asyncio.to_thread(_send, msg)
    except (smtplib.SMTPException, OSError):
        logger.exception("Email to %s failed", recipient)
        return False

    logger.info("Email sent to %s: %s", recipient, subject)
    return True


async def send_password_changed_notification(recipient: str, name: str) -> bool:
    login_url = f"{settings.app_url}/auth/login"
    html = f"""
    <h2>Password Changed Successfully</h2>
    <p>Hi {name},</p>
    <p>This is a confirmation that your password for {settings.app_name} has been changed successfully.</p>
    <p>If you made this change, no further action is required.</p>
    <p><strong>Security Alert:</strong> If you didn't change your password,
    please contact us immediately and secure your account.</p>
    <p><a href="{login_url}">Login to Your Account</a></p>
    """
    text = (
        f"Password Changed Successfully\n\n"
        f"Hi {name},\n\n"
        f"This is a confirmation that your password for {settings.app_name} has been changed successfully.\n\n"
        f"If you made this change, no further action is required.\n\n"
        f"SECURITY ALERT: If you didn't change your password, please contact us immediately "
        f"and secure your account.\n\n"
        f"Login to your account: {login_url}"
    )
    return await send_email(recipient, f"Password Changed - {settings.app_name}", html, text)
