import logging
import smtplib
import ssl
from email.message import EmailMessage

from resume_tailor.config import settings

logger = logging.getLogger("app.mailer")


def _smtp_ready() -> bool:
    return bool(settings.smtp_host)


def send_magic_link(email: str, link: str) -> bool:
    """Email a sign-in link. Without SMTP configured the link is only logged."""
    if not _smtp_ready():
        logger.info("SMTP is not configured; magic link for %s: %s", email, link)
        return False

    msg = EmailMessage()
    msg["Subject"] = "Your Resume Tailor sign-in link"
    msg["From"] = settings.smtp_from
    msg["To"] = email
    msg.set_content(
        f"Click the link below to sign in. It expires in "
        f"{settings.magic_link_ttl_seconds // 60} minutes.\n\n{link}\n"
    )

    context = ssl.create_default_context()
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=15) as server:
        if settings.smtp_use_tls:
            server.starttls(context=context)
        if settings.smtp_user and settings.smtp_password:
            server.login(settings.smtp_user, settings.smtp_password)
        server.send_message(msg)
    return True
