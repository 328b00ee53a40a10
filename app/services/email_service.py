import smtplib
import logging
from email.message import EmailMessage
from app.core.config import settings
from app.core.constants import TokenType
from app.utils import email_templates

logger = logging.getLogger(__name__)


def send_email(to_email: str, subject: str, body: str, html: str | None = None) -> bool:
    if settings.EMAIL_BACKEND == "console":
        logger.info("Email to %s | %s\n%s", to_email, subject, body)
        return True

    smtp_host = settings.SMTP_HOST
    smtp_port = settings.SMTP_PORT
    smtp_user = settings.SMTP_USER
    smtp_pass = settings.SMTP_PASSWORD

    if not smtp_user or not smtp_pass:
        raise Exception("SMTP credentials not configured (SMTP_USER / SMTP_PASSWORD)")

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.EMAIL_FROM or f"{settings.SENDER_NAME} <{smtp_user}>"
    msg["To"] = to_email
    msg.set_content(body)
    if html:
        msg.add_alternative(html, subtype="html")

    try:
        with smtplib.SMTP(smtp_host, smtp_port, timeout=10) as server:
            server.ehlo()
            if smtp_port == 587:
                server.starttls()
                server.ehlo()
            server.login(smtp_user, smtp_pass)
            server.send_message(msg)
        return True
    except Exception:
        logger.exception("Failed to send email")
        raise


def send_password_email(to_email: str, token: str, token_type: TokenType) -> bool:
    subject, body, html = email_templates.password_email(token_type, token)
    return send_email(to_email, subject, body, html)


def send_verification_email(to_email: str, token: str) -> bool:
    subject, body, html = email_templates.verification_email(token)
    return send_email(to_email, subject, body, html)


def send_clinic_onboarding_notification(clinic, admin) -> bool:
    """Tell the platform superadmin a clinic is waiting for approval."""
    if not settings.SUPERADMIN_EMAIL:
        logger.warning("SUPERADMIN_EMAIL not set; skipping onboarding notice for clinic %s", clinic.id)
        return False
    subject, body, html = email_templates.clinic_onboarding_email(clinic, admin)
    return send_email(settings.SUPERADMIN_EMAIL, subject, body, html)


def send_clinic_status_email(to_email: str, clinic) -> bool:
    subject, body, html = email_templates.clinic_status_email(clinic)
    return send_email(to_email, subject, body, html)
