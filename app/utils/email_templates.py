"""Subjects and bodies for transactional emails."""
from app.core.config import settings
from app.core.constants import TokenType

_BUTTON_STYLE = (
    "display: inline-block; padding: 10px 20px; color: #fff; "
    "background-color: #0a58b8; text-decoration: none; border-radius: 5px;"
)


def _wrap(title: str, paragraphs: list[str]) -> str:
    inner = "".join(f"<p>{p}</p>" for p in paragraphs)
    return (
        '<div style="font-family: Arial, sans-serif; line-height: 1.6;">'
        f'<h2 style="color: #333;">{title}</h2>{inner}'
        f"<p>Thank you,<br>{settings.SENDER_NAME}</p></div>"
    )


def password_link(token: str) -> str:
    return f"{settings.CLIENT_DOMAIN.rstrip('/')}/auth/set-password/{token}"


def password_email(token_type: TokenType, token: str) -> tuple[str, str, str]:
    """(subject, text, html) for a reset-password or set-password link."""
    url = password_link(token)
    if token_type == TokenType.RESET_PASSWORD:
        subject = "Password Reset Request"
        text = (
            "Dear user,\n\n"
            f"We received a request to reset your password. Open this link to reset it:\n{url}\n\n"
            "If you did not request a password reset, please ignore this email."
        )
        html = _wrap(subject, [
            "Dear user,",
            "We received a request to reset your password. Click the button below to reset it:",
            f'<a href="{url}" style="{_BUTTON_STYLE}">Reset Password</a>',
            "If you did not request a password reset, please ignore this email.",
        ])
    else:
        subject = "Set Your Password"
        text = (
            "Dear user,\n\n"
            f"Welcome! Open this link to set your password:\n{url}\n\n"
            "If you encounter any issues, please contact our support team."
        )
        html = _wrap(subject, [
            "Dear user,",
            "Welcome! Please click the button below to set your password:",
            f'<a href="{url}" style="{_BUTTON_STYLE}">Set Password</a>',
            "If you encounter any issues, please contact our support team.",
        ])
    return subject, text, html


def verification_email(token: str) -> tuple[str, str, str]:
    url = f"{settings.CLIENT_DOMAIN.rstrip('/')}/auth/verify-email?token={token}"
    subject = "Email Verification"
    text = (
        "Dear user,\n\n"
        f"To verify your email, open this link: {url}\n\n"
        "If you did not create an account, then ignore this email."
    )
    html = _wrap(subject, [
        "Dear user,",
        f'<a href="{url}" style="{_BUTTON_STYLE}">Verify Email</a>',
        "If you did not create an account, then ignore this email.",
    ])
    return subject, text, html


def clinic_onboarding_email(clinic, admin) -> tuple[str, str, str]:
    url = f"{settings.CLIENT_DOMAIN.rstrip('/')}/clinics/{clinic.id}"
    subject = "New Clinic Onboarding Request"
    lines = [
        f"Clinic Name: {clinic.clinic_name}",
        f"Contact Email: {clinic.contact_email}",
        f"Address: {clinic.address or ''}, {clinic.city or ''}, {clinic.state or ''}",
        f"Admin details: Name: {admin.name}, Email: {admin.email}",
    ]
    text = (
        "Dear Superadmin,\n\n"
        "A new clinic has requested onboarding to the system. Below are the clinic details:\n\n"
        + "\n".join(lines)
        + f"\n\nTo approve or reject this clinic, please visit the following link:\n{url}\n"
    )
    html = _wrap(subject, [
        "Dear Superadmin,",
        "A new clinic has requested onboarding to the system. Below are the clinic details:",
        "<br>".join(lines),
        f'<a href="{url}" style="{_BUTTON_STYLE}">Review Clinic</a>',
    ])
    return subject, text, html


def clinic_status_email(clinic) -> tuple[str, str, str]:
    subject = f"Your clinic is now {clinic.status}"
    text = (
        f"Dear {clinic.clinic_name} team,\n\n"
        f"Your clinic registration on {settings.APP_NAME} has been marked as {clinic.status}.\n"
    )
    html = _wrap(subject, [
        f"Dear {clinic.clinic_name} team,",
        f"Your clinic registration on {settings.APP_NAME} has been marked as <strong>{clinic.status}</strong>.",
    ])
    return subject, text, html
