"""
Email Service

Delivers verification and password reset codes through the Resend
transactional email API.

Delivery is a single best-effort attempt: no retry, no backoff, no queue.
A failed send is reported to the caller, which falls back to showing the
code to the user directly.
"""

import enum
import html
import logging
from typing import Optional

import httpx

from studizen.core.config import settings
from studizen.core.http_client import get_http_client
from studizen.core.i18n import resolve_language, translate
from studizen.models.enums import OTPPurpose


logger = logging.getLogger(__name__)


class DispatchResult(str, enum.Enum):
    """Outcome of one delivery attempt."""
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


class EmailDeliveryError(Exception):
    """The email provider rejected or never received the message."""


# Message-table prefix for each kind of code email
TEMPLATE_PREFIX = {
    OTPPurpose.EMAIL_VERIFICATION: "email",
    OTPPurpose.PASSWORD_RESET: "reset_email",
}


def get_email_subject(language: str, purpose: OTPPurpose = OTPPurpose.EMAIL_VERIFICATION) -> str:
    return translate(f"{TEMPLATE_PREFIX[purpose]}_subject", language)


def get_code_email_html(
    otp_code: str,
    display_name: Optional[str] = None,
    language: str = "en",
    purpose: OTPPurpose = OTPPurpose.EMAIL_VERIFICATION,
) -> str:
    """Generate HTML content for a verification or password reset email."""
    prefix = TEMPLATE_PREFIX[purpose]
    if display_name:
        intro = translate(f"{prefix}_intro_named", language, name=html.escape(display_name))
    else:
        intro = translate(f"{prefix}_intro", language)
    heading = translate(f"{prefix}_heading", language)
    ignore = translate(f"{prefix}_ignore", language)
    expiry = translate("email_expiry", language, minutes=settings.OTP_EXPIRE_MINUTES)

    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="text-align: center; margin-bottom: 30px;">
            <h1 style="color: #2563eb; margin: 0;">Studizen</h1>
            <p style="color: #6b7280; margin: 5px 0;">{translate("email_tagline", language)}</p>
        </div>
        <div style="background-color: #f8fafc; border-radius: 8px; padding: 30px; text-align: center;">
            <h2 style="color: #1f2937; margin-bottom: 20px;">{heading}</h2>
            <p style="color: #4b5563; margin-bottom: 30px;">{intro}</p>
            <div style="background-color: #2563eb; color: white; font-size: 32px; font-weight: bold; padding: 20px; border-radius: 8px; letter-spacing: 8px; margin: 20px 0;">
                {otp_code}
            </div>
            <p style="color: #6b7280; font-size: 14px; margin-top: 20px;">
                {expiry}<br>
                {translate("email_do_not_share", language)}
            </p>
        </div>
        <div style="text-align: center; margin-top: 30px;">
            <p style="color: #9ca3af; font-size: 12px;">{ignore}</p>
        </div>
    </div>
    """


async def send_email(to_email: str, subject: str, html_body: str) -> None:
    """
    Submit one message to the email provider.

    Raises:
        EmailDeliveryError: On transport failure, a non-2xx response, or
            missing provider configuration.
    """
    if not settings.RESEND_API_KEY:
        raise EmailDeliveryError("RESEND_API_KEY is not configured")

    client = get_http_client()
    try:
        response = await client.post(
            settings.RESEND_API_URL,
            headers={"Authorization": f"Bearer {settings.RESEND_API_KEY}"},
            json={
                "from": f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM_ADDRESS}>",
                "to": [to_email],
                "subject": subject,
                "html": html_body,
            },
        )
    except httpx.HTTPError as exc:
        raise EmailDeliveryError(f"Transport error: {exc}") from exc

    if response.status_code >= 300:
        raise EmailDeliveryError(f"Provider returned {response.status_code}: {response.text}")


async def dispatch(
    to_email: str,
    otp_code: str,
    display_name: Optional[str] = None,
    language: Optional[str] = None,
    purpose: OTPPurpose = OTPPurpose.EMAIL_VERIFICATION,
) -> DispatchResult:
    """
    Send a verification or password reset code by email.

    Args:
        to_email: Recipient email address.
        otp_code: The code to deliver.
        display_name: Optional name for the greeting.
        language: Display language for subject and body.
        purpose: Selects the verification or password reset template.

    Returns:
        DispatchResult: DELIVERED or FAILED. Never raises for delivery errors.
    """
    language = resolve_language(language, default=settings.DEFAULT_LANGUAGE)

    # In development without a provider key, just log the code
    if settings.is_development and not settings.RESEND_API_KEY:
        logger.info(f"[DEV MODE] {purpose.value} OTP for {to_email}: {otp_code}")
        print(f"\n{'='*50}")
        print("📧 DEVELOPMENT MODE - Email OTP")
        print(f"To: {to_email}")
        print(f"OTP Code: {otp_code}")
        print(f"{'='*50}\n")
        return DispatchResult.DELIVERED

    try:
        await send_email(
            to_email,
            get_email_subject(language, purpose),
            get_code_email_html(otp_code, display_name, language, purpose),
        )
    except Exception as e:
        logger.error(f"Failed to send {purpose.value} email to {to_email}: {e}")
        return DispatchResult.FAILED

    logger.info(f"{purpose.value} email sent to {to_email}")
    return DispatchResult.DELIVERED
