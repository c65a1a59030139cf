"""
Email and notification utilities.

This module provides functions for sending email notifications
when a postprocessing job fails.
"""

import logging
import os
import smtplib
import traceback
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_SMTP_HOST = "localhost"
DEFAULT_SMTP_PORT = 25
DEFAULT_FROM_EMAIL = "noreply@localhost"


def send_email(
    to_email: str | list[str],
    subject: str,
    body: str,
    from_email: Optional[str] = None,
    smtp_host: Optional[str] = None,
    smtp_port: Optional[int] = None,
) -> bool:
    """
    Send a plain text email.

    Args:
        to_email: Recipient email address(es)
        subject: Email subject
        body: Email body text
        from_email: Sender email address (default: FROM_EMAIL env var)
        smtp_host: SMTP server hostname (default: SMTP_HOST env var)
        smtp_port: SMTP server port (default: SMTP_PORT env var)

    Returns:
        True if sent successfully, False otherwise
    """
    from_email = from_email or os.getenv("FROM_EMAIL", DEFAULT_FROM_EMAIL)
    smtp_host = smtp_host or os.getenv("SMTP_HOST", DEFAULT_SMTP_HOST)
    smtp_port = smtp_port or int(os.getenv("SMTP_PORT", DEFAULT_SMTP_PORT))

    if isinstance(to_email, str):
        recipients = [to_email]
    else:
        recipients = list(to_email)

    recipients = [r for r in recipients if r and r.strip()]

    if not recipients:
        logger.warning("No valid recipients for email")
        return False

    msg = MIMEMultipart()
    msg["Subject"] = subject
    msg["From"] = from_email
    msg["To"] = ", ".join(recipients)
    msg.attach(MIMEText(body, "plain"))

    try:
        with smtplib.SMTP(smtp_host, smtp_port) as smtp:
            smtp.sendmail(from_email, recipients, msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Error sending email: {e}")
        return False

    logger.info(f"Email sent successfully to {recipients}")
    return True


def send_error_email(
    subject: str,
    message: str,
    curator_email: Optional[str] = None,
    include_traceback: bool = True,
) -> bool:
    """
    Send an error notification email to the curator.

    Without a curator address the error is only logged.

    Args:
        subject: Error subject
        message: Error message
        curator_email: Recipient email (default: CURATOR_EMAIL env var)
        include_traceback: Include the traceback of the exception being handled

    Returns:
        True if sent successfully, False otherwise
    """
    curator_email = curator_email or os.getenv("CURATOR_EMAIL", "")

    if not curator_email:
        logger.warning("CURATOR_EMAIL not set, cannot send error notification")
        logger.error(f"Error notification: {subject}")
        logger.error(f"Message: {message}")
        return False

    body_parts = [
        "An error occurred in a postprocessing job:",
        "",
        f"Subject: {subject}",
        "",
        "Message:",
        message,
    ]

    if include_traceback:
        tb = traceback.format_exc()
        if tb and tb != "NoneType: None\n":
            body_parts.extend(["", "Traceback:", tb])

    return send_email(
        to_email=curator_email,
        subject=f"[biomine Error] {subject}",
        body="\n".join(body_parts),
    )
