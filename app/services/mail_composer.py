"""Build the outbound notification email for a contact submission."""

from __future__ import annotations

from email.utils import formataddr
from html import escape

from app.adapters.mail.base import OutboundMail
from app.services.contact_validation import ContactMessage

EMAIL_NOT_PROVIDED = "Not Provided"
SUBJECT_PREFIX = "New Message from "


def _subject_name(name: str) -> str:
    # Header values may not contain line breaks
    return " ".join(name.split()) or "Anonymous"


def render_text_body(contact: ContactMessage) -> str:
    email = contact.email or EMAIL_NOT_PROVIDED
    return (
        f"Name: {contact.display_name}\n"
        f"Email: {email}\n"
        "\n"
        "Message:\n"
        f"{contact.message}\n"
    )


def render_html_body(contact: ContactMessage) -> str:
    """Render the HTML body with every submitted field escaped."""
    name = escape(contact.display_name)
    email = escape(contact.email or EMAIL_NOT_PROVIDED)
    message = escape(contact.message).replace("\r\n", "\n").replace("\n", "<br>")
    return (
        "<h3>New Contact Form Submission</h3>\n"
        f"<p><strong>Name:</strong> {name}</p>\n"
        f"<p><strong>Email:</strong> {email}</p>\n"
        "<p><strong>Message:</strong></p>\n"
        f"<p>{message}</p>\n"
    )


def compose_outbound_mail(
    contact: ContactMessage,
    *,
    sender_address: str,
    receiver_address: str,
    sender_name: str = "Portfolio Contact",
    anonymous_reply_to: str = "anonymous@portfolio.com",
) -> OutboundMail:
    """Derive the outbound email from a validated submission.

    Args:
        contact: Validated submission.
        sender_address: Authenticated sender mailbox.
        receiver_address: Mailbox that receives submissions.
        sender_name: Display label for the From header.
        anonymous_reply_to: Reply-To used when no email was submitted.

    Returns:
        OutboundMail: Deterministic rendering of the submission.
    """
    reply_to = contact.email.strip() if contact.has_email else anonymous_reply_to

    return OutboundMail(
        sender=formataddr((sender_name, sender_address)),
        to=receiver_address,
        reply_to=reply_to,
        subject=SUBJECT_PREFIX + _subject_name(contact.display_name),
        text_body=render_text_body(contact),
        html_body=render_html_body(contact),
    )
