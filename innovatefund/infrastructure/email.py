"""Utility helpers for sending transactional email notifications via SendGrid."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from innovatefund.config import get_settings

logger = logging.getLogger(__name__)

NOTIFICATION_TEMPLATE = "notification"
WELCOME_TEMPLATE = "welcome"

_LAYOUT = (
    '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">'
    '<div style="background: #667eea; padding: 30px; border-radius: 10px 10px 0 0;">'
    '<h1 style="color: white; margin: 0; text-align: center;">{heading}</h1>'
    "</div>"
    '<div style="background: white; padding: 30px; border-radius: 0 0 10px 10px;">'
    "{content}"
    "</div>"
    "</div>"
)

_INNOVATOR_STEPS = (
    "Complete your profile to attract investors",
    "Submit your first innovative idea",
    "Connect with potential collaborators",
    "Use our AI assistant for guidance",
)
_INVESTOR_STEPS = (
    "Explore investment opportunities",
    "Set your investment preferences",
    "Join sector-specific investor rooms",
    "Connect with innovators",
)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    parsed: Any = body
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                f"{item['message']} (help: {item['help']})"
                if item.get("help")
                else str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _log_sendgrid_exception(exc: Exception) -> None:
    """Log a SendGrid API error with helpful troubleshooting details."""

    status_code = getattr(exc, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(exc, "body", None))

    if status_code and details:
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
    elif status_code:
        logger.error("SendGrid API request failed with status %s", status_code)
    elif details:
        logger.error("SendGrid API request failed: %s", details)
    else:
        logger.exception("Error sending email via SendGrid: %s", exc)


def _log_unsuccessful_response(response: Any) -> None:
    status_code = getattr(response, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(response, "body", None))

    if details:
        logger.error("SendGrid API responded with status %s: %s", status_code, details)
    else:
        logger.error("SendGrid API responded with status %s", status_code)


def email_delivery_enabled() -> bool:
    settings = get_settings()
    return bool(settings.sendgrid_api_key and settings.sendgrid_sender)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        _log_sendgrid_exception(exc)
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_unsuccessful_response(response)
        return False

    return True


def _absolute_url(path: str) -> str:
    if not path:
        return ""
    if path.startswith(("http://", "https://")):
        return path
    base = get_settings().primary_frontend_url.rstrip("/")
    return f"{base}/{path.lstrip('/')}"


def _render_notification(data: Mapping[str, Any]) -> str:
    parts = [
        f'<h2 style="color: #333;">Hi {escape(str(data.get("recipientName") or ""))},</h2>',
        '<div style="background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">',
        f'<h3 style="color: #495057; margin-top: 0;">{escape(str(data.get("title") or ""))}</h3>',
        f'<p style="color: #6c757d; line-height: 1.6; margin: 0;">{escape(str(data.get("message") or ""))}</p>',
        "</div>",
    ]
    sender_name = data.get("senderName")
    if sender_name:
        parts.append(f'<p style="color: #6c757d;">From {escape(str(sender_name))}</p>')
    action_url = _absolute_url(str(data.get("actionUrl") or ""))
    if action_url:
        parts.append(
            '<div style="text-align: center; margin: 30px 0;">'
            f'<a href="{escape(action_url, quote=True)}" style="background: #667eea; color: white; '
            'padding: 12px 30px; text-decoration: none; border-radius: 6px;">View Details</a>'
            "</div>"
        )
    parts.append(
        '<p style="color: #6c757d; font-size: 14px;">This notification was sent from InnovateFund. '
        "You can update your email preferences in your account settings.</p>"
    )
    return _LAYOUT.format(heading="InnovateFund", content="".join(parts))


def _render_welcome(data: Mapping[str, Any]) -> str:
    is_innovator = data.get("userType") == "innovator"
    steps = _INNOVATOR_STEPS if is_innovator else _INVESTOR_STEPS
    role = "an innovator" if is_innovator else "an investor"
    items = "".join(f"<li>{escape(step)}</li>" for step in steps)
    content = (
        f'<h2 style="color: #333;">Hi {escape(str(data.get("name") or ""))},</h2>'
        "<p>Thank you for joining InnovateFund, where innovation meets investment!</p>"
        f"<p>As {role}, you're now part of a community that's shaping the future "
        "through collaboration and funding.</p>"
        f"<h3>Get Started:</h3><ul>{items}</ul>"
        '<div style="text-align: center; margin: 30px 0;">'
        f'<a href="{escape(_absolute_url("/"), quote=True)}" style="background: #667eea; '
        'color: white; padding: 12px 30px; text-decoration: none; border-radius: 6px;">'
        "Get Started</a></div>"
    )
    return _LAYOUT.format(heading="Welcome to InnovateFund!", content=content)


_TEMPLATES = {
    NOTIFICATION_TEMPLATE: _render_notification,
    WELCOME_TEMPLATE: _render_welcome,
}


def render_template(template_id: str, data: Mapping[str, Any]) -> str:
    """Render the HTML body for ``template_id``; unknown templates raise ``ValueError``."""

    try:
        renderer = _TEMPLATES[template_id]
    except KeyError as exc:
        raise ValueError(f"Unknown email template '{template_id}'") from exc
    return renderer(data)


def send_templated_email(
    to: str, subject: str, template_id: str, data: Mapping[str, Any]
) -> bool:
    """Render ``template_id`` with ``data`` and send it to ``to``."""

    return send_email(subject, render_template(template_id, data), to)


def send_welcome_email(email: str, name: str, user_type: str) -> bool:
    return send_templated_email(
        email,
        "Welcome to InnovateFund!",
        WELCOME_TEMPLATE,
        {"name": name, "userType": user_type},
    )


class SendGridEmailSender:
    """Email relay used by the notification dispatcher."""

    @property
    def enabled(self) -> bool:
        return email_delivery_enabled()

    def send(
        self, *, to: str, subject: str, template_id: str, data: Mapping[str, Any]
    ) -> bool:
        return send_templated_email(to, subject, template_id, data)


__all__ = [
    "NOTIFICATION_TEMPLATE",
    "SendGridEmailSender",
    "WELCOME_TEMPLATE",
    "email_delivery_enabled",
    "render_template",
    "send_email",
    "send_templated_email",
    "send_welcome_email",
]
