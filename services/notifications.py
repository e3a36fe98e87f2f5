"""Inert email, SMS and push senders.

Nothing is delivered: each sender validates its request, logs it, and reports
success or failure according to a fixed simulated success rate.
"""

from __future__ import annotations

import logging
import random
import re
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.schemas import (
    EmailNotificationRequest,
    PushNotificationRequest,
    Severity,
    SMSNotificationRequest,
)
from services.errors import ValidationError

logger = logging.getLogger(__name__)

EMAIL_SUCCESS_RATE = 0.9
SMS_SUCCESS_RATE = 0.95
SMS_MAX_LENGTH = 140

_PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]+$")

_SEVERITY_COLORS = {
    Severity.info: "#3b82f6",
    Severity.warning: "#f59e0b",
    Severity.danger: "#ef4444",
    Severity.emergency: "#dc2626",
}

_SMS_PREFIXES = {
    Severity.emergency: "EMERGENCY",
    Severity.danger: "ALERT",
    Severity.warning: "WARNING",
    Severity.info: "INFO",
}

_templates = Environment(
    loader=FileSystemLoader(str(Path(__file__).resolve().parent / "templates")),
    autoescape=select_autoescape(["html"]),
)


def _require(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValidationError("Missing required fields")
    return value.strip()


def render_email(subject: str, message: str, severity: Severity) -> str:
    template = _templates.get_template("email_notification.html")
    return template.render(subject=subject, message=message, color=_SEVERITY_COLORS[severity])


def format_sms_message(message: str, severity: Severity) -> str:
    if len(message) > SMS_MAX_LENGTH:
        message = message[: SMS_MAX_LENGTH - 3] + "..."
    return f"{_SMS_PREFIXES[severity]}: {message}"


class NotificationService:
    """Validates and pretends to deliver notifications."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def send_email(self, request: EmailNotificationRequest) -> bool:
        to = _require(request.to)
        subject = _require(request.subject)
        message = _require(request.message)

        body = render_email(subject, message, request.severity)
        logger.info(
            "Sending email notification to %s (%d bytes)",
            to,
            len(body),
            extra={"channel": "email", "severity": request.severity.value},
        )
        return self._deliver("email", EMAIL_SUCCESS_RATE)

    def send_sms(self, request: SMSNotificationRequest) -> bool:
        to = _require(request.to)
        message = _require(request.message)
        if not _PHONE_PATTERN.match(to):
            raise ValidationError("Invalid phone number format")

        text = format_sms_message(message, request.severity)
        logger.info(
            "Sending SMS notification to %s: %s",
            to,
            text,
            extra={"channel": "sms", "severity": request.severity.value},
        )
        return self._deliver("sms", SMS_SUCCESS_RATE)

    def send_push(self, request: PushNotificationRequest) -> bool:
        title = _require(request.title)
        _require(request.message)

        logger.info(
            "Sending push notification %r to %s",
            title,
            request.user_id or "all subscribers",
            extra={"channel": "push", "severity": request.severity.value},
        )
        return True

    def _deliver(self, channel: str, success_rate: float) -> bool:
        if self.rng.random() < success_rate:
            return True
        logger.error(
            "Notification delivery failed",
            extra={"channel": channel, "reason": "simulated delivery failure"},
        )
        return False
