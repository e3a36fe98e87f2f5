from __future__ import annotations

import logging

import pytest

from app.schemas import (
    EmailNotificationRequest,
    PushNotificationRequest,
    Severity,
    SMSNotificationRequest,
)
from services.errors import ValidationError
from services.notifications import NotificationService, format_sms_message, render_email


@pytest.mark.parametrize(
    "request_body",
    [
        EmailNotificationRequest(subject="AQI alert", message="Stay inside"),
        EmailNotificationRequest(to="user@example.com", message="Stay inside"),
        EmailNotificationRequest(to="user@example.com", subject="AQI alert", message="   "),
    ],
)
def test_email_requires_recipient_subject_and_message(fixed_rng, request_body) -> None:
    service = NotificationService(fixed_rng(0.0))

    with pytest.raises(ValidationError, match="Missing required fields"):
        service.send_email(request_body)


def test_email_delivery_follows_success_rate(fixed_rng) -> None:
    request_body = EmailNotificationRequest(
        to="user@example.com", subject="AQI alert", message="Stay inside"
    )

    assert NotificationService(fixed_rng(0.5)).send_email(request_body) is True
    assert NotificationService(fixed_rng(0.95)).send_email(request_body) is False


def test_failed_delivery_is_logged(fixed_rng, caplog) -> None:
    request_body = SMSNotificationRequest(to="+1 202-555-0100", message="AQI 180")

    with caplog.at_level(logging.ERROR):
        delivered = NotificationService(fixed_rng(0.99)).send_sms(request_body)

    assert delivered is False
    records = [record for record in caplog.records if record.name == "services.notifications"]
    assert records
    assert records[0].channel == "sms"


def test_sms_rejects_malformed_phone_number(fixed_rng) -> None:
    service = NotificationService(fixed_rng(0.0))

    with pytest.raises(ValidationError, match="Invalid phone number format"):
        service.send_sms(SMSNotificationRequest(to="call me maybe", message="AQI 180"))


def test_sms_message_is_prefixed_and_truncated() -> None:
    long_message = "x" * 200

    formatted = format_sms_message(long_message, Severity.emergency)

    assert formatted.startswith("EMERGENCY: ")
    assert formatted.endswith("...")
    assert len(formatted) == len("EMERGENCY: ") + 140
    assert format_sms_message("short", Severity.info) == "INFO: short"


def test_push_requires_title_and_always_succeeds(fixed_rng) -> None:
    service = NotificationService(fixed_rng(0.99))

    assert service.send_push(PushNotificationRequest(title="AQI", message="Unhealthy", userId="u-1"))
    with pytest.raises(ValidationError):
        service.send_push(PushNotificationRequest(message="Unhealthy"))


def test_email_template_escapes_message() -> None:
    html = render_email("Ozone Warning", "<b>stay in</b>", Severity.danger)

    assert "<title>Ozone Warning</title>" in html
    assert "#ef4444" in html
    assert "&lt;b&gt;stay in&lt;/b&gt;" in html
