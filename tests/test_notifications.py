"""
Tests for the e-mail webhook notification path.
"""

from __future__ import annotations

import json
from datetime import date, time

import httpx
import pytest

from app.application.exceptions import NotificationDeliveryError
from app.application.use_cases.notify import NotifyUseCase
from app.domain.entities.appointment import AppointmentStatus, Contact
from app.domain.entities.notification import NotificationEvent, NotificationType
from app.infrastructure.notifications.webhook_client import EmailWebhookClient
from app.infrastructure.notifications.webhook_sink import WebhookNotificationSink

EVENT = NotificationEvent(
    type=NotificationType.status_changed,
    appointment_id="appt-1",
    date=date(2026, 3, 2),
    time=time(9, 30),
    contact=Contact(full_name="Ana Reyes", phone="+639171111111", email="ana@example.com"),
    service_names=["Wound Care"],
    status=AppointmentStatus.confirmed,
    total_price_cents=120000,
    total_duration_mins=45,
    admin_email="admin@example.com",
)


def _client(handler) -> EmailWebhookClient:
    return EmailWebhookClient(
        endpoint="https://mail.example.com/hook",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_payload_uses_camel_case_keys():
    payload = EVENT.to_payload()
    assert payload["type"] == "status_changed"
    assert payload["appointmentId"] == "appt-1"
    assert payload["time"] == "09:30"
    assert payload["fullName"] == "Ana Reyes"
    assert payload["adminEmail"] == "admin@example.com"
    assert payload["status"] == "confirmed"
    assert payload["totalPriceCents"] == 120000


def test_payload_omits_unset_optional_fields():
    event = NotificationEvent(
        type=NotificationType.booking_confirmed,
        appointment_id="appt-2",
        date=date(2026, 3, 2),
        time=time(10, 0),
    )
    payload = event.to_payload()
    assert "status" not in payload
    assert "totalPriceCents" not in payload


def test_webhook_sink_posts_event():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"ok": True})

    WebhookNotificationSink(_client(handler)).emit(EVENT)

    assert len(seen) == 1
    assert seen[0]["appointmentId"] == "appt-1"
    assert seen[0]["serviceNames"] == ["Wound Care"]


def test_webhook_error_status_raises():
    client = _client(lambda request: httpx.Response(500, text="mailer down"))
    with pytest.raises(NotificationDeliveryError):
        client.post_event(EVENT.to_payload())


def test_webhook_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(NotificationDeliveryError):
        _client(handler).post_event(EVENT.to_payload())


def test_notify_swallows_delivery_errors():
    sink = WebhookNotificationSink(_client(lambda request: httpx.Response(502)))
    assert NotifyUseCase(sink).execute(EVENT) is False


def test_notify_reports_success():
    sink = WebhookNotificationSink(_client(lambda request: httpx.Response(204)))
    assert NotifyUseCase(sink).execute(EVENT) is True
