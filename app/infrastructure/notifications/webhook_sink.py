from __future__ import annotations

from app.application.ports.notification_sink import NotificationSinkPort
from app.domain.entities.notification import NotificationEvent
from app.infrastructure.notifications.webhook_client import EmailWebhookClient


class WebhookNotificationSink(NotificationSinkPort):
    def __init__(self, client: EmailWebhookClient) -> None:
        self._client = client

    def emit(self, event: NotificationEvent) -> None:
        self._client.post_event(event.to_payload())
