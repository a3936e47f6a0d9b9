from __future__ import annotations

import logging

from app.application.ports.notification_sink import NotificationSinkPort
from app.domain.entities.notification import NotificationEvent


class LoggingNotificationSink(NotificationSinkPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.events: list[NotificationEvent] = []

    def emit(self, event: NotificationEvent) -> None:
        self.events.append(event)
        self._logger.info(
            "WOULD_SEND_NOTIFICATION",
            extra={"appointment_id": event.appointment_id, "reason": event.type.value},
        )
