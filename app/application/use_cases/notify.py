from __future__ import annotations

import logging

from app.application.ports.notification_sink import NotificationSinkPort
from app.domain.entities.notification import NotificationEvent


class NotifyUseCase:
    def __init__(self, sink: NotificationSinkPort) -> None:
        self._sink = sink
        self._logger = logging.getLogger(__name__)

    def execute(self, event: NotificationEvent) -> bool:
        """Emit an event. Returns True if delivered; delivery errors are logged, never raised."""
        try:
            self._sink.emit(event)
            return True
        except Exception as e:
            self._logger.warning(
                "Notification delivery failed",
                extra={
                    "appointment_id": event.appointment_id,
                    "reason": event.type.value,
                    "error": str(e),
                },
            )
            return False
