from __future__ import annotations

import logging
from typing import Any

import httpx

from app.application.exceptions import NotificationDeliveryError


class EmailWebhookClient:
    def __init__(self, endpoint: str, timeout: float = 10.0, client: httpx.Client | None = None) -> None:
        self._endpoint = endpoint
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def post_event(self, payload: dict[str, Any]) -> None:
        try:
            resp = self._client.post(self._endpoint, json=payload)
        except httpx.HTTPError as e:
            raise NotificationDeliveryError(f"Email webhook unreachable: {e}") from e

        if resp.status_code >= 400:
            self._logger.error(
                "Email webhook rejected event",
                extra={
                    "status": resp.status_code,
                    "reason": payload.get("type"),
                    "appointment_id": payload.get("appointmentId"),
                    "error": resp.text[:200],
                },
            )
            raise NotificationDeliveryError(f"Email webhook returned {resp.status_code}")
