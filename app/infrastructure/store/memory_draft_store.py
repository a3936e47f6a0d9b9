from __future__ import annotations

import copy
from typing import Any

from app.application.ports.draft_store import DraftStorePort


class MemoryDraftStore(DraftStorePort):
    def __init__(self) -> None:
        self._drafts: dict[str, dict[str, Any]] = {}

    def load(self, session_id: str) -> dict[str, Any] | None:
        doc = self._drafts.get(session_id)
        return copy.deepcopy(doc) if doc is not None else None

    def save(self, session_id: str, document: dict[str, Any]) -> None:
        self._drafts[session_id] = copy.deepcopy(document)

    def delete(self, session_id: str) -> None:
        self._drafts.pop(session_id, None)
