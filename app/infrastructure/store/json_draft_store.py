from __future__ import annotations

import hashlib
import json
import logging
import threading
from pathlib import Path
from typing import Any

from app.application.ports.draft_store import DraftStorePort


class JsonDraftStore(DraftStorePort):
    def __init__(self, data_dir: str = "./data/drafts") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, session_id: str) -> threading.Lock:
        """Get or create a lock for a session_id."""
        with self._lock_lock:
            if session_id not in self._locks:
                self._locks[session_id] = threading.Lock()
            return self._locks[session_id]

    def _get_file_path(self, session_id: str) -> Path:
        """Get the file path for a session_id, one file per distinct id."""
        digest = hashlib.sha256(session_id.encode("utf-8")).hexdigest()
        return self._data_dir / f"{digest}.json"

    def load(self, session_id: str) -> dict[str, Any] | None:
        """Load a draft document, or None if missing or unreadable."""
        file_path = self._get_file_path(session_id)
        with self._get_lock(session_id):
            if not file_path.exists():
                return None
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                # A corrupted draft is discarded, the client starts over
                self._logger.warning("Unreadable draft file", extra={"session_id": session_id, "error": str(e)})
                return None
            return data if isinstance(data, dict) else None

    def save(self, session_id: str, document: dict[str, Any]) -> None:
        """Save a draft document atomically."""
        file_path = self._get_file_path(session_id)
        temp_path = file_path.with_suffix(".json.tmp")

        with self._get_lock(session_id):
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                # Atomic rename
                temp_path.replace(file_path)
            except Exception:
                if temp_path.exists():
                    temp_path.unlink(missing_ok=True)
                raise

    def delete(self, session_id: str) -> None:
        with self._get_lock(session_id):
            self._get_file_path(session_id).unlink(missing_ok=True)
