from abc import ABC, abstractmethod
from typing import Any


class DraftStorePort(ABC):
    @abstractmethod
    def load(self, session_id: str) -> dict[str, Any] | None:
        """Raw draft document for a session, or None if there is none."""
        raise NotImplementedError

    @abstractmethod
    def save(self, session_id: str, document: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, session_id: str) -> None:
        raise NotImplementedError
