from abc import ABC, abstractmethod

from app.domain.entities.notification import NotificationEvent


class NotificationSinkPort(ABC):
    @abstractmethod
    def emit(self, event: NotificationEvent) -> None:
        raise NotImplementedError
