from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.service_item import ServiceItem


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_id: str) -> ServiceItem | None:
        """Get a service item by id, active or not."""
        raise NotImplementedError

    @abstractmethod
    def list_active(self) -> list[ServiceItem]:
        """Active services ordered by name."""
        raise NotImplementedError

    def get_many(self, service_ids: list[str]) -> list[ServiceItem]:
        """Known services in the order requested; unknown ids are skipped."""
        items = []
        for service_id in service_ids:
            item = self.get_service(service_id)
            if item:
                items.append(item)
        return items
