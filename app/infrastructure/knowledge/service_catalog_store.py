from __future__ import annotations

from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.service_item import ServiceItem
from app.infrastructure.knowledge.service_catalog_data import SERVICE_CATALOG


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: dict[str, ServiceItem] | None = None) -> None:
        self._catalog = catalog if catalog is not None else SERVICE_CATALOG

    def get_service(self, service_id: str) -> ServiceItem | None:
        return self._catalog.get(service_id.strip())

    def list_active(self) -> list[ServiceItem]:
        return sorted((s for s in self._catalog.values() if s.active), key=lambda s: s.name)
