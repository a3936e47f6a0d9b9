from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.service_item import ServiceItem
from app.infrastructure.sql.models import ServiceRow


def _to_entity(row: ServiceRow) -> ServiceItem:
    return ServiceItem(
        id=row.id,
        name=row.name,
        price_cents=row.price_cents or 0,
        duration_mins=row.duration_mins or 0,
        active=bool(row.is_active),
        description=row.description,
    )


class SqlServiceCatalog(ServiceCatalogPort):
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def get_service(self, service_id: str) -> ServiceItem | None:
        with self._session_factory() as session:
            row = session.get(ServiceRow, service_id)
            return _to_entity(row) if row else None

    def get_many(self, service_ids: list[str]) -> list[ServiceItem]:
        if not service_ids:
            return []
        with self._session_factory() as session:
            rows = session.scalars(select(ServiceRow).where(ServiceRow.id.in_(service_ids))).all()
        by_id = {row.id: _to_entity(row) for row in rows}
        return [by_id[sid] for sid in service_ids if sid in by_id]

    def list_active(self) -> list[ServiceItem]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(ServiceRow).where(ServiceRow.is_active.is_(True)).order_by(ServiceRow.name)
            ).all()
        return [_to_entity(row) for row in rows]

    def upsert(self, item: ServiceItem) -> None:
        with self._session_factory() as session:
            session.merge(
                ServiceRow(
                    id=item.id,
                    name=item.name,
                    description=item.description,
                    price_cents=item.price_cents,
                    duration_mins=item.duration_mins,
                    is_active=item.active,
                )
            )
            session.commit()
