from __future__ import annotations

from app.domain.entities.service_item import ServiceItem

SERVICE_CATALOG: dict[str, ServiceItem] = {
    "wound-care": ServiceItem(
        id="wound-care",
        name="Wound Care",
        price_cents=120000,
        duration_mins=45,
        description="Cleaning and dressing of surgical or chronic wounds.",
    ),
    "iv-therapy": ServiceItem(
        id="iv-therapy",
        name="IV Therapy",
        price_cents=250000,
        duration_mins=60,
        description="Home administration of prescribed IV fluids or medication.",
    ),
    "vital-signs": ServiceItem(
        id="vital-signs",
        name="Vital Signs Monitoring",
        price_cents=50000,
        duration_mins=30,
    ),
    "catheter-care": ServiceItem(
        id="catheter-care",
        name="Catheter Care",
        price_cents=150000,
        duration_mins=45,
    ),
    "elderly-companion": ServiceItem(
        id="elderly-companion",
        name="Elderly Companion Visit",
        price_cents=90000,
        duration_mins=120,
        active=False,
    ),
}
