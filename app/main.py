import logging

from fastapi import FastAPI

from app.api.admin import router as admin_router
from app.api.v1.booking import router as booking_router
from app.api.v1.drafts import router as drafts_router
from app.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("appointment_id", "session_id", "date", "time", "status", "outcome", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Home Care Booking", version="1.0.0")

app.include_router(booking_router, prefix="/api/v1", tags=["booking"])
app.include_router(drafts_router, prefix="/api/v1", tags=["drafts"])
app.include_router(admin_router, prefix="/api/admin", tags=["admin"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
