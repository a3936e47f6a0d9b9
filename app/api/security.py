from __future__ import annotations

import hmac
import logging

from fastapi import Header, HTTPException

from app.core.config import settings


logger = logging.getLogger(__name__)


def verify_admin_token(provided: str | None, expected: str | None, env: str) -> bool:
    if not expected:
        if env.lower() in {"dev", "local"}:
            logger.warning("ADMIN_API_TOKEN not set; accepting admin request in dev mode")
            return True
        logger.error("Missing ADMIN_API_TOKEN for admin verification")
        return False

    if not provided:
        return False

    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def require_admin(x_admin_token: str | None = Header(None, alias="X-Admin-Token")) -> None:
    if not verify_admin_token(x_admin_token, settings.ADMIN_API_TOKEN, settings.ENV):
        raise HTTPException(status_code=401, detail="Unauthorized")
