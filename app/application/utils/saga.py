from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from app.application.exceptions import PartialFailureError

logger = logging.getLogger(__name__)


def run_compensated(
    step: Callable[[], Any],
    compensate: Callable[[], Any],
    *,
    description: str,
    context: dict[str, Any] | None = None,
) -> Any:
    """
    Run the dependent step of a two-step write.

    If the step raises, the compensating action undoes the first write and a
    PartialFailureError is raised in place of the original error.
    """
    extra = dict(context or {})
    try:
        return step()
    except Exception as e:
        logger.warning(
            "Dependent write failed, compensating",
            extra={**extra, "reason": description, "error": str(e)},
        )
        compensated = True
        try:
            compensate()
        except Exception as comp_error:
            compensated = False
            logger.error(
                "Compensating action failed",
                extra={**extra, "reason": description, "error": str(comp_error)},
            )
        raise PartialFailureError(f"{description} failed: {e}", compensated=compensated) from e
