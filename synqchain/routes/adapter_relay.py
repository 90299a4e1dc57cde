from __future__ import annotations

import logging
from typing import Any, Callable

from synqchain.domain.schemas import ensure_valid
from synqchain.errors import AppError, IntegrationError


logger = logging.getLogger(__name__)


def relay(operation: str, schema_name: str, fetch: Callable[[], Any]) -> Any:
    """Run an adapter or datastore read and check its shape before it is returned.

    Any failure becomes an ``IntegrationError`` that carries the underlying
    error text, falling back to the generic adapter message.
    """
    try:
        return ensure_valid(schema_name, fetch())
    except AppError:
        raise
    except Exception as exc:
        logger.warning(
            "adapter_relay_failed",
            extra={"operation": operation, "error_type": type(exc).__name__},
        )
        raise IntegrationError(
            code=f"{operation}_failed",
            message=str(exc),
            details=repr(exc),
        ) from exc
