from __future__ import annotations

import logging

from flask import current_app

from synqchain.erp.adapter import ErpAdapter, ErpAdapterError
from synqchain.erp.mock_adapter import EmptyErpAdapter, MockErpAdapter


logger = logging.getLogger(__name__)

EXTENSION_KEY = "erp_adapter"


def build_erp_adapter(config) -> ErpAdapter:
    provider = str(config.get("ERP_PROVIDER") or "mock").strip().lower()
    if provider == "mock":
        return MockErpAdapter(seed=bool(config.get("MOCK_SEED", False)))
    if provider != "none":
        logger.warning("erp_provider_unknown", extra={"erp_provider": provider})
    return EmptyErpAdapter()


def get_erp_adapter() -> ErpAdapter:
    adapter = current_app.extensions.get(EXTENSION_KEY)
    if adapter is None:
        raise ErpAdapterError("ERP adapter is not configured", code="erp_adapter_missing")
    return adapter


__all__ = [
    "EXTENSION_KEY",
    "EmptyErpAdapter",
    "ErpAdapter",
    "ErpAdapterError",
    "MockErpAdapter",
    "build_erp_adapter",
    "get_erp_adapter",
]
