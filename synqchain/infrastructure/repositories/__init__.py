from .po_event_repository import PoEventRepository
from .purchase_order_repository import PurchaseOrderRepository

__all__ = [
    "PoEventRepository",
    "PurchaseOrderRepository",
]
