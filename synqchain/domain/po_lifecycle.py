from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


DRAFT = "DRAFT"
PENDING_APPROVAL = "PENDING_APPROVAL"
APPROVED = "APPROVED"

PO_STATUSES = (DRAFT, PENDING_APPROVAL, APPROVED)

EVENT_SUBMITTED = "SUBMITTED"
EVENT_APPROVED = "APPROVED"

EVENT_TYPES = (EVENT_SUBMITTED, EVENT_APPROVED)


@dataclass(frozen=True)
class Transition:
    action: str
    from_status: str
    to_status: str
    event_type: str
    rejection_message: str


TRANSITIONS: Dict[str, Transition] = {
    "submit": Transition(
        action="submit",
        from_status=DRAFT,
        to_status=PENDING_APPROVAL,
        event_type=EVENT_SUBMITTED,
        rejection_message="Only DRAFT purchase orders can be submitted",
    ),
    "approve": Transition(
        action="approve",
        from_status=PENDING_APPROVAL,
        to_status=APPROVED,
        event_type=EVENT_APPROVED,
        rejection_message="Only PENDING_APPROVAL purchase orders can be approved",
    ),
}


class LifecycleError(Exception):
    """Base class for failures raised by the purchase order lifecycle."""


class PurchaseOrderNotFound(LifecycleError):
    def __init__(self, po_id: str) -> None:
        self.po_id = po_id
        super().__init__(f"Purchase order not found: {po_id}")


class InvalidTransition(LifecycleError):
    def __init__(self, po_id: str, action: str, current_status: str | None, message: str) -> None:
        self.po_id = po_id
        self.action = action
        self.current_status = current_status
        self.message = message
        super().__init__(message)


class DuplicatePurchaseOrder(LifecycleError):
    def __init__(self, number: str) -> None:
        self.number = number
        super().__init__(f"Purchase order number already in use: {number}")


def transition_for(action: str) -> Transition:
    try:
        return TRANSITIONS[action]
    except KeyError:
        raise ValueError(f"unknown purchase order action: {action}") from None


def is_valid_status(status: str | None) -> bool:
    return status in PO_STATUSES


def allowed_actions(status: str | None) -> List[str]:
    return [name for name, transition in TRANSITIONS.items() if transition.from_status == status]


def is_terminal(status: str | None) -> bool:
    return is_valid_status(status) and not allowed_actions(status)
