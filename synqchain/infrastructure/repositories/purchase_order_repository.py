from __future__ import annotations

import logging
import uuid

from synqchain.db import integrity_errors, is_unique_violation
from synqchain.domain.po_lifecycle import (
    DRAFT,
    DuplicatePurchaseOrder,
    InvalidTransition,
    LifecycleError,
    PurchaseOrderNotFound,
    transition_for,
)
from synqchain.infrastructure.repositories.base import BaseRepository
from synqchain.infrastructure.repositories.po_event_repository import PoEventRepository
from synqchain.observability import observe_po_transition


logger = logging.getLogger(__name__)

_PO_COLUMNS = (
    "id, number, supplier_id, project_id, status, total, currency, notes, created_at, updated_at"
)


def new_purchase_order_id() -> str:
    return f"po_{uuid.uuid4().hex}"


def serialize_purchase_order(row: dict) -> dict:
    return {
        "id": row["id"],
        "number": row["number"],
        "supplierId": row.get("supplier_id"),
        "projectId": row.get("project_id"),
        "status": row["status"],
        "total": float(row.get("total") or 0),
        "currency": row.get("currency") or "USD",
        "notes": row.get("notes"),
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
    }


class PurchaseOrderRepository(BaseRepository):
    """Owns purchase order rows and the status lifecycle.

    Each transition is a guarded UPDATE on the expected status plus the
    matching event insert, run in one transaction.
    """

    def __init__(self, db, events: PoEventRepository | None = None) -> None:
        super().__init__(db)
        self.events = events or PoEventRepository(db)

    def _fetch_row(self, po_id: str) -> dict | None:
        row = self.db.execute(
            f"SELECT {_PO_COLUMNS} FROM purchase_orders WHERE id = ? LIMIT 1",
            (po_id,),
        ).fetchone()
        return dict(row) if row else None

    def get_by_id(self, po_id: str) -> dict | None:
        row = self._fetch_row(po_id)
        return serialize_purchase_order(row) if row else None

    def list_page(
        self,
        page: int = 1,
        page_size: int = 10,
        status: str | None = None,
        supplier_id: str | None = None,
    ) -> dict:
        page = max(1, int(page))
        page_size = max(1, int(page_size))
        clauses: list[str] = []
        params: list = []
        if status:
            clauses.append("status = ?")
            params.append(status)
        if supplier_id:
            clauses.append("supplier_id = ?")
            params.append(supplier_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        total_row = self.db.execute(
            f"SELECT COUNT(*) AS total FROM purchase_orders {where}",
            tuple(params),
        ).fetchone()
        rows = self.db.execute(
            f"""
            SELECT {_PO_COLUMNS}
            FROM purchase_orders
            {where}
            ORDER BY created_at DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            (*params, page_size, (page - 1) * page_size),
        ).fetchall()
        return {
            "items": [serialize_purchase_order(row) for row in self.rows_to_dicts(rows)],
            "page": page,
            "pageSize": page_size,
            "total": self.count_value(total_row),
        }

    def create(
        self,
        number: str,
        supplier_id: str | None = None,
        project_id: str | None = None,
        total: float = 0,
        currency: str = "USD",
        notes: str | None = None,
        po_id: str | None = None,
    ) -> dict:
        po_id = po_id or new_purchase_order_id()
        now = self.utc_now_iso()
        try:
            with self.db.transaction():
                existing = self.db.execute(
                    "SELECT id FROM purchase_orders WHERE id = ? OR number = ? LIMIT 1",
                    (po_id, number),
                ).fetchone()
                if existing:
                    raise DuplicatePurchaseOrder(number)
                self.db.execute(
                    f"""
                    INSERT INTO purchase_orders ({_PO_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (po_id, number, supplier_id, project_id, DRAFT, float(total), currency, notes, now, now),
                )
        except integrity_errors() as exc:
            if not is_unique_violation(exc):
                raise
            raise DuplicatePurchaseOrder(number) from exc

        logger.info("po_created", extra={"po_id": po_id, "po_number": number})
        return serialize_purchase_order(self._fetch_row(po_id))

    def submit(self, po_id: str, notes: str | None = None) -> dict:
        return self._transition("submit", po_id, notes)

    def approve(self, po_id: str, notes: str | None = None) -> dict:
        return self._transition("approve", po_id, notes)

    def _transition(self, action: str, po_id: str, notes: str | None) -> dict:
        transition = transition_for(action)
        try:
            with self.db.transaction():
                cursor = self.db.execute(
                    """
                    UPDATE purchase_orders
                    SET status = ?, notes = COALESCE(?, notes), updated_at = ?
                    WHERE id = ? AND status = ?
                    """,
                    (transition.to_status, notes, self.utc_now_iso(), po_id, transition.from_status),
                )
                if cursor.rowcount == 0:
                    current = self._fetch_row(po_id)
                    if current is None:
                        raise PurchaseOrderNotFound(po_id)
                    raise InvalidTransition(
                        po_id,
                        action,
                        current["status"],
                        transition.rejection_message,
                    )
                self.events.append(
                    po_id,
                    transition.event_type,
                    transition.from_status,
                    transition.to_status,
                    notes,
                )
                row = self._fetch_row(po_id)
        except PurchaseOrderNotFound:
            observe_po_transition(action, "not_found")
            raise
        except LifecycleError:
            observe_po_transition(action, "rejected")
            raise

        observe_po_transition(action, "ok")
        logger.info(
            "po_transition",
            extra={
                "po_id": po_id,
                "action": action,
                "from_status": transition.from_status,
                "to_status": transition.to_status,
            },
        )
        return serialize_purchase_order(row)

    def get_events(self, po_id: str, page: int = 1, page_size: int = 20) -> dict:
        page = max(1, int(page))
        page_size = max(1, int(page_size))
        return {
            "items": self.events.list_page(po_id, page, page_size),
            "page": page,
            "pageSize": page_size,
            "total": self.events.count_for_po(po_id),
        }
