from __future__ import annotations

from synqchain.infrastructure.repositories.base import BaseRepository


def serialize_event(row: dict) -> dict:
    return {
        "id": int(row["id"]),
        "poId": row["po_id"],
        "type": row["type"],
        "fromStatus": row["from_status"],
        "toStatus": row["to_status"],
        "notes": row.get("notes"),
        "createdAt": row["created_at"],
    }


class PoEventRepository(BaseRepository):
    def append(
        self,
        po_id: str,
        event_type: str,
        from_status: str,
        to_status: str,
        notes: str | None = None,
    ) -> dict:
        created_at = self.utc_now_iso()
        if self.db.backend == "postgres":
            row = self.db.execute(
                """
                INSERT INTO po_events (po_id, type, from_status, to_status, notes, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                RETURNING id
                """,
                (po_id, event_type, from_status, to_status, notes, created_at),
            ).fetchone()
            event_id = int(row["id"])
        else:
            cursor = self.db.execute(
                """
                INSERT INTO po_events (po_id, type, from_status, to_status, notes, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (po_id, event_type, from_status, to_status, notes, created_at),
            )
            event_id = int(cursor.lastrowid)
        return {
            "id": event_id,
            "poId": po_id,
            "type": event_type,
            "fromStatus": from_status,
            "toStatus": to_status,
            "notes": notes,
            "createdAt": created_at,
        }

    def count_for_po(self, po_id: str) -> int:
        row = self.db.execute(
            "SELECT COUNT(*) AS total FROM po_events WHERE po_id = ?",
            (po_id,),
        ).fetchone()
        return self.count_value(row)

    def list_page(self, po_id: str, page: int, page_size: int) -> list[dict]:
        offset = max(0, (int(page) - 1) * int(page_size))
        rows = self.db.execute(
            """
            SELECT id, po_id, type, from_status, to_status, notes, created_at
            FROM po_events
            WHERE po_id = ?
            ORDER BY id ASC
            LIMIT ? OFFSET ?
            """,
            (po_id, int(page_size), offset),
        ).fetchall()
        return [serialize_event(row) for row in self.rows_to_dicts(rows)]
