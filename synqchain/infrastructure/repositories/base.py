from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable


class BaseRepository:
    def __init__(self, db) -> None:
        if db is None:
            raise ValueError("a database handle is required for repository access")
        self.db = db

    @staticmethod
    def rows_to_dicts(rows: Iterable[Any]) -> list[dict]:
        return [dict(row) for row in rows]

    @staticmethod
    def utc_now_iso() -> str:
        return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @staticmethod
    def count_value(row: Any) -> int:
        if row is None:
            return 0
        if isinstance(row, dict):
            return int(row.get("total") or 0)
        return int(row["total"] or 0)
