import contextlib
import sqlite3
from typing import Iterable

try:
    import psycopg2
    import psycopg2.extras
except ImportError:  # pragma: no cover - optional dependency for postgres
    psycopg2 = None

from flask import current_app, g


class Database:
    def __init__(self, backend: str, connection):
        self.backend = backend
        self._conn = connection
        self._tx_depth = 0

    def execute(self, sql: str, params: Iterable | None = None):
        if self.backend == "postgres":
            cursor = self._conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
            if params:
                sql = _convert_qmark_to_pg(sql)
                cursor.execute(sql, list(params))
            else:
                cursor.execute(sql)
            return cursor
        return self._conn.execute(sql, params or ())

    @contextlib.contextmanager
    def transaction(self):
        """Run the block as one unit of work: commit on success, roll back on any error.

        A nested call joins the enclosing transaction; only the outermost block
        commits or rolls back.
        """
        if self._tx_depth:
            self._tx_depth += 1
            try:
                yield self
            finally:
                self._tx_depth -= 1
            return

        if self.backend == "postgres":
            self._conn.autocommit = False
        elif not self._conn.in_transaction:
            # Take the write lock up front so concurrent writers queue on the busy timeout.
            self._conn.execute("BEGIN IMMEDIATE")
        self._tx_depth = 1
        try:
            yield self
        except BaseException:
            self._conn.rollback()
            raise
        else:
            self._conn.commit()
        finally:
            self._tx_depth = 0
            if self.backend == "postgres":
                self._conn.autocommit = True

    def commit(self):
        self._conn.commit()

    def close(self):
        self._conn.close()


def _convert_qmark_to_pg(sql: str) -> str:
    return sql.replace("?", "%s")


def _connect_database(db_path: str, busy_timeout_seconds: float = 30.0) -> Database:
    if db_path.lower().startswith("postgres"):
        if psycopg2 is None:
            raise RuntimeError("psycopg2 is not installed.")
        conn = psycopg2.connect(db_path)
        conn.autocommit = True
        return Database("postgres", conn)

    conn = sqlite3.connect(db_path, timeout=busy_timeout_seconds)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return Database("sqlite", conn)


def get_db():
    if "db" not in g:
        db_path = current_app.config["DB_PATH"]
        timeout = float(current_app.config.get("DB_BUSY_TIMEOUT_SECONDS", 30) or 30)
        g.db = _connect_database(db_path, timeout)
    return g.db


def close_db(_error=None):
    db = g.pop("db", None)
    if db is not None:
        db.close()


def init_db():
    db = get_db()
    if db.backend == "postgres":
        _init_db_postgres(db)
        return

    _init_db_sqlite(db)


def _init_db_sqlite(db: Database):
    db.execute(
        """
        CREATE TABLE IF NOT EXISTS purchase_orders (
            id TEXT PRIMARY KEY,
            number TEXT NOT NULL UNIQUE,
            supplier_id TEXT,
            project_id TEXT,
            status TEXT NOT NULL DEFAULT 'DRAFT' CHECK (
                status IN ('DRAFT','PENDING_APPROVAL','APPROVED')
            ),
            total REAL NOT NULL DEFAULT 0 CHECK (total >= 0),
            currency TEXT NOT NULL DEFAULT 'USD',
            notes TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )

    db.execute(
        """
        CREATE TABLE IF NOT EXISTS po_events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            po_id TEXT NOT NULL REFERENCES purchase_orders (id) ON DELETE CASCADE,
            type TEXT NOT NULL CHECK (type IN ('SUBMITTED','APPROVED')),
            from_status TEXT NOT NULL,
            to_status TEXT NOT NULL,
            notes TEXT,
            created_at TEXT NOT NULL
        )
        """
    )

    db.execute("CREATE INDEX IF NOT EXISTS ix_purchase_orders_status ON purchase_orders (status)")
    db.execute("CREATE INDEX IF NOT EXISTS ix_po_events_po_id ON po_events (po_id, id)")
    db.commit()


def _init_db_postgres(db: Database) -> None:
    db.execute(
        """
        CREATE TABLE IF NOT EXISTS purchase_orders (
            id TEXT PRIMARY KEY,
            number TEXT NOT NULL UNIQUE,
            supplier_id TEXT,
            project_id TEXT,
            status TEXT NOT NULL DEFAULT 'DRAFT' CHECK (
                status IN ('DRAFT','PENDING_APPROVAL','APPROVED')
            ),
            total DOUBLE PRECISION NOT NULL DEFAULT 0 CHECK (total >= 0),
            currency TEXT NOT NULL DEFAULT 'USD',
            notes TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )

    db.execute(
        """
        CREATE TABLE IF NOT EXISTS po_events (
            id BIGSERIAL PRIMARY KEY,
            po_id TEXT NOT NULL REFERENCES purchase_orders (id) ON DELETE CASCADE,
            type TEXT NOT NULL CHECK (type IN ('SUBMITTED','APPROVED')),
            from_status TEXT NOT NULL,
            to_status TEXT NOT NULL,
            notes TEXT,
            created_at TEXT NOT NULL
        )
        """
    )

    db.execute("CREATE INDEX IF NOT EXISTS ix_purchase_orders_status ON purchase_orders (status)")
    db.execute("CREATE INDEX IF NOT EXISTS ix_po_events_po_id ON po_events (po_id, id)")


def integrity_errors() -> tuple:
    errors: list = [sqlite3.IntegrityError]
    if psycopg2 is not None:
        errors.append(psycopg2.IntegrityError)
    return tuple(errors)


def is_unique_violation(exc: BaseException) -> bool:
    if isinstance(exc, sqlite3.IntegrityError):
        error_name = getattr(exc, "sqlite_errorname", None)
        if error_name:
            return error_name in {"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}
        return str(exc).startswith("UNIQUE constraint failed")
    if psycopg2 is not None and isinstance(exc, psycopg2.IntegrityError):
        return getattr(exc, "pgcode", None) == "23505"
    return False
