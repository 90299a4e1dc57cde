from __future__ import annotations

import os
import sys

import psycopg2


REQUIRED_TABLES = ("purchase_orders", "po_events")


def main() -> None:
    db_url = os.environ.get("DATABASE_URL")
    if not db_url:
        raise RuntimeError("Set DATABASE_URL to the Postgres instance.")

    conn = psycopg2.connect(db_url)
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()
            cur.execute(
                """
                SELECT table_name
                FROM information_schema.tables
                WHERE table_schema = 'public'
                ORDER BY table_name
                """
            )
            tables = [row[0] for row in cur.fetchall()]
            missing = [name for name in REQUIRED_TABLES if name not in tables]
            if missing:
                raise RuntimeError(f"missing tables: {', '.join(missing)} (run `flask db upgrade`)")
            cur.execute("SELECT status, COUNT(*) FROM purchase_orders GROUP BY status ORDER BY status")
            counts = ", ".join(f"{status}={count}" for status, count in cur.fetchall()) or "empty"
            print(f"Postgres OK. Purchase orders: {counts}")
    finally:
        conn.close()


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:
        print(f"Health check failed: {exc}")
        sys.exit(1)
