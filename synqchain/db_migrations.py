from __future__ import annotations

from pathlib import Path

import click
from alembic import command
from alembic.config import Config as AlembicConfig
from flask import Flask

from synqchain.db import get_db
from synqchain.domain.po_lifecycle import DuplicatePurchaseOrder
from synqchain.infrastructure.repositories import PurchaseOrderRepository


DEMO_PURCHASE_ORDERS = (
    {"number": "PO-1001", "supplier_id": "SUP-100", "project_id": "PRJ-100", "total": 8300.0},
    {"number": "PO-1002", "supplier_id": "SUP-200", "project_id": "PRJ-100", "total": 12450.5},
    {"number": "PO-1003", "supplier_id": "SUP-100", "project_id": "PRJ-200", "total": 990.0},
)


def _project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _normalize_postgres_url(url: str) -> str:
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://") :]
    return url


def to_sqlalchemy_url(raw_db_path: str) -> str:
    raw = (raw_db_path or "").strip()
    if not raw:
        raise RuntimeError("DB_PATH is not set for migrations.")

    normalized = _normalize_postgres_url(raw)
    if normalized.startswith(("postgresql://", "postgresql+", "sqlite://", "sqlite+pysqlite://")):
        return normalized

    sqlite_path = Path(normalized).expanduser().resolve()
    return f"sqlite:///{sqlite_path.as_posix()}"


def build_alembic_config(app: Flask) -> AlembicConfig:
    root = _project_root()
    alembic_ini = root / "alembic.ini"
    if not alembic_ini.exists():
        raise RuntimeError("alembic.ini not found at the project root.")

    alembic_cfg = AlembicConfig(str(alembic_ini))
    alembic_cfg.set_main_option("script_location", str((root / "migrations").as_posix()))
    alembic_cfg.set_main_option("sqlalchemy.url", to_sqlalchemy_url(app.config["DB_PATH"]))
    return alembic_cfg


def seed_demo_purchase_orders(db) -> int:
    repository = PurchaseOrderRepository(db)
    created = 0
    for entry in DEMO_PURCHASE_ORDERS:
        try:
            repository.create(**entry)
        except DuplicatePurchaseOrder:
            continue
        created += 1
    return created


def register_db_cli(app: Flask) -> None:
    @app.cli.group("db")
    def db_group() -> None:
        """Schema migrations (Alembic) and demo data."""

    @db_group.command("upgrade")
    @click.argument("revision", required=False, default="head")
    def db_upgrade(revision: str) -> None:
        cfg = build_alembic_config(app)
        command.upgrade(cfg, revision)
        click.echo(f"Upgraded to {revision}.")

    @db_group.command("downgrade")
    @click.argument("revision", required=False, default="-1")
    def db_downgrade(revision: str) -> None:
        cfg = build_alembic_config(app)
        command.downgrade(cfg, revision)
        click.echo(f"Downgraded to {revision}.")

    @db_group.command("current")
    def db_current() -> None:
        cfg = build_alembic_config(app)
        command.current(cfg, verbose=True)

    @db_group.command("seed")
    def db_seed() -> None:
        created = seed_demo_purchase_orders(get_db())
        click.echo(f"Seeded {created} demo purchase orders.")
