from __future__ import annotations

import copy
import threading
import uuid
from datetime import datetime, timezone
from typing import List

from synqchain.erp.adapter import ErpAdapter, empty_kpis


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _new_id() -> str:
    return str(uuid.uuid4())


def _seed_state() -> dict:
    now = _now_iso()
    projects = [
        {
            "id": _new_id(),
            "name": "Manufacturing Equipment Procurement",
            "status": "in-progress",
            "budget": 250000,
            "createdAt": now,
        },
        {
            "id": _new_id(),
            "name": "IT Infrastructure Upgrade",
            "status": "in-progress",
            "budget": 120000,
            "createdAt": now,
        },
    ]
    suppliers = [
        {"id": _new_id(), "name": "TechSource Global", "status": "active", "createdAt": now},
        {"id": _new_id(), "name": "Acme Manufacturing", "status": "active", "createdAt": now},
    ]
    return {
        "projects": projects,
        "suppliers": suppliers,
        "activity": [
            {
                "id": _new_id(),
                "kind": "project",
                "title": "Manufacturing Equipment Procurement project updated with new savings target",
                "date": now,
            },
            {
                "id": _new_id(),
                "kind": "supplier",
                "title": "New supplier TechSource Global added to the platform",
                "date": now,
            },
            {
                "id": _new_id(),
                "kind": "system",
                "title": "ERP integration health check completed successfully",
                "date": now,
            },
        ],
        "erp": [
            {"name": "Epicor", "status": "connected"},
            {"name": "NetSuite", "status": "mock"},
            {"name": "SAP S/4HANA", "status": "mock"},
            {"name": "Dynamics BC", "status": "mock"},
        ],
        "kpis": {
            "cards": {
                "totalSpend": 425000,
                "platformSavings": 35200,
                "activeProjects": len(projects),
                "activeSuppliers": len(suppliers),
            },
            "series": {
                "projectsCompletedMonthly": {"labels": ["Jan", "Feb", "Mar"], "values": [1, 3, 2]},
                "savingsMonthly": {"labels": ["Jan", "Feb", "Mar"], "values": [3000, 12000, 20200]},
            },
        },
    }


def _empty_state() -> dict:
    return {
        "projects": [],
        "suppliers": [],
        "activity": [],
        "erp": [],
        "kpis": empty_kpis(),
    }


class MockErpAdapter(ErpAdapter):
    adapter_id = "mock"
    name = "Mock Adapter"

    def __init__(self, seed: bool = False) -> None:
        self._lock = threading.Lock()
        self._state = _seed_state() if seed else _empty_state()

    def _read(self, key: str):
        with self._lock:
            return copy.deepcopy(self._state[key])

    def health(self) -> dict:
        return {"ok": True}

    def get_kpis(self, start: str | None = None, end: str | None = None) -> dict:
        # The demo data set has no dated spend, so the range does not narrow it.
        return self._read("kpis")

    def get_activity(self) -> List[dict]:
        return self._read("activity")

    def get_erp_health(self) -> List[dict]:
        return self._read("erp")

    def list_projects(self) -> List[dict]:
        return self._read("projects")

    def get_project(self, project_id: str) -> dict | None:
        with self._lock:
            for project in self._state["projects"]:
                if project["id"] == project_id:
                    return dict(project)
        return None

    def create_project(self, data: dict) -> dict:
        project = {
            "id": _new_id(),
            "name": data["name"],
            "status": data.get("status") or "in-progress",
            "budget": data.get("budget", 0),
            "createdAt": _now_iso(),
        }
        with self._lock:
            self._state["projects"].append(project)
        return dict(project)

    def list_suppliers(self) -> List[dict]:
        return self._read("suppliers")

    def get_supplier(self, supplier_id: str) -> dict | None:
        with self._lock:
            for supplier in self._state["suppliers"]:
                if supplier["id"] == supplier_id:
                    return dict(supplier)
        return None

    def create_supplier(self, data: dict) -> dict:
        supplier = {
            "id": _new_id(),
            "name": data["name"],
            "status": data.get("status") or "active",
            "createdAt": _now_iso(),
        }
        with self._lock:
            self._state["suppliers"].append(supplier)
        return dict(supplier)


class EmptyErpAdapter(MockErpAdapter):
    """Adapter used when no ERP is configured: writes are kept, reads stay empty."""

    adapter_id = "none"
    name = "No ERP"

    def __init__(self) -> None:
        super().__init__(seed=False)

    def get_kpis(self, start: str | None = None, end: str | None = None) -> dict:
        return empty_kpis()

    def get_activity(self) -> List[dict]:
        return []

    def get_erp_health(self) -> List[dict]:
        return []

    def list_projects(self) -> List[dict]:
        return []

    def list_suppliers(self) -> List[dict]:
        return []
