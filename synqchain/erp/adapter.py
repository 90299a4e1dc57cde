from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List


class ErpAdapterError(RuntimeError):
    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = str(code or "").strip() or None


class ErpAdapter(ABC):
    """Boundary to the external ERP that feeds the dashboard.

    Read methods return plain dicts/lists with camelCase keys, ready to be
    validated against ``synqchain.domain.schemas`` and relayed as JSON.
    """

    adapter_id = "abstract"
    name = "Abstract Adapter"

    @abstractmethod
    def health(self) -> dict:
        raise NotImplementedError

    @abstractmethod
    def get_kpis(self, start: str | None = None, end: str | None = None) -> dict:
        raise NotImplementedError

    @abstractmethod
    def get_activity(self) -> List[dict]:
        raise NotImplementedError

    @abstractmethod
    def get_erp_health(self) -> List[dict]:
        raise NotImplementedError

    @abstractmethod
    def list_projects(self) -> List[dict]:
        raise NotImplementedError

    @abstractmethod
    def get_project(self, project_id: str) -> dict | None:
        raise NotImplementedError

    @abstractmethod
    def create_project(self, data: dict) -> dict:
        raise NotImplementedError

    @abstractmethod
    def list_suppliers(self) -> List[dict]:
        raise NotImplementedError

    @abstractmethod
    def get_supplier(self, supplier_id: str) -> dict | None:
        raise NotImplementedError

    @abstractmethod
    def create_supplier(self, data: dict) -> dict:
        raise NotImplementedError


def empty_kpis() -> dict:
    return {
        "cards": {
            "totalSpend": 0,
            "platformSavings": 0,
            "activeProjects": 0,
            "activeSuppliers": 0,
        },
        "series": {
            "projectsCompletedMonthly": {"labels": [], "values": []},
            "savingsMonthly": {"labels": [], "values": []},
        },
    }
