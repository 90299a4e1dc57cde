import unittest
from unittest.mock import patch

from synqchain import create_app
from synqchain.config import Config
from synqchain.db import close_db
from tests.helpers.temp_db import TempDbSandbox


class PurchaseOrderRoutesTest(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_db = TempDbSandbox(prefix="po_routes")
        self.app = create_app(self._temp_db.make_config(Config, TESTING=True))
        self.client = self.app.test_client()

    def tearDown(self) -> None:
        with self.app.app_context():
            close_db()
        self._temp_db.cleanup()

    def _create(self, number: str, **extra) -> dict:
        response = self.client.post("/po", json={"number": number, **extra})
        self.assertEqual(response.status_code, 201, msg=response.get_data(as_text=True))
        return response.get_json()

    def test_submit_approve_scenario(self) -> None:
        self._create("PO-100", id="p1")

        submitted = self.client.post("/po/p1/submit", json={})
        self.assertEqual(submitted.status_code, 200)
        self.assertEqual(submitted.get_json()["status"], "PENDING_APPROVAL")

        again = self.client.post("/po/p1/submit", json={})
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.get_json(), {"error": "Only DRAFT purchase orders can be submitted"})

        approved = self.client.post("/po/p1/approve", json={"notes": "approved by finance"})
        self.assertEqual(approved.status_code, 200)
        self.assertEqual(approved.get_json()["status"], "APPROVED")
        self.assertEqual(approved.get_json()["notes"], "approved by finance")

        events = self.client.get("/po/p1/events")
        self.assertEqual(events.status_code, 200)
        payload = events.get_json()
        self.assertEqual(payload["total"], 2)
        self.assertEqual(payload["page"], 1)
        self.assertEqual(payload["pageSize"], 20)
        self.assertEqual([item["type"] for item in payload["items"]], ["SUBMITTED", "APPROVED"])
        self.assertEqual(payload["items"][0]["fromStatus"], "DRAFT")
        self.assertEqual(payload["items"][1]["toStatus"], "APPROVED")

    def test_transition_body_is_optional(self) -> None:
        self._create("PO-101", id="p2")
        response = self.client.post("/po/p2/submit", data="not json", content_type="text/plain")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["status"], "PENDING_APPROVAL")

    def test_non_string_notes_are_rejected(self) -> None:
        self._create("PO-102", id="p3")
        response = self.client.post("/po/p3/submit", json={"notes": 42})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(), {"error": "notes must be a string"})
        self.assertEqual(self.client.get("/po/p3").get_json()["status"], "DRAFT")

    def test_unknown_purchase_order_is_404(self) -> None:
        for path in ("/po/missing/submit", "/po/missing/approve"):
            response = self.client.post(path, json={})
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.get_json(), {"error": "Purchase order not found"})

        response = self.client.get("/po/missing")
        self.assertEqual(response.status_code, 404)

    def test_approve_draft_is_400(self) -> None:
        self._create("PO-103", id="p4")
        response = self.client.post("/po/p4/approve")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.get_json(),
            {"error": "Only PENDING_APPROVAL purchase orders can be approved"},
        )

    def test_unexpected_failure_is_generic_500(self) -> None:
        self._create("PO-104", id="p5")
        with patch(
            "synqchain.infrastructure.repositories.purchase_order_repository.PurchaseOrderRepository.submit",
            side_effect=RuntimeError("disk on fire"),
        ):
            response = self.client.post("/po/p5/submit", json={})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(), {"error": "Internal server error"})
        self.assertNotIn("disk on fire", response.get_data(as_text=True))

    def test_event_pagination_params_are_lenient(self) -> None:
        self._create("PO-105", id="p6")
        self.client.post("/po/p6/submit")

        cases = {
            "?page=abc&pageSize=xyz": (1, 20),
            "?page=0&pageSize=0": (1, 1),
            "?page=-4&pageSize=5000": (1, 200),
            "?page=3&pageSize=7": (3, 7),
            "": (1, 20),
        }
        for query, (page, page_size) in cases.items():
            response = self.client.get(f"/po/p6/events{query}")
            self.assertEqual(response.status_code, 200, msg=query)
            payload = response.get_json()
            self.assertEqual((payload["page"], payload["pageSize"]), (page, page_size), msg=query)
            self.assertEqual(payload["total"], 1, msg=query)

    def test_events_for_unknown_purchase_order_are_empty(self) -> None:
        response = self.client.get("/po/ghost/events")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"items": [], "page": 1, "pageSize": 20, "total": 0})

    def test_create_validates_payload(self) -> None:
        missing = self.client.post("/po", json={"supplierId": "SUP-1"})
        self.assertEqual(missing.status_code, 400)
        self.assertEqual(missing.get_json(), {"error": "PO number is required"})

        negative = self.client.post("/po", json={"number": "PO-x", "total": -1})
        self.assertEqual(negative.status_code, 400)

        currency = self.client.post("/po", json={"number": "PO-y", "currency": "EURO"})
        self.assertEqual(currency.status_code, 400)

    def test_create_rejects_non_finite_total(self) -> None:
        for body in ('{"number": "PO-inf", "total": 1e400}', '{"number": "PO-nan", "total": NaN}'):
            response = self.client.post("/po", data=body, content_type="application/json")
            self.assertEqual(response.status_code, 400, msg=body)
            self.assertEqual(response.get_json(), {"error": "total must be a non-negative number"})

        listing = self.client.get("/po").get_json()
        self.assertEqual(listing["total"], 0)

    def test_create_ignores_requested_status(self) -> None:
        created = self._create("PO-106", status="APPROVED", currency="eur", total=10)
        self.assertEqual(created["status"], "DRAFT")
        self.assertEqual(created["currency"], "EUR")
        self.assertEqual(created["total"], 10.0)

    def test_create_duplicate_number_is_409(self) -> None:
        self._create("PO-107")
        response = self.client.post("/po", json={"number": "PO-107"})
        self.assertEqual(response.status_code, 409)
        self.assertIn("error", response.get_json())

    def test_list_filters_and_validates_status(self) -> None:
        self._create("PO-200", id="a", supplierId="SUP-1")
        self._create("PO-201", id="b", supplierId="SUP-2")
        self.client.post("/po/b/submit")

        listing = self.client.get("/po")
        self.assertEqual(listing.status_code, 200)
        payload = listing.get_json()
        self.assertEqual(payload["total"], 2)
        self.assertEqual(payload["pageSize"], 10)

        pending = self.client.get("/po?status=PENDING_APPROVAL").get_json()
        self.assertEqual([item["id"] for item in pending["items"]], ["b"])

        by_supplier = self.client.get("/po?supplierId=SUP-1").get_json()
        self.assertEqual([item["id"] for item in by_supplier["items"]], ["a"])

        invalid = self.client.get("/po?status=SHIPPED")
        self.assertEqual(invalid.status_code, 400)


if __name__ == "__main__":
    unittest.main()
