import unittest

from synqchain.domain.schemas import ResponseShapeError, ensure_valid, validate_kpis, validate_schema
from synqchain.erp.adapter import empty_kpis


class ResponseSchemasTest(unittest.TestCase):
    def test_project_schema(self) -> None:
        ok, errors = validate_schema(
            "project",
            {"id": "1", "name": "A", "status": "on-hold", "budget": 10, "createdAt": "2026-01-01T00:00:00Z"},
        )
        self.assertTrue(ok, errors)

        ok, errors = validate_schema("project", {"id": "1", "name": "A", "status": "paused", "budget": True})
        self.assertFalse(ok)
        self.assertIn("missing required field: createdAt", errors)
        self.assertIn("field must be a non-negative number: budget", errors)
        self.assertTrue(any("status" in error for error in errors))

    def test_activity_href_is_optional(self) -> None:
        item = {"id": "a", "kind": "user", "title": "Logged in", "date": "2026-01-01"}
        self.assertTrue(validate_schema("activity_item", item)[0])
        self.assertFalse(validate_schema("activity_item", {**item, "href": 3})[0])

    def test_kpis_require_both_series(self) -> None:
        self.assertTrue(validate_kpis(empty_kpis())[0])
        broken = empty_kpis()
        del broken["series"]["savingsMonthly"]
        ok, errors = validate_kpis(broken)
        self.assertFalse(ok)
        self.assertIn("missing required series: savingsMonthly", errors)

    def test_kpi_counts_must_be_integers(self) -> None:
        payload = empty_kpis()
        payload["cards"]["activeProjects"] = 1.5
        self.assertFalse(validate_kpis(payload)[0])

    def test_ensure_valid_lists(self) -> None:
        self.assertEqual(ensure_valid("erp_health_item[]", []), [])
        with self.assertRaises(ResponseShapeError) as ctx:
            ensure_valid("erp_health_item[]", [{"name": "SAP", "status": "offline"}])
        self.assertIn("[0]", str(ctx.exception))
        with self.assertRaises(ResponseShapeError):
            ensure_valid("supplier[]", {"not": "a list"})

    def test_non_finite_numbers_are_rejected(self) -> None:
        project = {"id": "1", "name": "A", "status": "on-hold", "createdAt": "2026-01-01T00:00:00Z"}
        for budget in (float("inf"), float("nan")):
            ok, errors = validate_schema("project", {**project, "budget": budget})
            self.assertFalse(ok)
            self.assertIn("field must be a non-negative number: budget", errors)

        payload = empty_kpis()
        payload["series"]["savingsMonthly"] = {"labels": ["Jan"], "values": [float("inf")]}
        self.assertFalse(validate_kpis(payload)[0])

    def test_optional_schema_accepts_none(self) -> None:
        self.assertIsNone(ensure_valid("project?", None))
        with self.assertRaises(ResponseShapeError):
            ensure_valid("project?", {"id": "1"})

    def test_unknown_schema(self) -> None:
        ok, errors = validate_schema("invoice", {})
        self.assertFalse(ok)
        self.assertEqual(errors, ["unsupported schema_name: invoice"])


if __name__ == "__main__":
    unittest.main()
