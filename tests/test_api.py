"""Tests for the JSON API served next to the dashboard pages."""

from datetime import date

import pytest


class TestTables:
    def test_list_resources_ordered_by_name(self, client, seeded_store):
        response = client.get("/api/resources")
        assert response.status_code == 200
        assert [row["name"] for row in response.get_json()] == ["Ada", "Bob", "Cy"]

    def test_list_allocations_includes_names(self, client, seeded_store):
        rows = client.get("/api/allocations").get_json()
        assert rows[0]["resource_name"] == "Ada"
        assert rows[0]["project_name"] == "Apollo"

    def test_unknown_table(self, client, store):
        assert client.get("/api/users").status_code == 404

    def test_create_resource_trims_values(self, client, store):
        response = client.post("/api/resources", json={"name": " Dee ", "department": "Ops", "role": "SRE"})
        assert response.status_code == 201
        assert store.tables["resources"][0]["name"] == "Dee"

    def test_create_rejects_missing_fields(self, client, store):
        response = client.post("/api/resources", json={"name": "Dee", "department": "", "role": "SRE"})
        assert response.status_code == 400
        assert response.get_json() == {"error": "Please fill in all fields."}
        assert store.calls == []

    def test_create_requires_json_object(self, client, store):
        response = client.post("/api/projects", data="nope", content_type="text/plain")
        assert response.status_code == 400

    def test_update_allocation(self, client, seeded_store):
        allocation = seeded_store.tables["allocations"][0]
        payload = {
            "resource_id": allocation["resource_id"],
            "project_id": allocation["project_id"],
            "start_date": "2025-03-02",
            "end_date": "2025-03-21",
            "allocation_percent": "75",
        }
        response = client.put(f"/api/allocations/{allocation['id']}", json=payload)
        assert response.status_code == 200
        assert seeded_store.tables["allocations"][0]["allocation_percent"] == 75
        assert seeded_store.tables["allocations"][0]["start_date"] == "2025-03-02"

    def test_update_missing_row(self, client, seeded_store):
        payload = {"name": "Eve", "department": "Ops", "role": "SRE"}
        assert client.put("/api/resources/999", json=payload).status_code == 404

    def test_create_rejects_non_finite_percent(self, client, seeded_store):
        ada, apollo = seeded_store.tables["resources"][0], seeded_store.tables["projects"][0]
        payload = {
            "resource_id": ada["id"],
            "project_id": apollo["id"],
            "start_date": "2025-04-01",
            "end_date": "2025-04-30",
            "allocation_percent": "nan",
        }
        response = client.post("/api/allocations", json=payload)
        assert response.status_code == 400
        assert ("insert", "allocations") not in seeded_store.calls

    def test_delete_project(self, client, seeded_store):
        project_id = seeded_store.tables["projects"][0]["id"]
        response = client.delete(f"/api/projects/{project_id}")
        assert response.get_json() == {"ok": True}
        assert [row["name"] for row in seeded_store.tables["projects"]] == ["Hermes"]

    def test_store_failure_is_reported(self, client, store):
        store.fail_with = "permission denied for table resources"
        response = client.get("/api/resources")
        assert response.status_code == 502
        assert response.get_json() == {"error": "permission denied for table resources"}


class TestHealth:
    def test_ok(self, client, store):
        assert client.get("/api/db-health").get_json() == {"ok": True}

    def test_down(self, client, store):
        store.fail_with = "Data service is unavailable"
        assert client.get("/api/db-health").get_json() == {"ok": False}


class TestCalendar:
    def test_grid_marks_over_allocation(self, client, seeded_store):
        grid = client.get("/api/calendar?year=2025&month=3").get_json()
        assert grid["label"] == "March 2025"
        ada = grid["rows"][0]
        assert ada["resource"] == "Ada"
        assert ada["cells"][8]["total"] == 60
        assert ada["cells"][8]["over_allocated"] is False
        assert ada["cells"][9]["total"] == 110
        assert ada["cells"][9]["over_allocated"] is True

    def test_project_filter(self, client, seeded_store):
        grid = client.get("/api/calendar?year=2025&month=3&project=Hermes").get_json()
        assert [row["resource"] for row in grid["rows"]] == ["Ada", "Bob"]
        assert grid["rows"][0]["cells"][9]["total"] == 50

    def test_resource_filter(self, client, seeded_store):
        bob_id = seeded_store.tables["resources"][1]["id"]
        grid = client.get(f"/api/calendar?year=2025&month=3&resource={bob_id}").get_json()
        assert [row["resource"] for row in grid["rows"]] == ["Bob"]

    def test_defaults_to_current_month(self, client, store):
        today = date.today()
        grid = client.get("/api/calendar").get_json()
        assert (grid["year"], grid["month"]) == (today.year, today.month)

    @pytest.mark.parametrize("query", ["month=13", "month=abc", "year=x"])
    def test_bad_query(self, client, store, query):
        assert client.get(f"/api/calendar?{query}").status_code == 400


class TestReport:
    def test_all_resources_listed(self, client, seeded_store):
        rows = client.get("/api/report").get_json()
        assert [row["resource"] for row in rows] == ["Ada", "Bob", "Cy"]
        assert rows[0]["projects_label"] == "Apollo, Hermes"
        assert rows[2]["available"] is True

    def test_filter_and_sort(self, client, seeded_store):
        rows = client.get("/api/report?project=Hermes&sort=resource&direction=desc").get_json()
        assert [row["resource"] for row in rows] == ["Bob", "Ada"]

    def test_availability_filter(self, client, seeded_store):
        rows = client.get("/api/report?availability=available").get_json()
        # every seeded allocation ended in March 2025
        assert [row["resource"] for row in rows] == ["Ada", "Bob", "Cy"]
        assert client.get("/api/report?availability=not-available").get_json() == []

    def test_bad_arguments(self, client, store):
        assert client.get("/api/report?sort=salary").status_code == 400
        assert client.get("/api/report?availability=maybe").status_code == 400
