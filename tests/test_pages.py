"""Render checks for the dashboard pages."""

import asyncio

from reactpy.core.layout import Layout

import pages


def render(root):
    async def first_render():
        async with Layout(root) as layout:
            return await layout.render()

    return asyncio.run(first_render())["model"]


def submit_first_form(root):
    async def submit():
        async with Layout(root) as layout:
            model = (await layout.render())["model"]
            form = next(find_all(model, lambda node: node.get("tagName") == "form"))
            handlers = form["eventHandlers"]
            handler = handlers.get("onSubmit") or handlers["on_submit"]
            await layout.deliver({"type": "layout-event", "target": handler["target"], "data": [{}]})
            return (await layout.render())["model"]

    return asyncio.run(submit())


def texts(model):
    if isinstance(model, str):
        yield model
        return
    for child in model.get("children", []):
        yield from texts(child)


def find_all(model, predicate):
    if isinstance(model, str):
        return
    if predicate(model):
        yield model
    for child in model.get("children", []):
        yield from find_all(child, predicate)


def has_class(name):
    def matches(node):
        attributes = node.get("attributes", {})
        return name in (attributes.get("class") or attributes.get("className") or "").split()

    return matches


def calendar_cells(model):
    """Map each resource to its per-day over-allocation flags."""
    table = next(find_all(model, has_class("calendar")))
    body = next(find_all(table, lambda node: node.get("tagName") == "tbody"))
    rows = {}
    for row in body["children"]:
        name_cell, *day_cells = row["children"]
        rows[next(texts(name_cell))] = [has_class("cell-over")(cell) for cell in day_cells]
    return rows


class TestHelpers:
    def test_route_path(self):
        assert pages.route_path("/") == "/"
        assert pages.route_path("/resources/") == "/resources"
        assert pages.route_path("report") == "/report"

    def test_load_page_data_reports_store_errors(self, store):
        store.fail_with = "timeout"
        assert pages.load_page_data(lambda: {"rows": store.select("resources")}) == {"error": "timeout"}

    def test_load_page_data_success(self, store):
        data = pages.load_page_data(lambda: {"rows": []})
        assert data == {"rows": [], "error": ""}


class TestPages:
    def test_resources_table(self, seeded_store):
        content = list(texts(render(pages.ResourcesPage())))
        assert "Ada" in content
        assert "Engineering" in content
        assert "All Departments" in content

    def test_resources_error_message(self, store):
        store.fail_with = "permission denied"
        model = render(pages.ResourcesPage())
        errors = list(find_all(model, has_class("error")))
        assert list(texts(errors[0])) == ["permission denied"]

    def test_projects_empty_state(self, store):
        assert "No projects found." in list(texts(render(pages.ProjectsPage())))

    def test_assign_lists_allocations(self, seeded_store):
        content = list(texts(render(pages.AssignPage())))
        assert "Current Allocations" in content
        assert "60%" in content

    def test_report_rows(self, seeded_store):
        content = list(texts(render(pages.ReportPage())))
        assert "Apollo, Hermes" in content
        assert "Available" in content

    def test_assign_rejects_incomplete_form(self, seeded_store):
        model = submit_first_form(pages.AssignPage())
        errors = list(find_all(model, has_class("error")))
        assert list(texts(errors[0])) == ["Please fill in all fields."]
        assert ("insert", "allocations") not in seeded_store.calls


class TestCalendarPage:
    def test_only_days_above_one_hundred_are_highlighted(self, seeded_store):
        cy = seeded_store.tables["resources"][2]
        apollo = seeded_store.tables["projects"][0]
        seeded_store.add(
            "allocations",
            resource_id=cy["id"],
            project_id=apollo["id"],
            start_date="2025-03-03",
            end_date="2025-03-03",
            allocation_percent=100,
        )
        model = render(pages.AllocationsPage(initial_month=(2025, 3)))
        assert "March 2025" in list(texts(model))
        cells = calendar_cells(model)
        assert [day for day, over in enumerate(cells["Ada"], start=1) if over] == list(range(10, 21))
        assert not any(cells["Bob"])
        assert not any(cells["Cy"])

    def test_chips_show_project_and_percent(self, seeded_store):
        content = list(texts(render(pages.AllocationsPage(initial_month=(2025, 3)))))
        assert "Apollo (60%)" in content
        assert "Hermes" in content
