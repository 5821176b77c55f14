"""ReactPy pages of the resource tracker.

Every page owns its state: it fetches full tables through ``tracker_store``,
keeps them in hook state, filters and sorts them with ``planning`` and
re-fetches after each create, update or delete.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Sequence, Tuple

from reactpy import component, event, hooks, html, use_location

import planning
from planning import ValidationError
from theme import APP_CSS, APP_TITLE
from tracker_store import (
    StoreError,
    delete_row,
    fetch_allocations,
    fetch_projects,
    fetch_resources,
    insert_row,
    update_row,
)

logger = logging.getLogger(__name__)

NAV_LINKS = [
    ("/resources", "Resources"),
    ("/projects", "Projects"),
    ("/allocations", "Allocations"),
    ("/assign", "Assign"),
    ("/report", "Report"),
]


def load_page_data(loader: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    try:
        data = loader()
    except StoreError as exc:
        logger.warning("Failed to load page data: %s", exc)
        return {"error": str(exc)}
    data["error"] = ""
    return data


def event_value(event_data: Dict[str, Any]) -> str:
    target = event_data.get("target") or {}
    value = target.get("value", "")
    return "" if value is None else str(value)


def use_page_data(loader: Callable[[], Dict[str, Any]]) -> Tuple[Dict[str, Any], Callable[[], None]]:
    data, set_data = hooks.use_state(lambda: load_page_data(loader))

    def refresh() -> None:
        set_data(load_page_data(loader))

    return data, refresh


def use_mutation(refresh: Callable[[], None], set_error: Callable[[str], None]):
    """Run one data-changing action at a time, then re-fetch.

    Returns the busy flag and a runner reporting whether the action succeeded.
    """
    is_busy, set_is_busy = hooks.use_state(False)
    busy_ref = hooks.use_ref(False)

    def run_mutation(action: Callable[[], Any]) -> bool:
        if busy_ref.current:
            return False
        busy_ref.current = True
        set_is_busy(True)
        try:
            action()
        except (StoreError, ValidationError) as exc:
            set_error(str(exc))
            return False
        finally:
            busy_ref.current = False
            set_is_busy(False)
        set_error("")
        refresh()
        return True

    return is_busy, run_mutation


# Shared widgets


def text_input(value: Any, on_value: Callable[[str], None], placeholder: str = "", input_type: str = "text", disabled: bool = False):
    return html.input(
        {
            "class": "input",
            "type": input_type,
            "value": "" if value is None else value,
            "placeholder": placeholder,
            "disabled": disabled,
            "on_change": lambda event_data: on_value(event_value(event_data)),
        }
    )


def select_input(value: str, options: Sequence[Tuple[str, str]], on_value: Callable[[str], None], blank_label: str, disabled: bool = False):
    return html.select(
        {
            "class": "select",
            "value": value,
            "disabled": disabled,
            "on_change": lambda event_data: on_value(event_value(event_data)),
        },
        html.option({"value": ""}, blank_label),
        *[html.option({"key": option_value, "value": option_value}, label) for option_value, label in options],
    )


def labelled(label: str, control):
    return html.label({"class": "field"}, html.span({"class": "label"}, label), control)


def sort_header(label: str, key: str, sort: Tuple[str, bool], set_sort: Callable[..., None]):
    sort_key, ascending = sort
    arrow = ("▲" if ascending else "▼") if sort_key == key else ""
    return html.th(
        {
            "class": "sortable",
            "title": f"Sort by {label.lower()}",
            "on_click": lambda event_data: set_sort(lambda prev: planning.toggle_sort(prev[0], prev[1], key)),
        },
        f"{label} {arrow}".strip(),
    )


def messages(error: str = "", success: str = ""):
    return html.div(
        *([html.p({"class": "message error"}, error)] if error else []),
        *([html.p({"class": "message success"}, success)] if success else []),
    )


def row_actions(is_busy: bool, on_edit: Callable[[], None], on_delete: Callable[[], None]):
    return html.div(
        {"class": "row-actions"},
        html.button({"class": "btn primary", "type": "button", "disabled": is_busy, "on_click": lambda e: on_edit()}, "Edit"),
        html.button({"class": "btn danger", "type": "button", "disabled": is_busy, "on_click": lambda e: on_delete()}, "Delete"),
    )


def edit_actions(is_busy: bool, on_save: Callable[[], None], on_cancel: Callable[[], None], can_save: bool = True):
    return html.div(
        {"class": "row-actions"},
        html.button(
            {"class": "btn success", "type": "button", "disabled": is_busy or not can_save, "on_click": lambda e: on_save()},
            "Save",
        ),
        html.button({"class": "btn ghost", "type": "button", "on_click": lambda e: on_cancel()}, "Cancel"),
    )


def empty_row(colspan: int, label: str):
    return html.tr(html.td({"class": "empty", "colSpan": colspan}, label))


def filled(values: Dict[str, Any], fields: Sequence[str]) -> bool:
    return all(planning.text(values.get(name)) for name in fields)


# Pages


@component
def Navigation(pathname: str):
    return html.nav(
        {"class": "sidebar"},
        html.div({"class": "sidebar-title"}, APP_TITLE),
        *[
            html.a(
                {"key": path, "class": f"nav-link {'active' if pathname == path else ''}", "href": path},
                label,
            )
            for path, label in NAV_LINKS
        ],
    )


@component
def HomePage():
    return html.section(
        {"class": "card glass-surface"},
        html.h1(f"{APP_TITLE} Dashboard"),
        html.div({"class": "meta"}, "Track people, projects and who works on what, when."),
        html.ul(
            html.li(html.a({"href": "/resources"}, "Manage Resources")),
            html.li(html.a({"href": "/projects"}, "Manage Projects")),
            html.li(html.a({"href": "/allocations"}, "View Allocations")),
            html.li(html.a({"href": "/assign"}, "Assign Resources")),
            html.li(html.a({"href": "/report"}, "Availability Report")),
        ),
    )


@component
def ResourcesPage():
    data, refresh = use_page_data(lambda: {"resources": fetch_resources()})
    error, set_error = hooks.use_state("")
    is_busy, run_mutation = use_mutation(refresh, set_error)
    new_values, set_new_values = hooks.use_state(lambda: planning.empty_form(planning.RESOURCE_FIELDS))
    edit_id, set_edit_id = hooks.use_state(None)
    edit_values, set_edit_values = hooks.use_state({})
    search, set_search = hooks.use_state("")
    department, set_department = hooks.use_state("")
    role, set_role = hooks.use_state("")
    sort, set_sort = hooks.use_state(("name", True))

    resources = data.get("resources", [])

    def set_new_field(name: str, value: str) -> None:
        set_new_values(lambda prev: {**prev, name: value})

    def set_edit_field(name: str, value: str) -> None:
        set_edit_values(lambda prev: {**prev, name: value})

    @event(prevent_default=True)
    def handle_add(event_data: Dict[str, Any]) -> None:
        if run_mutation(lambda: insert_row("resources", planning.clean_resource(new_values))):
            set_new_values(planning.empty_form(planning.RESOURCE_FIELDS))

    def start_edit(row: Dict[str, Any]) -> None:
        set_edit_id(row["id"])
        set_edit_values({name: row.get(name) or "" for name in planning.RESOURCE_FIELDS})

    def cancel_edit() -> None:
        set_edit_id(None)
        set_edit_values({})

    def save_edit() -> None:
        if edit_id is None:
            return
        if run_mutation(lambda: update_row("resources", edit_id, planning.clean_resource(edit_values))):
            cancel_edit()

    visible = planning.sort_rows(
        planning.filter_resources(resources, search, department, role),
        planning.RESOURCE_SORT_KEYS,
        *sort,
    )

    def render_row(row: Dict[str, Any]):
        if row["id"] == edit_id:
            return html.tr(
                {"key": row["id"]},
                *[
                    html.td(text_input(edit_values.get(name, ""), lambda value, name=name: set_edit_field(name, value)))
                    for name in planning.RESOURCE_FIELDS
                ],
                html.td(edit_actions(is_busy, save_edit, cancel_edit, filled(edit_values, planning.RESOURCE_FIELDS))),
            )
        return html.tr(
            {"key": row["id"]},
            html.td(html.strong(row.get("name") or "")),
            html.td(row.get("department") or ""),
            html.td(row.get("role") or ""),
            html.td(
                row_actions(
                    is_busy,
                    lambda row=row: start_edit(row),
                    lambda row=row: run_mutation(lambda: delete_row("resources", row["id"])),
                )
            ),
        )

    return html.div(
        html.h1("Resources"),
        html.form(
            {"class": "card glass-surface form-grid", "on_submit": handle_add},
            text_input(new_values["name"], lambda value: set_new_field("name", value), "Resource name", disabled=is_busy),
            text_input(new_values["department"], lambda value: set_new_field("department", value), "Department", disabled=is_busy),
            text_input(new_values["role"], lambda value: set_new_field("role", value), "Role", disabled=is_busy),
            html.button({"class": "btn primary", "type": "submit", "disabled": is_busy}, "Add"),
        ),
        html.div(
            {"class": "card glass-surface toolbar"},
            text_input(search, set_search, "Search resources..."),
            select_input(department, [(value, value) for value in planning.distinct_values(resources, "department")], set_department, "All Departments"),
            select_input(role, [(value, value) for value in planning.distinct_values(resources, "role")], set_role, "All Roles"),
        ),
        messages(error or data.get("error", "")),
        html.div(
            {"class": "table-wrap glass-surface"},
            html.table(
                {"class": "table"},
                html.thead(
                    html.tr(
                        sort_header("Name", "name", sort, set_sort),
                        sort_header("Department", "department", sort, set_sort),
                        sort_header("Role", "role", sort, set_sort),
                        html.th(""),
                    )
                ),
                html.tbody(*[render_row(row) for row in visible] if visible else [empty_row(4, "No resources found.")]),
            ),
        ),
    )


@component
def ProjectsPage():
    data, refresh = use_page_data(lambda: {"projects": fetch_projects()})
    error, set_error = hooks.use_state("")
    is_busy, run_mutation = use_mutation(refresh, set_error)
    new_values, set_new_values = hooks.use_state(lambda: planning.empty_form(planning.PROJECT_FIELDS))
    edit_id, set_edit_id = hooks.use_state(None)
    edit_values, set_edit_values = hooks.use_state({})
    search, set_search = hooks.use_state("")
    date_filters, set_date_filters = hooks.use_state(
        {"start_from": "", "start_to": "", "end_from": "", "end_to": ""}
    )
    sort, set_sort = hooks.use_state(("name", True))

    projects = data.get("projects", [])
    required = ("name", "start_date", "end_date")

    def set_new_field(name: str, value: str) -> None:
        set_new_values(lambda prev: {**prev, name: value})

    def set_edit_field(name: str, value: str) -> None:
        set_edit_values(lambda prev: {**prev, name: value})

    def set_date_filter(name: str, value: str) -> None:
        set_date_filters(lambda prev: {**prev, name: value})

    @event(prevent_default=True)
    def handle_add(event_data: Dict[str, Any]) -> None:
        if run_mutation(lambda: insert_row("projects", planning.clean_project(new_values))):
            set_new_values(planning.empty_form(planning.PROJECT_FIELDS))

    def start_edit(row: Dict[str, Any]) -> None:
        set_edit_id(row["id"])
        set_edit_values({name: row.get(name) or "" for name in planning.PROJECT_FIELDS})

    def cancel_edit() -> None:
        set_edit_id(None)
        set_edit_values({})

    def save_edit() -> None:
        if edit_id is None:
            return
        if run_mutation(lambda: update_row("projects", edit_id, planning.clean_project(edit_values))):
            cancel_edit()

    visible = planning.sort_rows(
        planning.filter_projects(projects, search, **date_filters),
        planning.PROJECT_SORT_KEYS,
        *sort,
    )

    def edit_cell(name: str, input_type: str = "text"):
        return html.td(
            text_input(edit_values.get(name, ""), lambda value: set_edit_field(name, value), input_type=input_type)
        )

    def render_row(row: Dict[str, Any]):
        if row["id"] == edit_id:
            return html.tr(
                {"key": row["id"]},
                edit_cell("name"),
                edit_cell("start_date", "date"),
                edit_cell("end_date", "date"),
                edit_cell("description"),
                html.td(edit_actions(is_busy, save_edit, cancel_edit, filled(edit_values, required))),
            )
        return html.tr(
            {"key": row["id"]},
            html.td(html.strong(row.get("name") or "")),
            html.td(row.get("start_date") or ""),
            html.td(row.get("end_date") or ""),
            html.td(row.get("description") or ""),
            html.td(
                row_actions(
                    is_busy,
                    lambda row=row: start_edit(row),
                    lambda row=row: run_mutation(lambda: delete_row("projects", row["id"])),
                )
            ),
        )

    return html.div(
        html.h1("Manage Projects"),
        html.form(
            {"class": "card glass-surface form-grid", "on_submit": handle_add},
            text_input(new_values["name"], lambda value: set_new_field("name", value), "Project name", disabled=is_busy),
            labelled("Start date", text_input(new_values["start_date"], lambda value: set_new_field("start_date", value), input_type="date", disabled=is_busy)),
            labelled("End date", text_input(new_values["end_date"], lambda value: set_new_field("end_date", value), input_type="date", disabled=is_busy)),
            text_input(new_values["description"], lambda value: set_new_field("description", value), "Description", disabled=is_busy),
            html.button(
                {"class": "btn primary", "type": "submit", "disabled": is_busy or not filled(new_values, required)},
                "Processing..." if is_busy else "Add Project",
            ),
        ),
        html.div(
            {"class": "card glass-surface toolbar"},
            text_input(search, set_search, "Search by name or description"),
            html.span({"class": "label"}, "Start"),
            text_input(date_filters["start_from"], lambda value: set_date_filter("start_from", value), input_type="date"),
            text_input(date_filters["start_to"], lambda value: set_date_filter("start_to", value), input_type="date"),
            html.span({"class": "label"}, "End"),
            text_input(date_filters["end_from"], lambda value: set_date_filter("end_from", value), input_type="date"),
            text_input(date_filters["end_to"], lambda value: set_date_filter("end_to", value), input_type="date"),
            *(
                [html.button({"class": "btn ghost", "type": "button", "on_click": lambda e: set_search("")}, "Clear Search")]
                if search
                else []
            ),
        ),
        messages(f"Error: {error or data.get('error')}" if error or data.get("error") else ""),
        html.div(
            {"class": "table-wrap glass-surface"},
            html.table(
                {"class": "table"},
                html.thead(
                    html.tr(
                        sort_header("Name", "name", sort, set_sort),
                        sort_header("Start Date", "start_date", sort, set_sort),
                        sort_header("End Date", "end_date", sort, set_sort),
                        sort_header("Description", "description", sort, set_sort),
                        html.th(""),
                    )
                ),
                html.tbody(*[render_row(row) for row in visible] if visible else [empty_row(5, "No projects found.")]),
            ),
        ),
    )


def load_assign_data() -> Dict[str, Any]:
    return {
        "resources": fetch_resources(),
        "projects": fetch_projects(),
        "allocations": fetch_allocations(),
    }


@component
def AssignPage():
    data, refresh = use_page_data(load_assign_data)
    error, set_error = hooks.use_state("")
    success, set_success = hooks.use_state("")
    is_busy, run_mutation = use_mutation(refresh, set_error)
    new_values, set_new_values = hooks.use_state(lambda: planning.empty_form(planning.ALLOCATION_FIELDS))
    edit_id, set_edit_id = hooks.use_state(None)
    edit_values, set_edit_values = hooks.use_state({})
    sort, set_sort = hooks.use_state(("resource", True))

    resource_options = [(row["id"], row.get("name") or "") for row in data.get("resources", [])]
    project_options = [(row["id"], row.get("name") or "") for row in data.get("projects", [])]
    required = ("resource_id", "project_id", "start_date", "end_date")

    def set_new_field(name: str, value: str) -> None:
        set_new_values(lambda prev: {**prev, name: value})

    def set_edit_field(name: str, value: str) -> None:
        set_edit_values(lambda prev: {**prev, name: value})

    def mutate(action: Callable[[], Any], done: str) -> bool:
        set_success("")
        if run_mutation(action):
            set_success(done)
            return True
        return False

    @event(prevent_default=True)
    def handle_assign(event_data: Dict[str, Any]) -> None:
        if mutate(
            lambda: insert_row("allocations", planning.clean_allocation(new_values)),
            "Allocation assigned successfully!",
        ):
            set_new_values(planning.empty_form(planning.ALLOCATION_FIELDS))

    def start_edit(row: Dict[str, Any]) -> None:
        set_edit_id(row["id"])
        values = {name: row.get(name) or "" for name in planning.ALLOCATION_FIELDS}
        values["allocation_percent"] = planning.format_percent(row.get("allocation_percent"))
        set_edit_values(values)

    def cancel_edit() -> None:
        set_edit_id(None)
        set_edit_values({})

    def save_edit() -> None:
        if edit_id is None:
            return
        if mutate(
            lambda: update_row("allocations", edit_id, planning.clean_allocation(edit_values)),
            "Allocation updated!",
        ):
            cancel_edit()

    allocations = planning.sort_rows(data.get("allocations", []), planning.ALLOCATION_SORT_KEYS, *sort)

    def render_row(row: Dict[str, Any]):
        if row["id"] == edit_id:
            return html.tr(
                {"key": row["id"]},
                html.td(select_input(edit_values.get("resource_id", ""), resource_options, lambda value: set_edit_field("resource_id", value), "Select resource")),
                html.td(select_input(edit_values.get("project_id", ""), project_options, lambda value: set_edit_field("project_id", value), "Select project")),
                html.td(text_input(edit_values.get("start_date", ""), lambda value: set_edit_field("start_date", value), input_type="date")),
                html.td(text_input(edit_values.get("end_date", ""), lambda value: set_edit_field("end_date", value), input_type="date")),
                html.td(text_input(edit_values.get("allocation_percent", ""), lambda value: set_edit_field("allocation_percent", value), "%", input_type="number")),
                html.td(edit_actions(is_busy, save_edit, cancel_edit, filled(edit_values, required))),
            )
        percent = planning.format_percent(row.get("allocation_percent"))
        return html.tr(
            {"key": row["id"]},
            html.td(row.get("resource_name") or ""),
            html.td(row.get("project_name") or ""),
            html.td(row.get("start_date") or ""),
            html.td(row.get("end_date") or ""),
            html.td(f"{percent}%" if percent else ""),
            html.td(
                row_actions(
                    is_busy,
                    lambda row=row: start_edit(row),
                    lambda row=row: mutate(lambda: delete_row("allocations", row["id"]), "Allocation removed."),
                )
            ),
        )

    return html.div(
        html.h1("Assign Resource to Project"),
        html.form(
            {"class": "card glass-surface form-grid", "on_submit": handle_assign},
            labelled("Resource", select_input(new_values["resource_id"], resource_options, lambda value: set_new_field("resource_id", value), "Select resource", is_busy)),
            labelled("Project", select_input(new_values["project_id"], project_options, lambda value: set_new_field("project_id", value), "Select project", is_busy)),
            labelled("Start Date", text_input(new_values["start_date"], lambda value: set_new_field("start_date", value), input_type="date", disabled=is_busy)),
            labelled("End Date", text_input(new_values["end_date"], lambda value: set_new_field("end_date", value), input_type="date", disabled=is_busy)),
            labelled("Allocation %", text_input(new_values["allocation_percent"], lambda value: set_new_field("allocation_percent", value), "optional", input_type="number", disabled=is_busy)),
            html.button({"class": "btn primary", "type": "submit", "disabled": is_busy}, "Assigning..." if is_busy else "Assign"),
        ),
        messages(error or data.get("error", ""), success),
        html.h3("Current Allocations"),
        html.div(
            {"class": "table-wrap glass-surface"},
            html.table(
                {"class": "table"},
                html.thead(
                    html.tr(
                        sort_header("Resource", "resource", sort, set_sort),
                        sort_header("Project", "project", sort, set_sort),
                        sort_header("Start Date", "start_date", sort, set_sort),
                        sort_header("End Date", "end_date", sort, set_sort),
                        html.th("Allocation"),
                        html.th(""),
                    )
                ),
                html.tbody(
                    *[render_row(row) for row in allocations] if allocations else [empty_row(6, "No allocations yet.")]
                ),
            ),
        ),
    )


def multi_select(
    label: str,
    all_label: str,
    options: Sequence[Tuple[str, str]],
    selected: List[str],
    set_selected: Callable[..., None],
    is_open: bool,
    set_open: Callable[..., None],
):
    def toggle(value: str, checked: bool) -> None:
        if checked:
            set_selected(lambda prev: prev if value in prev else [*prev, value])
        else:
            set_selected(lambda prev: [item for item in prev if item != value])

    menu = html.div(
        {"class": "dropdown-menu glass-surface"},
        html.label(
            html.input({"type": "checkbox", "checked": not selected, "on_change": lambda e: set_selected([])}),
            all_label,
        ),
        *[
            html.label(
                {"key": value},
                html.input(
                    {
                        "type": "checkbox",
                        "checked": value in selected,
                        "on_change": lambda e, value=value: toggle(value, bool((e.get("target") or {}).get("checked"))),
                    }
                ),
                option_label,
            )
            for value, option_label in options
        ],
    )
    return html.div(
        {"class": "dropdown"},
        html.button(
            {"class": "btn", "type": "button", "on_click": lambda e: set_open(lambda prev: not prev)},
            f"{len(selected)} selected ▼" if selected else f"{label} ▼",
        ),
        *([menu] if is_open else []),
    )


def current_month() -> Tuple[int, int]:
    today = date.today()
    return today.year, today.month


def render_calendar_cell(cell: Dict[str, Any]):
    chips = [
        html.span(
            {"key": item["id"] or str(index), "class": "chip"},
            item["project"] + (f" ({planning.format_percent(item['percent'])}%)" if item["percent"] is not None else ""),
        )
        for index, item in enumerate(cell["allocations"])
    ]
    return html.td(
        {"key": cell["day"], "class": "cell-over" if cell["over_allocated"] else ""},
        html.div({"class": "chips"}, *chips) if chips else "",
    )


@component
def AllocationsPage(initial_month: Tuple[int, int] | None = None):
    data, refresh = use_page_data(lambda: {"resources": fetch_resources(), "allocations": fetch_allocations()})
    year_month, set_year_month = hooks.use_state(lambda: initial_month or current_month())
    selected_resources, set_selected_resources = hooks.use_state([])
    selected_projects, set_selected_projects = hooks.use_state([])
    show_resources, set_show_resources = hooks.use_state(False)
    show_projects, set_show_projects = hooks.use_state(False)

    year, month = year_month
    resources = data.get("resources", [])
    allocations = data.get("allocations", [])

    def move_month(delta: int) -> None:
        set_year_month(lambda prev: planning.shift_month(prev[0], prev[1], delta))
        refresh()

    grid = planning.build_calendar(resources, allocations, year, month, selected_resources, selected_projects)

    return html.div(
        html.div(
            {"class": "month-nav"},
            html.button({"class": "btn primary", "type": "button", "on_click": lambda e: move_month(-1)}, "<"),
            html.h2(grid["label"]),
            html.button({"class": "btn primary", "type": "button", "on_click": lambda e: move_month(1)}, ">"),
        ),
        html.div(
            {"class": "toolbar"},
            multi_select(
                "Filter resources",
                "All resources",
                [(row["id"], row.get("name") or "") for row in resources],
                selected_resources,
                set_selected_resources,
                show_resources,
                set_show_resources,
            ),
            multi_select(
                "Filter projects",
                "All projects",
                [(name, name) for name in planning.project_names(allocations)],
                selected_projects,
                set_selected_projects,
                show_projects,
                set_show_projects,
            ),
        ),
        messages(data.get("error", "")),
        html.div(
            {"class": "calendar-scroll glass-surface", "data-drag-scroll": "1"},
            html.table(
                {"class": "calendar"},
                html.thead(
                    html.tr(
                        html.th({"class": "resource-cell"}, "Resource"),
                        *[html.th({"key": day}, str(int(day[-2:]))) for day in grid["days"]],
                    )
                ),
                html.tbody(
                    *[
                        html.tr(
                            {"key": row["resource_id"]},
                            html.td({"class": "resource-cell"}, row["resource"]),
                            *[render_calendar_cell(cell) for cell in row["cells"]],
                        )
                        for row in grid["rows"]
                    ]
                ),
            ),
        ),
    )


def load_report_data() -> Dict[str, Any]:
    return {"rows": planning.build_report(fetch_resources(), fetch_allocations())}


@component
def ReportPage():
    data, _ = use_page_data(load_report_data)
    search, set_search = hooks.use_state("")
    project, set_project = hooks.use_state("")
    availability, set_availability = hooks.use_state("")
    sort, set_sort = hooks.use_state(("resource", True))

    rows = data.get("rows", [])
    visible = planning.sort_rows(
        planning.filter_report(rows, search, project, availability),
        planning.REPORT_SORT_KEYS,
        *sort,
    )

    return html.div(
        html.h1("Resource Allocation Report"),
        html.div(
            {"class": "card glass-surface toolbar"},
            text_input(search, set_search, "Search resource or project..."),
            select_input(project, [(name, name) for name in planning.report_project_options(rows)], set_project, "All projects"),
            select_input(
                availability,
                [(planning.AVAILABLE, "Available"), (planning.NOT_AVAILABLE, "Not available")],
                set_availability,
                "All statuses",
            ),
        ),
        messages(data.get("error", "")),
        html.div(
            {"class": "table-wrap glass-surface"},
            html.table(
                {"class": "table"},
                html.thead(
                    html.tr(
                        sort_header("Resource", "resource", sort, set_sort),
                        sort_header("Projects", "projects", sort, set_sort),
                        sort_header("Last Day", "last_day", sort, set_sort),
                        html.th("Status"),
                    )
                ),
                html.tbody(
                    *[
                        html.tr(
                            {"key": row["resource_id"]},
                            html.td(html.strong(row["resource"])),
                            html.td(row["projects_label"]),
                            html.td(row["last_day"] or "-"),
                            html.td(
                                html.span(
                                    {"class": f"pill {'pill-success' if row['available'] else 'pill-muted'}"},
                                    planning.report_status_label(row),
                                )
                            ),
                        )
                        for row in visible
                    ]
                    if visible
                    else [empty_row(4, "No resources match.")]
                ),
            ),
        ),
    )


@component
def NotFoundPage():
    return html.section(
        {"class": "card glass-surface"},
        html.h1("Page not found"),
        html.a({"href": "/"}, "Back to the dashboard"),
    )


ROUTES = {
    "/": HomePage,
    "/resources": ResourcesPage,
    "/projects": ProjectsPage,
    "/assign": AssignPage,
    "/allocations": AllocationsPage,
    "/report": ReportPage,
}


def route_path(pathname: str) -> str:
    return "/" + pathname.strip("/")


@component
def App():
    location = use_location()
    pathname = route_path(location.pathname)
    page = ROUTES.get(pathname, NotFoundPage)
    return html.div(
        {"id": "resource-tracker-root", "class": "shell"},
        html.style(APP_CSS),
        Navigation(pathname),
        html.main({"class": "page"}, page(key=pathname)),
    )
