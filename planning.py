"""View logic shared by the tracker pages and the JSON API.

Everything here works on plain row dicts as returned by ``tracker_store`` and
never talks to the data service, so pages can filter, sort and aggregate the
full lists they fetched.
"""
from __future__ import annotations

import calendar
import math
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple

RESOURCE_FIELDS = ("name", "department", "role")
PROJECT_FIELDS = ("name", "start_date", "end_date", "description")
ALLOCATION_FIELDS = ("resource_id", "project_id", "start_date", "end_date", "allocation_percent")

MISSING_FIELDS_MESSAGE = "Please fill in all fields."
OVER_ALLOCATION_THRESHOLD = 100

AVAILABLE = "available"
NOT_AVAILABLE = "not-available"


class ValidationError(ValueError):
    pass


def text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def text_key(value: Any) -> str:
    return text(value).casefold()


def empty_form(fields: Iterable[str]) -> Dict[str, str]:
    return {name: "" for name in fields}


# Sorting


def toggle_sort(current_key: str, ascending: bool, key: str) -> Tuple[str, bool]:
    """Clicking the active column flips direction; another column starts ascending."""
    if current_key == key:
        return key, not ascending
    return key, True


def sort_rows(
    rows: Iterable[Dict[str, Any]],
    key_funcs: Dict[str, Callable[[Dict[str, Any]], Any]],
    key: str,
    ascending: bool = True,
) -> List[Dict[str, Any]]:
    if key not in key_funcs:
        raise ValueError(f"Unknown sort key: {key}")
    # sorted() stays stable with reverse=True, so ties keep their fetch order.
    return sorted(rows, key=key_funcs[key], reverse=not ascending)


RESOURCE_SORT_KEYS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "name": lambda row: text_key(row.get("name")),
    "department": lambda row: text_key(row.get("department")),
    "role": lambda row: text_key(row.get("role")),
}

PROJECT_SORT_KEYS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "name": lambda row: text_key(row.get("name")),
    "start_date": lambda row: text(row.get("start_date")),
    "end_date": lambda row: text(row.get("end_date")),
    "description": lambda row: text_key(row.get("description")),
}

ALLOCATION_SORT_KEYS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "resource": lambda row: text_key(row.get("resource_name")),
    "project": lambda row: text_key(row.get("project_name")),
    "start_date": lambda row: text(row.get("start_date")),
    "end_date": lambda row: text(row.get("end_date")),
}


def _report_last_day_key(row: Dict[str, Any]) -> Tuple[int, str]:
    # Available rows lead when ascending and trail when descending.
    return (0 if row.get("available") else 1, text(row.get("last_day")))


REPORT_SORT_KEYS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "resource": lambda row: text_key(row.get("resource")),
    "projects": lambda row: text_key(row.get("projects_label")),
    "last_day": _report_last_day_key,
}


# Filters


def distinct_values(rows: Iterable[Dict[str, Any]], field: str) -> List[str]:
    seen: Dict[str, None] = {}
    for row in rows:
        value = text(row.get(field))
        if value:
            seen.setdefault(value, None)
    return list(seen)


def matches_search(search: str, *values: Any) -> bool:
    needle = text_key(search)
    if not needle:
        return True
    return any(needle in text_key(value) for value in values)


def in_range(value: Any, lower: str = "", upper: str = "") -> bool:
    """Inclusive ISO date string check; blank bounds are open."""
    lower, upper = text(lower), text(upper)
    if not lower and not upper:
        return True
    current = text(value)
    if not current:
        return False
    if lower and current < lower:
        return False
    if upper and current > upper:
        return False
    return True


def filter_resources(
    rows: Iterable[Dict[str, Any]],
    search: str = "",
    department: str = "",
    role: str = "",
) -> List[Dict[str, Any]]:
    return [
        row
        for row in rows
        if (not department or text(row.get("department")) == department)
        and (not role or text(row.get("role")) == role)
        and matches_search(search, row.get("name"), row.get("department"), row.get("role"))
    ]


def filter_projects(
    rows: Iterable[Dict[str, Any]],
    search: str = "",
    start_from: str = "",
    start_to: str = "",
    end_from: str = "",
    end_to: str = "",
) -> List[Dict[str, Any]]:
    return [
        row
        for row in rows
        if matches_search(search, row.get("name"), row.get("description"))
        and in_range(row.get("start_date"), start_from, start_to)
        and in_range(row.get("end_date"), end_from, end_to)
    ]


# Form validation


def _require(values: Dict[str, Any], fields: Sequence[str]) -> Dict[str, str]:
    cleaned = {name: text(values.get(name)) for name in fields}
    if any(not cleaned[name] for name in fields):
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    return cleaned


def clean_resource(values: Dict[str, Any]) -> Dict[str, str]:
    return _require(values, RESOURCE_FIELDS)


def clean_project(values: Dict[str, Any]) -> Dict[str, str]:
    cleaned = _require(values, ("name", "start_date", "end_date"))
    cleaned["description"] = text(values.get("description"))
    return cleaned


def parse_percent(value: Any) -> int | float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        percent = value
    else:
        raw = text(value)
        if not raw:
            return None
        try:
            percent = float(raw)
        except ValueError as exc:
            raise ValidationError("Allocation percent must be a number.") from exc
    if not math.isfinite(percent):
        raise ValidationError("Allocation percent must be a number.")
    if percent < 0:
        raise ValidationError("Allocation percent cannot be negative.")
    if float(percent).is_integer():
        return int(percent)
    return float(percent)


def clean_allocation(values: Dict[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = _require(values, ("resource_id", "project_id", "start_date", "end_date"))
    cleaned["allocation_percent"] = parse_percent(values.get("allocation_percent"))
    return cleaned


def format_percent(value: Any) -> str:
    if value is None or value == "":
        return ""
    number = float(value)
    return str(int(number)) if number.is_integer() else f"{number:g}"


# Calendar


def month_days(year: int, month: int) -> List[str]:
    _, count = calendar.monthrange(year, month)
    return [date(year, month, day).isoformat() for day in range(1, count + 1)]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"


def covers(allocation: Dict[str, Any], day: str) -> bool:
    start = text(allocation.get("start_date"))
    end = text(allocation.get("end_date"))
    return bool(start and end) and start <= day <= end


def project_names(allocations: Iterable[Dict[str, Any]]) -> List[str]:
    return distinct_values(allocations, "project_name")


def _project_selected(allocation: Dict[str, Any], selected_projects: Sequence[str]) -> bool:
    return not selected_projects or text(allocation.get("project_name")) in selected_projects


def cell_allocations(
    allocations: Iterable[Dict[str, Any]],
    resource_id: str,
    day: str,
    selected_projects: Sequence[str] = (),
) -> List[Dict[str, Any]]:
    return [
        allocation
        for allocation in allocations
        if text(allocation.get("resource_id")) == resource_id
        and covers(allocation, day)
        and _project_selected(allocation, selected_projects)
    ]


def cell_total(allocations: Iterable[Dict[str, Any]]) -> float:
    return sum(float(allocation.get("allocation_percent") or 0) for allocation in allocations)


def is_over_allocated(total: float) -> bool:
    return total > OVER_ALLOCATION_THRESHOLD


def calendar_resources(
    resources: Iterable[Dict[str, Any]],
    allocations: Sequence[Dict[str, Any]],
    selected_resources: Sequence[str] = (),
    selected_projects: Sequence[str] = (),
) -> List[Dict[str, Any]]:
    visible = []
    for resource in resources:
        resource_id = text(resource.get("id"))
        if selected_resources and resource_id not in selected_resources:
            continue
        if selected_projects and not any(
            text(allocation.get("resource_id")) == resource_id
            and text(allocation.get("project_name")) in selected_projects
            for allocation in allocations
        ):
            continue
        visible.append(resource)
    return visible


def build_calendar(
    resources: Iterable[Dict[str, Any]],
    allocations: Sequence[Dict[str, Any]],
    year: int,
    month: int,
    selected_resources: Sequence[str] = (),
    selected_projects: Sequence[str] = (),
) -> Dict[str, Any]:
    days = month_days(year, month)
    rows = []
    for resource in calendar_resources(resources, allocations, selected_resources, selected_projects):
        resource_id = text(resource.get("id"))
        cells = []
        for day in days:
            items = cell_allocations(allocations, resource_id, day, selected_projects)
            total = cell_total(items)
            cells.append(
                {
                    "day": day,
                    "allocations": [
                        {
                            "id": text(item.get("id")),
                            "project": text(item.get("project_name")),
                            "percent": item.get("allocation_percent"),
                        }
                        for item in items
                    ],
                    "total": total,
                    "over_allocated": is_over_allocated(total),
                }
            )
        rows.append({"resource_id": resource_id, "resource": text(resource.get("name")), "cells": cells})
    return {
        "year": year,
        "month": month,
        "label": month_label(year, month),
        "days": days,
        "rows": rows,
    }


# Availability report


def build_report(
    resources: Iterable[Dict[str, Any]],
    allocations: Iterable[Dict[str, Any]],
    today: str | None = None,
) -> List[Dict[str, Any]]:
    today = today or date.today().isoformat()
    by_resource: Dict[str, Dict[str, Any]] = {}
    for allocation in allocations:
        summary = by_resource.setdefault(
            text(allocation.get("resource_id")), {"projects": {}, "last_day": ""}
        )
        name = text(allocation.get("project_name"))
        if name:
            summary["projects"].setdefault(name, None)
        end = text(allocation.get("end_date"))
        if end and end > summary["last_day"]:
            summary["last_day"] = end

    rows = []
    for resource in resources:
        summary = by_resource.get(text(resource.get("id")), {"projects": {}, "last_day": ""})
        projects = list(summary["projects"])
        last_day = summary["last_day"]
        rows.append(
            {
                "resource_id": text(resource.get("id")),
                "resource": text(resource.get("name")),
                "projects": projects,
                "projects_label": ", ".join(projects),
                "last_day": last_day,
                "available": not last_day or last_day < today,
            }
        )
    return rows


def filter_report(
    rows: Iterable[Dict[str, Any]],
    search: str = "",
    project: str = "",
    availability: str = "",
) -> List[Dict[str, Any]]:
    if availability not in ("", AVAILABLE, NOT_AVAILABLE):
        raise ValueError(f"Unknown availability filter: {availability}")
    result = []
    for row in rows:
        if not matches_search(search, row.get("resource"), row.get("projects_label")):
            continue
        if project and project not in row.get("projects", []):
            continue
        if availability == AVAILABLE and not row.get("available"):
            continue
        if availability == NOT_AVAILABLE and row.get("available"):
            continue
        result.append(row)
    return result


def report_project_options(rows: Iterable[Dict[str, Any]]) -> List[str]:
    names = {name for row in rows for name in row.get("projects", []) if name}
    return sorted(names)


def report_status_label(row: Dict[str, Any]) -> str:
    return "Available" if row.get("available") else "Allocated"
