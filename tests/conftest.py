import itertools
from typing import Any, Dict, List

import pytest

import tracker_store
from tracker_store import TABLES, StoreError, sanitize_payload


class FakeStore:
    """In-memory stand-in for the data service with the same table API."""

    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {name: [] for name in TABLES}
        self.ids = itertools.count(1)
        self.fail_with: str | None = None
        self.calls: List[tuple] = []

    def _check(self) -> None:
        if self.fail_with:
            raise StoreError(self.fail_with)

    def add(self, table: str, **values: Any) -> Dict[str, Any]:
        row = {"id": str(next(self.ids)), **values}
        self.tables[table].append(row)
        return row

    def select(self, table, columns=None, order=None, joins=None):
        self._check()
        self.calls.append(("select", table))
        rows = [dict(row) for row in self.tables[table]]
        for alias, (foreign_key, related) in (joins or {}).items():
            names = {item["id"]: item.get("name") for item in self.tables[related]}
            for row in rows:
                row[alias] = names.get(row.get(foreign_key))
        if order:
            rows.sort(key=lambda row: row.get(order) or "")
        return rows

    def insert(self, table, values):
        self._check()
        self.calls.append(("insert", table))
        return [self.add(table, **sanitize_payload(table, values))]

    def update(self, table, row_id, values):
        self._check()
        self.calls.append(("update", table, row_id))
        for row in self.tables[table]:
            if row["id"] == row_id:
                row.update(sanitize_payload(table, values))
                return [dict(row)]
        return []

    def delete(self, table, row_id):
        self._check()
        self.calls.append(("delete", table, row_id))
        self.tables[table] = [row for row in self.tables[table] if row["id"] != row_id]

    def ping(self):
        self._check()
        return True


@pytest.fixture
def store():
    fake = FakeStore()
    tracker_store.set_store(fake)
    yield fake
    tracker_store.set_store(None)


@pytest.fixture
def seeded_store(store):
    ada = store.add("resources", name="Ada", department="Engineering", role="Developer")
    bob = store.add("resources", name="Bob", department="Design", role="Designer")
    store.add("resources", name="Cy", department="Engineering", role="Tester")
    apollo = store.add("projects", name="Apollo", start_date="2025-01-01", end_date="2025-12-31", description="")
    hermes = store.add("projects", name="Hermes", start_date="2025-03-01", end_date="2025-06-30", description="Mail")
    store.add(
        "allocations",
        resource_id=ada["id"],
        project_id=apollo["id"],
        start_date="2025-03-01",
        end_date="2025-03-20",
        allocation_percent=60,
    )
    store.add(
        "allocations",
        resource_id=ada["id"],
        project_id=hermes["id"],
        start_date="2025-03-10",
        end_date="2025-03-31",
        allocation_percent=50,
    )
    store.add(
        "allocations",
        resource_id=bob["id"],
        project_id=hermes["id"],
        start_date="2025-03-05",
        end_date="2025-03-06",
        allocation_percent=None,
    )
    return store


@pytest.fixture
def client(store):
    from website import app

    app.config["TESTING"] = True
    return app.test_client()
