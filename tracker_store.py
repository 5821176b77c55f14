from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Sequence, Tuple

import psycopg2
import requests
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

from tracker_config import Settings, load_settings

logger = logging.getLogger(__name__)

TABLES: Dict[str, Tuple[str, ...]] = {
    "resources": ("name", "department", "role"),
    "projects": ("name", "start_date", "end_date", "description"),
    "allocations": ("resource_id", "project_id", "start_date", "end_date", "allocation_percent"),
}

# alias -> (foreign key column, related table); the related table's "name" is projected.
ALLOCATION_JOINS: Dict[str, Tuple[str, str]] = {
    "resource_name": ("resource_id", "resources"),
    "project_name": ("project_id", "projects"),
}

ID_COLUMNS = {"id", "resource_id", "project_id"}
IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")
UNAVAILABLE_MESSAGE = "Data service is unavailable"


class StoreError(Exception):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def check_table(table: str) -> str:
    if table not in TABLES:
        raise KeyError(table)
    return table


def check_identifier(name: str) -> str:
    if not IDENTIFIER.match(name):
        raise ValueError(f"Invalid column name: {name!r}")
    return name


def sanitize_payload(table: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {name: payload[name] for name in TABLES[check_table(table)] if name in payload}


def normalize_value(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in ID_COLUMNS:
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    return {key: normalize_value(key, value) for key, value in row.items()}


def embedded_name(value: Any) -> str | None:
    """Flatten an embedded ``{"name": ...}`` object, which may arrive as a one-item list."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        return value.get("name")
    return None


class RestStore:
    """Table access through the hosted PostgREST endpoint."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0, session: Any = None) -> None:
        self.base_url = f"{base_url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        table: str,
        params: Dict[str, str] | None = None,
        payload: Any = None,
        prefer: str | None = None,
    ) -> Any:
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer
        url = f"{self.base_url}/{check_table(table)}"
        try:
            response = self.session.request(
                method, url, params=params, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.exception("Data service request failed: %s %s", method, url)
            raise StoreError(UNAVAILABLE_MESSAGE) from exc

        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = {"message": response.text}

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning("Data service returned %s for %s %s", response.status_code, method, url)
            raise StoreError(message or f"Data service returned {response.status_code}", response.status_code)
        return body

    def select(
        self,
        table: str,
        columns: Sequence[str] | None = None,
        order: str | None = None,
        joins: Dict[str, Tuple[str, str]] | None = None,
    ) -> List[Dict[str, Any]]:
        fields = [check_identifier(column) for column in columns] if columns else ["*"]
        for alias, (_, related) in (joins or {}).items():
            fields.append(f"{check_identifier(alias)}:{check_table(related)}(name)")
        params = {"select": ",".join(fields)}
        if order:
            params["order"] = f"{check_identifier(order)}.asc"
        rows = self._request("GET", table, params=params) or []
        result = []
        for row in rows:
            for alias in joins or {}:
                row[alias] = embedded_name(row.get(alias))
            result.append(normalize_row(row))
        return result

    def insert(self, table: str, values: Dict[str, Any]) -> List[Dict[str, Any]]:
        rows = self._request(
            "POST", table, payload=[sanitize_payload(table, values)], prefer="return=representation"
        )
        return [normalize_row(row) for row in rows or []]

    def update(self, table: str, row_id: str, values: Dict[str, Any]) -> List[Dict[str, Any]]:
        rows = self._request(
            "PATCH",
            table,
            params={"id": f"eq.{row_id}"},
            payload=sanitize_payload(table, values),
            prefer="return=representation",
        )
        return [normalize_row(row) for row in rows or []]

    def delete(self, table: str, row_id: str) -> None:
        self._request("DELETE", table, params={"id": f"eq.{row_id}"})

    def ping(self) -> bool:
        self._request("GET", "resources", params={"select": "id", "limit": "1"})
        return True


class PostgresStore:
    """Table access over a direct Postgres connection."""

    def __init__(self, dsn: str, minconn: int = 1, maxconn: int = 10) -> None:
        self.dsn = dsn
        self.minconn = minconn
        self.maxconn = maxconn
        self._pool: pool.ThreadedConnectionPool | None = None

    def get_pool(self) -> pool.ThreadedConnectionPool:
        if self._pool is None:
            self._pool = pool.ThreadedConnectionPool(minconn=self.minconn, maxconn=self.maxconn, dsn=self.dsn)
        return self._pool

    @contextmanager
    def cursor(self) -> Iterator[Any]:
        try:
            db_pool = self.get_pool()
            db = db_pool.getconn()
        except psycopg2.Error as exc:
            logger.exception("Could not connect to the database")
            raise StoreError(UNAVAILABLE_MESSAGE) from exc
        try:
            with db.cursor(cursor_factory=RealDictCursor) as cursor:
                yield cursor
            db.commit()
        except psycopg2.Error as exc:
            self._rollback(db)
            message = getattr(getattr(exc, "diag", None), "message_primary", None) or str(exc).strip()
            logger.warning("Database error: %s", message)
            raise StoreError(message or "Database error") from exc
        except Exception:
            self._rollback(db)
            raise
        finally:
            db_pool.putconn(db, close=bool(db.closed))

    @staticmethod
    def _rollback(db: Any) -> None:
        try:
            db.rollback()
        except psycopg2.Error:
            logger.exception("Rollback failed")

    def _fetch(self, query: str, params: Sequence[Any] | None = None) -> List[Dict[str, Any]]:
        with self.cursor() as cursor:
            cursor.execute(query, params)
            if cursor.description is None:
                return []
            return [normalize_row(dict(row)) for row in cursor.fetchall()]

    def select(
        self,
        table: str,
        columns: Sequence[str] | None = None,
        order: str | None = None,
        joins: Dict[str, Tuple[str, str]] | None = None,
    ) -> List[Dict[str, Any]]:
        check_table(table)
        fields = [f"t.{check_identifier(column)}" for column in columns] if columns else ["t.*"]
        join_clauses = []
        for index, (alias, (foreign_key, related)) in enumerate((joins or {}).items()):
            join_alias = f"j{index}"
            fields.append(f"{join_alias}.name AS {check_identifier(alias)}")
            join_clauses.append(
                f"LEFT JOIN {check_table(related)} {join_alias} "
                f"ON {join_alias}.id = t.{check_identifier(foreign_key)}"
            )
        query = f"SELECT {', '.join(fields)} FROM {table} t"
        if join_clauses:
            query += " " + " ".join(join_clauses)
        if order:
            query += f" ORDER BY t.{check_identifier(order)}"
        return self._fetch(query)

    def insert(self, table: str, values: Dict[str, Any]) -> List[Dict[str, Any]]:
        data = sanitize_payload(table, values)
        columns = ", ".join(data.keys())
        placeholders = ", ".join("%s" for _ in data)
        return self._fetch(
            f"INSERT INTO {table} ({columns}) VALUES ({placeholders}) RETURNING *",
            list(data.values()),
        )

    def update(self, table: str, row_id: str, values: Dict[str, Any]) -> List[Dict[str, Any]]:
        data = sanitize_payload(table, values)
        assignments = ", ".join(f"{key} = %s" for key in data)
        return self._fetch(
            f"UPDATE {table} SET {assignments} WHERE id = %s RETURNING *",
            list(data.values()) + [row_id],
        )

    def delete(self, table: str, row_id: str) -> None:
        self._fetch(f"DELETE FROM {check_table(table)} WHERE id = %s", (row_id,))

    def ping(self) -> bool:
        rows = self._fetch("SELECT 1 AS ok")
        return bool(rows and rows[0].get("ok") == 1)


STORE: RestStore | PostgresStore | None = None


def create_store(settings: Settings) -> RestStore | PostgresStore:
    if settings.backend == "rest":
        if not settings.supabase_key:
            raise RuntimeError("SUPABASE_KEY is not configured")
        return RestStore(settings.supabase_url, settings.supabase_key, timeout=settings.timeout_seconds)
    if settings.backend == "postgres":
        return PostgresStore(settings.database_url)
    raise RuntimeError("SUPABASE_URL or DATABASE_URL environment variable is required")


def get_store() -> RestStore | PostgresStore:
    global STORE
    if STORE is None:
        STORE = create_store(load_settings())
    return STORE


def set_store(store: Any) -> None:
    global STORE
    STORE = store


def fetch_resources() -> List[Dict[str, Any]]:
    return get_store().select("resources", order="name")


def fetch_projects() -> List[Dict[str, Any]]:
    return get_store().select("projects", order="name")


def fetch_allocations() -> List[Dict[str, Any]]:
    return get_store().select("allocations", joins=ALLOCATION_JOINS)


def fetch_rows(table: str) -> List[Dict[str, Any]]:
    if check_table(table) == "allocations":
        return fetch_allocations()
    return get_store().select(table, order="name")


def insert_row(table: str, values: Dict[str, Any]) -> List[Dict[str, Any]]:
    return get_store().insert(table, values)


def update_row(table: str, row_id: str, values: Dict[str, Any]) -> List[Dict[str, Any]]:
    return get_store().update(table, str(row_id), values)


def delete_row(table: str, row_id: str) -> None:
    get_store().delete(table, str(row_id))
