from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def build_update(table: str, key_column: str, key: int, values: Dict[str, Any]) -> tuple[str, tuple]:
    """Build a parameterised partial UPDATE for the given column -> value map."""

    assignments = ", ".join(f"{column}=%s" for column in values)
    params = tuple(values.values()) + (int(key),)
    return f"UPDATE {table} SET {assignments} WHERE {key_column}=%s", params

