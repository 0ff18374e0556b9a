from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Document
from .repository import DocumentRepository

_COLUMNS = "document_id, department_id, document_type, issuing_authority, subject, ref_no, date, image_url, uploaded_at"


def _to_document(r: dict) -> Document:
    return Document(
        document_id=int(r["document_id"]),
        department_id=int(r["department_id"]),
        document_type=r["document_type"],
        issuing_authority=r["issuing_authority"],
        subject=r["subject"],
        ref_no=r["ref_no"],
        date=r["date"],
        image_url=r["image_url"],
        uploaded_at=r.get("uploaded_at"),
    )


class MySQLDocumentRepository(DocumentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        department_id: int,
        document_type: str,
        issuing_authority: str,
        subject: str,
        ref_no: str,
        date: date,
        image_url: str,
    ) -> Document:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO documents(department_id, document_type, issuing_authority, subject, ref_no, date, image_url)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(department_id), document_type, issuing_authority, subject, ref_no, date, image_url),
            )
            document_id = int(cur.lastrowid)
        return self.get_by_id(document_id)

    def get_by_id(self, document_id: int) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM documents WHERE document_id=%s", (int(document_id),))
            r = fetchone(cur)
            return _to_document(r) if r else None

    def find_by_ref(self, department_id: int, ref_no: str, date: date) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM documents WHERE department_id=%s AND ref_no=%s AND date=%s LIMIT 1",
                (int(department_id), ref_no, date),
            )
            r = fetchone(cur)
            return _to_document(r) if r else None

    def list_by_department(self, department_id: int) -> Sequence[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM documents WHERE department_id=%s ORDER BY uploaded_at DESC, document_id DESC",
                (int(department_id),),
            )
            return [_to_document(r) for r in fetchall(cur)]

    def delete(self, document_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM documents WHERE document_id=%s", (int(document_id),))
            return cur.rowcount > 0
