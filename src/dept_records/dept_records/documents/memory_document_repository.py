from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.memory_store import InMemoryStore
from .model import Document
from .repository import DocumentRepository


class InMemoryDocumentRepository(DocumentRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, Document]:
        return self._store.table("documents")

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
        with self._store.lock:
            document = Document(
                document_id=self._store.next_id("documents"),
                department_id=int(department_id),
                document_type=document_type,
                issuing_authority=issuing_authority,
                subject=subject,
                ref_no=ref_no,
                date=date,
                image_url=image_url,
                uploaded_at=now_local(),
            )
            self._rows[document.document_id] = document
            return document

    def get_by_id(self, document_id: int) -> Optional[Document]:
        return self._rows.get(int(document_id))

    def find_by_ref(self, department_id: int, ref_no: str, date: date) -> Optional[Document]:
        return next(
            (
                d
                for d in self._rows.values()
                if d.department_id == int(department_id) and d.ref_no == ref_no and d.date == date
            ),
            None,
        )

    def list_by_department(self, department_id: int) -> Sequence[Document]:
        docs = [d for d in self._rows.values() if d.department_id == int(department_id)]
        # ids break ties between uploads within the same clock tick
        return sorted(docs, key=lambda d: (d.uploaded_at, d.document_id), reverse=True)

    def delete(self, document_id: int) -> bool:
        with self._store.lock:
            return self._rows.pop(int(document_id), None) is not None
