from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Document


class DocumentRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, document_id: int) -> Optional[Document]:
        raise NotImplementedError

    def find_by_ref(self, department_id: int, ref_no: str, date: date) -> Optional[Document]:
        raise NotImplementedError

    def list_by_department(self, department_id: int) -> Sequence[Document]:
        """Newest upload first."""

        raise NotImplementedError

    def delete(self, document_id: int) -> bool:
        raise NotImplementedError
