from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional

from werkzeug.datastructures import FileStorage

from ..admin.filters import Page, paginate
from ..common.datetime_utils import format_iso_date
from ..common.validators import optional_date, require_date, require_int, require_non_empty
from ..core.constants import DOCUMENTS_PAGE_SIZE
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..departments.repository import DepartmentRepository
from ..uploads.storage import UploadStore
from .model import Document
from .repository import DocumentRepository

logger = logging.getLogger(__name__)


def _matches(doc: Document, needle: str) -> bool:
    fields = (doc.document_type, doc.issuing_authority, doc.subject, doc.ref_no, format_iso_date(doc.date))
    return any(needle in (text or "").lower() for text in fields)


class DocumentService:
    """Use cases: the department document gallery."""

    def __init__(self, documents: DocumentRepository, departments: DepartmentRepository, uploads: UploadStore):
        self._documents = documents
        self._departments = departments
        self._uploads = uploads

    def create(self, department_id: int, data: Mapping, file: Optional[FileStorage]) -> Document:
        if not self._departments.get_by_id(department_id):
            raise NotFoundError("Department not found")

        document_type = require_non_empty(data.get("documentType"), "Document type")
        issuing_authority = require_non_empty(data.get("issuingAuthority"), "Issuing authority")
        subject = require_non_empty(data.get("subject"), "Subject")
        ref_no = require_non_empty(data.get("refNo"), "Reference number")
        doc_date = require_date(data.get("date"), "Date")

        if self._documents.find_by_ref(department_id, ref_no, doc_date):
            raise ValidationError("A document with this reference number and date already exists")

        image_url = self._uploads.save(file, field_name="documentImage")
        document = self._documents.create(
            department_id=int(department_id),
            document_type=document_type,
            issuing_authority=issuing_authority,
            subject=subject,
            ref_no=ref_no,
            date=doc_date,
            image_url=image_url,
        )
        logger.info("Document %s (%s) archived for department %s", document.document_id, ref_no, department_id)
        return document

    def search(
        self,
        department_id: int,
        *,
        q: str = "",
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
        page_size: int = DOCUMENTS_PAGE_SIZE,
    ) -> Page[Document]:
        needle = (q or "").strip().lower()
        docs = [
            d
            for d in self._documents.list_by_department(department_id)
            if (not needle or _matches(d, needle))
            and (date_from is None or d.date >= date_from)
            and (date_to is None or d.date <= date_to)
        ]
        return paginate(docs, page, page_size)

    def search_args(self, department_id: int, args: Mapping) -> Page[Document]:
        return self.search(
            department_id,
            q=args.get("q") or "",
            date_from=optional_date(args.get("from"), "From date"),
            date_to=optional_date(args.get("to"), "To date"),
            page=require_int(args.get("page") or 1, "Page", min_value=1),
        )

    def delete(self, document_id: int, *, department_id: Optional[int] = None) -> None:
        document = self._documents.get_by_id(document_id)
        if not document:
            raise NotFoundError("Document not found")
        if department_id is not None and document.department_id != int(department_id):
            raise AuthorizationError("Document belongs to another department")

        self._documents.delete(document.document_id)
        self._uploads.delete(document.image_url)
        logger.info("Document %s deleted", document.document_id)
