from __future__ import annotations

from datetime import date

import pytest

from src.dept_records.dept_records.core.exceptions import AuthorizationError, ValidationError


def _doc(ref_no="AMU/REG/1", doc_date="2024-03-01", subject="Revision of pay"):
    return {
        "documentType": "Office Memo",
        "issuingAuthority": "Registrar",
        "subject": subject,
        "refNo": ref_no,
        "date": doc_date,
    }


def test_create_document_stores_image(container, department, make_file):
    document = container.document_service.create(department.department_id, _doc(), make_file("memo.jpg", "image/jpeg"))

    assert document.date == date(2024, 3, 1)
    assert container.uploads.resolve(document.image_url).exists()


def test_duplicate_ref_and_date_rejected(container, department, other_department, make_file):
    container.document_service.create(department.department_id, _doc(), make_file())

    with pytest.raises(ValidationError):
        container.document_service.create(department.department_id, _doc(subject="Other"), make_file())

    # different date, or another department, is a different document
    container.document_service.create(department.department_id, _doc(doc_date="2024-03-02"), make_file())
    container.document_service.create(other_department.department_id, _doc(), make_file())


def test_document_requires_file(container, department):
    with pytest.raises(ValidationError):
        container.document_service.create(department.department_id, _doc(), None)


def test_search_newest_first_and_paginated(container, department, make_file):
    for i in range(25):
        container.document_service.create(department.department_id, _doc(ref_no=f"REF/{i}"), make_file())

    first = container.document_service.search(department.department_id)
    assert (first.total, first.pages, len(first.items)) == (25, 2, 20)
    assert first.items[0].ref_no == "REF/24"

    second = container.document_service.search(department.department_id, page=2)
    assert [d.ref_no for d in second.items][-1] == "REF/0"


def test_search_text_and_date_range(container, department, make_file):
    container.document_service.create(department.department_id, _doc(ref_no="A", subject="Leave rules"), make_file())
    container.document_service.create(department.department_id, _doc(ref_no="B", doc_date="2024-05-10"), make_file())

    assert [d.ref_no for d in container.document_service.search(department.department_id, q="LEAVE").items] == ["A"]
    found = container.document_service.search(department.department_id, date_from=date(2024, 4, 1))
    assert [d.ref_no for d in found.items] == ["B"]


def test_delete_scoped_and_removes_file(container, department, other_department, make_file):
    document = container.document_service.create(department.department_id, _doc(), make_file())

    with pytest.raises(AuthorizationError):
        container.document_service.delete(document.document_id, department_id=other_department.department_id)

    container.document_service.delete(document.document_id, department_id=department.department_id)
    assert not container.uploads.resolve(document.image_url).exists()
