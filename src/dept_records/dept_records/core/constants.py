"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DOCUMENTS_PAGE_SIZE = 20
ADMIN_ROWS_PAGE_SIZE = 50
SESSION_UPLOADS_LIMIT = 20
TRANSACTION_ID_LENGTH = 8
REMARKS_SEPARATOR = "; "
DEFAULT_HOD_TITLE = "Chairperson"
DEFAULT_DEPARTMENT_CATALOGUE = (
    "Department of Computer Science",
    "Department of Mathematics",
    "Department of Physics",
    "Department of Chemistry",
    "Department of Botany",
    "Department of Zoology",
)
DEFAULT_JOINING_SHIFT = "morning"

UPLOAD_URL_PREFIX = "/uploads/"
ALLOWED_UPLOAD_MIMETYPES = frozenset({"image/jpeg", "image/png", "image/gif", "application/pdf"})

# Multipart field name -> employee attribute holding the stored file URL.
EMPLOYEE_DOCUMENT_FIELDS = {
    "panCardDoc": "pan_card_url",
    "bankAccountDoc": "bank_proof_url",
    "aadharCardDoc": "aadhar_card_url",
    "officeMemoDoc": "office_memo_url",
    "joiningReportDoc": "joining_report_url",
    "termExtensionDoc": "term_extension_url",
}
