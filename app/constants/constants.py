"""Constants for form kinds, email template roles, admin roles, upload slots and database error types."""

from enum import Enum


class FormType(str, Enum):
    """Enumeration of the lead-capture forms on the public site."""

    contact = "contact"
    quote = "quote"
    certification = "certification"


class TemplateType(str, Enum):
    """Audience of a stored email template."""

    admin = "admin"
    customer = "customer"


class AdminRole(str, Enum):
    """Enumeration of admin panel roles."""

    admin = "admin"
    editor = "editor"


class UploadSlot(str, Enum):
    """Named file parts accepted by the submission endpoint."""

    cad_file = "cad_file"
    rfq_file = "rfq_file"


class DatabaseErrorType(str, Enum):
    """Classification of a failed database operation."""

    connection_refused = "Connection Refused"
    access_denied = "Access Denied"
    database_not_found = "Database Not Found"
    table_not_found = "Table Not Found"
    database_error = "Database Error"


DEFAULT_FORM_TYPE = FormType.contact.value

DEFAULT_ADMIN_SUBJECT = "New Form Submission"
DEFAULT_ADMIN_HTML = "A new form has been submitted."

SMTP_NOT_CONFIGURED = "SMTP not configured"

# Upload limits
MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5MB
ALLOWED_UPLOAD_EXTENSIONS = {
    UploadSlot.cad_file: {
        ".doc", ".docx", ".xl", ".xls", ".xlsx", ".ppt", ".pptx",
        ".pdf", ".jpg", ".jpeg", ".png", ".dwg",
    },
    UploadSlot.rfq_file: {".doc", ".docx", ".xl", ".xls", ".xlsx", ".pdf"},
}
UPLOAD_SLOT_LABELS = {
    UploadSlot.cad_file: "CAD file",
    UploadSlot.rfq_file: "RFQ file",
}

# Admin submission listing
SUBMISSION_SORT_COLUMNS = ("submitted_at", "name", "email", "form_type")
DEFAULT_SUBMISSION_SORT = "submitted_at"
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500

# Rate limits (slowapi syntax)
SUBMISSION_RATE_LIMIT = "20/minute"
LOGIN_RATE_LIMIT = "10/minute"
