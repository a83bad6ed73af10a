"""Map PostgreSQL integrity violations to HTTP responses."""

from http import HTTPStatus
from typing import Optional

from sqlalchemy.exc import IntegrityError

# https://www.postgresql.org/docs/current/errcodes-appendix.html
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
CHECK_VIOLATION = "23514"

INTEGRITY_MESSAGES = {
    UNIQUE_VIOLATION: "Resource already exists.",
    FOREIGN_KEY_VIOLATION: "Referenced resource does not exist.",
    NOT_NULL_VIOLATION: "A required field is missing.",
    CHECK_VIOLATION: "A field value is out of range.",
}


def integrity_error_code(exc: IntegrityError) -> Optional[str]:
    """SQLSTATE of the driver error, falling back to its message text."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code

    text = str(orig).lower()
    if "unique constraint" in text or "duplicate key" in text:
        return UNIQUE_VIOLATION
    if "foreign key constraint" in text:
        return FOREIGN_KEY_VIOLATION
    if "not-null constraint" in text or "null value in column" in text:
        return NOT_NULL_VIOLATION
    if "check constraint" in text:
        return CHECK_VIOLATION
    return None


def integrity_error_response(exc: IntegrityError) -> tuple[HTTPStatus, str]:
    code = integrity_error_code(exc)
    if code == UNIQUE_VIOLATION:
        return HTTPStatus.CONFLICT, INTEGRITY_MESSAGES[code]
    return HTTPStatus.BAD_REQUEST, INTEGRITY_MESSAGES.get(
        code, "Request violates a data integrity constraint."
    )
