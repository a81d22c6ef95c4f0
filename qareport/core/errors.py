"""Error taxonomy for QA report operations.

Every failure crossing the persistence, identity or object-store boundary is
raised as one of these. ``qareport.main`` turns them into JSON responses so a
failed action never takes the session down; the client can simply retry.
"""


class QAReportError(Exception):
    """Base class for QA report failures."""

    status_code = 500
    code = "qa_report_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationRequired(QAReportError):
    """No authenticated principal on the request."""

    status_code = 401
    code = "authentication_required"


class NotFound(QAReportError):
    """Requested report, profile, item or share grant is absent."""

    status_code = 404
    code = "not_found"


class ValidationFailed(QAReportError):
    """Input is missing a required field or is malformed."""

    status_code = 422
    code = "validation_failed"


class InvalidTransition(QAReportError):
    """Report status change that the lifecycle does not allow."""

    status_code = 409
    code = "invalid_transition"


class PersistenceFailed(QAReportError):
    """The store rejected a read or write."""

    status_code = 502
    code = "persistence_failed"


class UploadFailed(QAReportError):
    """Image upload rejected, either too large or refused by storage."""

    status_code = 502
    code = "upload_failed"

    def __init__(self, message: str, too_large: bool = False):
        super().__init__(message)
        if too_large:
            self.status_code = 413
