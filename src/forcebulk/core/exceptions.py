from typing import Any, List, Optional


class BulkError(Exception):
    """Base exception for all forcebulk errors."""


class TimestampParseError(BulkError, ValueError):
    """Raised when a platform timestamp does not match the wire format.

    Attributes:
        value: The raw input that failed to parse
        reason: Underlying format-mismatch reason
    """
    def __init__(self, value: Any, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"cannot parse timestamp {value!r}: {reason}")


class SalesforceAPIError(BulkError):
    """Error envelope returned by the platform.

    Attributes:
        status_code: HTTP status of the response (0 when unknown)
        error_code: Platform error code, e.g. ``INVALID_SESSION_ID``
        message: Human-readable platform message
        fields: Fields the platform blamed, if any
        body: Raw response body text
    """
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: Optional[str] = None,
        fields: Optional[List[str]] = None,
        body: Optional[str] = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.fields = fields or []
        self.body = body
        prefix = f"[{error_code}] " if error_code else ""
        super().__init__(f"{prefix}{message} (status {status_code})")


class StatusDecodeError(BulkError):
    """The status response could not be decoded into a job status.

    Carries both the best-effort platform error parsed from the raw body and
    the decode failure itself, so neither diagnostic is lost.
    """
    def __init__(self, api_error: SalesforceAPIError, decode_error: Exception):
        self.api_error = api_error
        self.decode_error = decode_error
        super().__init__(f"{api_error}\n{decode_error}")


class BulkHTTPError(BulkError):
    """A bulk endpoint answered with status >= 400.

    Attributes:
        operation: What was attempted, e.g. ``get result set from bulk job``
        status: HTTP status code
        reason: HTTP reason phrase
        body: Raw response body text, verbatim
    """
    def __init__(self, operation: str, status: int, reason: str, body: str):
        self.operation = operation
        self.status = status
        self.reason = reason
        self.body = body
        super().__init__(f"failed to {operation}: {self.status_line} body({body})")

    @property
    def status_line(self) -> str:
        return f"{self.status} {self.reason}".strip()


class JobOutcomeError(BulkError):
    """The job reached a terminal state that is not a success."""
    outcome = "job ended unsuccessfully"

    def __init__(self, job_id: Optional[str] = None, state: Optional[str] = None):
        self.job_id = job_id
        self.state = state
        message = self.outcome if job_id is None else f"{self.outcome}: {job_id}"
        super().__init__(message)


class JobAbortedError(JobOutcomeError):
    outcome = "job aborted"


class JobFailedError(JobOutcomeError):
    outcome = "job failed"


class JobWaitCancelled(BulkError):
    """The caller cancelled a wait loop before the job finished."""
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"wait for job {job_id} cancelled")
