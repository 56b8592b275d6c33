from typing import List, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from forcebulk.core.exceptions import SalesforceAPIError


class ErrorEnvelope(BaseModel):
    """One entry of the platform error payload."""
    message: str = ""
    errorCode: Optional[str] = None
    fields: Optional[List[str]] = None


_envelope_adapter = TypeAdapter(Union[List[ErrorEnvelope], ErrorEnvelope])


def parse_salesforce_error(status_code: int, body: Union[bytes, str]) -> SalesforceAPIError:
    """Best-effort parse of the platform error payload.

    The platform answers with ``[{"message": ..., "errorCode": ...}]``. Anything
    else (HTML, truncated JSON, an unrelated object) still yields an error that
    carries the raw body as its message.
    """
    text = body.decode("utf-8", errors="replace") if isinstance(body, (bytes, bytearray)) else body
    try:
        parsed = _envelope_adapter.validate_json(text) if text else None
    except ValidationError:
        parsed = None

    if isinstance(parsed, list):
        parsed = parsed[0] if parsed else None
    if parsed is None or not (parsed.message or parsed.errorCode):
        return SalesforceAPIError(
            status_code,
            message=text.strip() or "empty response body",
            body=text,
        )
    return SalesforceAPIError(
        status_code,
        message=parsed.message,
        error_code=parsed.errorCode,
        fields=parsed.fields,
        body=text,
    )
