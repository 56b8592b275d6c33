"""Codec for the Salesforce timestamp wire format.

The platform emits ``2023-12-02T02:30:02.000+0000``: millisecond precision and a
numeric zone offset without a colon. ``datetime.strptime`` with ``%z`` would
also accept ``Z`` and ``+00:00``, so the exact shape is checked with a regex
before parsing.
"""

import re
from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, PlainSerializer

from forcebulk.core.exceptions import TimestampParseError

WIRE_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"
JSON_NULL = "null"

# Returned for JSON null / absent values.
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)

_WIRE_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}[+-]\d{4}$"
)


def is_zero_time(value: datetime) -> bool:
    return value == ZERO_TIME


def decode_timestamp(raw: Any) -> datetime:
    """Decode a platform timestamp into an aware UTC datetime.

    Accepts the raw JSON token (``"..."`` with quotes, or ``null``), an
    already-decoded string, ``None`` or ``bytes``. Null yields ``ZERO_TIME``.

    Raises:
        TimestampParseError: the value does not match the wire format.
    """
    if raw is None:
        return ZERO_TIME
    if isinstance(raw, datetime):
        return raw.astimezone(timezone.utc) if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if not isinstance(raw, str):
        raise TimestampParseError(raw, f"unsupported type {type(raw).__name__}")

    text = raw.strip()
    if text == JSON_NULL:
        return ZERO_TIME
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        text = text[1:-1]

    if not _WIRE_PATTERN.match(text):
        raise TimestampParseError(
            raw, "does not match YYYY-MM-DDThh:mm:ss.sss+hhmm"
        )
    try:
        parsed = datetime.strptime(text, WIRE_FORMAT)
    except ValueError as exc:
        raise TimestampParseError(raw, str(exc)) from exc
    return parsed.astimezone(timezone.utc)


def encode_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime in the platform form; the zero instant encodes to None."""
    if value is None or is_zero_time(value):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}" + utc.strftime("%z")


SalesforceDateTime = Annotated[
    datetime,
    BeforeValidator(decode_timestamp),
    PlainSerializer(encode_timestamp, return_type=Optional[str]),
]
