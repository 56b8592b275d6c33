import csv
import io
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

RECORD_COUNT_HEADER = "Sforce-NumberOfRecords"
LOCATOR_HEADER = "Sforce-Locator"


def parse_record_count(value: Optional[str]) -> int:
    # rows are reported best-effort; anything unparsable counts as 0
    try:
        return int(value) if value is not None else 0
    except ValueError:
        return 0


def parse_locator(value: Optional[str]) -> str:
    if value is None:
        return ""
    value = value.strip()
    # the platform sends the literal string "null" on the last page
    return "" if value == "null" else value


class ResultSetPage(BaseModel):
    """One page of CSV output from a bulk query job.

    An empty `next_locator` marks the last page. Pages are independent; chaining
    them is done by passing `next_locator` to the next fetch.
    """

    body: bytes = b""
    next_locator: str = ""
    rows: int = 0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_response(cls, body: bytes, headers: Mapping[str, str]) -> "ResultSetPage":
        return cls(
            body=body,
            next_locator=parse_locator(headers.get(LOCATOR_HEADER)),
            rows=parse_record_count(headers.get(RECORD_COUNT_HEADER)),
        )

    @property
    def has_more(self) -> bool:
        return bool(self.next_locator)

    def stream(self) -> io.BytesIO:
        return io.BytesIO(self.body)

    def read_records(self, delimiter: str = ",", encoding: str = "utf-8") -> List[Dict[str, str]]:
        """Decode the CSV body into one dict per record, keyed by header row."""
        text = io.StringIO(self.body.decode(encoding), newline="")
        return list(csv.DictReader(text, delimiter=delimiter))
