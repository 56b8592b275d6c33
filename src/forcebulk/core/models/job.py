from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from forcebulk.core.models.job_state import JobState
from forcebulk.core.models.timestamp import ZERO_TIME, SalesforceDateTime


class ColumnDelimiter(StrEnum):
    COMMA = "COMMA"
    TAB = "TAB"
    PIPE = "PIPE"
    SEMICOLON = "SEMICOLON"
    CARET = "CARET"
    BACKQUOTE = "BACKQUOTE"

    @property
    def char(self) -> str:
        return _DELIMITER_CHARS[self]


_DELIMITER_CHARS = {
    ColumnDelimiter.COMMA: ",",
    ColumnDelimiter.TAB: "\t",
    ColumnDelimiter.PIPE: "|",
    ColumnDelimiter.SEMICOLON: ";",
    ColumnDelimiter.CARET: "^",
    ColumnDelimiter.BACKQUOTE: "`",
}


class LineEnding(StrEnum):
    LF = "LF"
    CRLF = "CRLF"


class BulkJobStatus(BaseModel):
    """Snapshot of a job's progress as reported by one status poll."""

    state: JobState
    number_records_processed: int = Field(0, alias="numberRecordsProcessed")
    retries: int = 0
    total_processing_time: int = Field(
        0,
        alias="totalProcessingTime",
        description="Cumulative processing time in milliseconds",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def is_finished(self) -> bool:
        return self.state.is_finished


class BulkJob(BaseModel):
    """Description of a remote bulk query job.

    Notes:
    - Only `id` is required; the rest mirrors what the job-info endpoint returns.
    - `state` is kept as the raw string from job creation. Live state comes from
      `BulkJobStatus` snapshots, never from this model.
    - Absent or null timestamps decode to `ZERO_TIME`.
    """

    id: str
    operation: Optional[str] = None
    object: Optional[str] = None
    created_by_id: Optional[str] = Field(None, alias="createdById")
    created_date: SalesforceDateTime = Field(ZERO_TIME, alias="createdDate")
    system_modstamp: SalesforceDateTime = Field(ZERO_TIME, alias="systemModstamp")
    state: Optional[str] = None
    concurrency_mode: Optional[str] = Field(None, alias="concurrencyMode")
    content_type: Optional[str] = Field(None, alias="contentType")
    api_version: Optional[float] = Field(None, alias="apiVersion")
    line_ending: LineEnding = Field(LineEnding.LF, alias="lineEnding")
    column_delimiter: ColumnDelimiter = Field(ColumnDelimiter.COMMA, alias="columnDelimiter")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
