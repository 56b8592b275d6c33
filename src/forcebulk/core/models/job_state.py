from enum import StrEnum
from typing import Optional

from forcebulk.core.exceptions import JobAbortedError, JobFailedError, JobOutcomeError


class JobState(StrEnum):
    """Lifecycle states of a bulk query job, with their exact wire values."""

    upload_complete = "UploadComplete"
    in_progress = "InProgress"
    aborted = "Aborted"
    job_complete = "JobComplete"
    failed = "Failed"

    @property
    def is_finished(self) -> bool:
        match self:
            case JobState.aborted | JobState.job_complete | JobState.failed:
                return True
            case JobState.upload_complete | JobState.in_progress:
                return False

    def to_error(self, job_id: Optional[str] = None) -> Optional[JobOutcomeError]:
        """Map a terminal failure state to its exception; None for every other state."""
        match self:
            case JobState.aborted:
                return JobAbortedError(job_id, str(self))
            case JobState.failed:
                return JobFailedError(job_id, str(self))
            case JobState.upload_complete | JobState.in_progress | JobState.job_complete:
                return None


TERMINAL_STATES = frozenset(state for state in JobState if state.is_finished)
