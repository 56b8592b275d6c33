import pytest

from forcebulk.core.exceptions import JobAbortedError, JobFailedError, JobOutcomeError
from forcebulk.core.models.job_state import TERMINAL_STATES, JobState


@pytest.mark.parametrize("state", [JobState.upload_complete, JobState.in_progress])
def test_non_terminal_states_are_not_finished(state):
    assert state.is_finished is False
    assert state.to_error() is None


@pytest.mark.parametrize("state", [JobState.aborted, JobState.job_complete, JobState.failed])
def test_terminal_states_are_finished(state):
    assert state.is_finished is True


def test_terminal_state_set():
    assert TERMINAL_STATES == {JobState.aborted, JobState.job_complete, JobState.failed}


def test_job_complete_maps_to_no_error():
    assert JobState.job_complete.to_error("750xx") is None


def test_aborted_and_failed_map_to_distinct_errors():
    aborted = JobState.aborted.to_error()
    failed = JobState.failed.to_error()

    assert isinstance(aborted, JobAbortedError)
    assert isinstance(failed, JobFailedError)
    assert isinstance(aborted, JobOutcomeError) and isinstance(failed, JobOutcomeError)
    assert not isinstance(aborted, JobFailedError)
    assert str(aborted) == "job aborted"
    assert str(failed) == "job failed"


def test_outcome_error_carries_job_id_and_state():
    err = JobState.failed.to_error("750R0000000zlh9IAA")
    assert err.job_id == "750R0000000zlh9IAA"
    assert err.state == "Failed"
    assert "750R0000000zlh9IAA" in str(err)


def test_every_state_is_covered():
    # is_finished must return a bool for each member, never fall through to None
    for state in JobState:
        assert isinstance(state.is_finished, bool)


@pytest.mark.parametrize(
    "wire", ["UploadComplete", "InProgress", "Aborted", "JobComplete", "Failed"]
)
def test_wire_values_round_trip(wire):
    assert str(JobState(wire)) == wire
