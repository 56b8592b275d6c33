"""BulkQueryJob: tracks one remote bulk query job through its lifecycle.

Responsibilities:
1. Read the job status (one request, one immutable snapshot).
2. Wait for a terminal state with a fixed-interval poll loop that honors a
   cooperative cancel event.
3. Fetch result pages as CSV, following the platform's locator.
4. Delete the job on the server.

Job creation is not handled here; a BulkQueryJob is bound to a job that
already exists.
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Dict, Optional, Union

from pydantic import ValidationError

from forcebulk.core.config import BulkJobConfig
from forcebulk.core.exceptions import BulkHTTPError, JobWaitCancelled, StatusDecodeError
from forcebulk.core.interfaces.http_client import SalesforceSessionPort
from forcebulk.core.logging_config import job_id_var
from forcebulk.core.models.api_error import parse_salesforce_error
from forcebulk.core.models.job import BulkJob, BulkJobStatus
from forcebulk.core.models.result_set import ResultSetPage
from forcebulk.core.settings import logger


class BulkQueryJob:
    """Façade over the status, results and delete endpoints of one job.

    Holds no mutable state besides the shared session reference, so several
    instances can share one session and result pages can be fetched
    concurrently.

    Attributes:
        job: Description of the remote job
        config: Immutable poll/delete configuration
    """

    def __init__(
        self,
        job: Union[BulkJob, str],
        session: SalesforceSessionPort,
        config: Optional[BulkJobConfig] = None,
    ) -> None:
        self.job = job if isinstance(job, BulkJob) else BulkJob(id=job)
        self._session = session
        self.config = config or BulkJobConfig()

    @classmethod
    def from_payload(
        cls,
        session: SalesforceSessionPort,
        payload: Union[Dict[str, Any], str, bytes],
        config: Optional[BulkJobConfig] = None,
    ) -> "BulkQueryJob":
        """Bind to the job described by a job-info response (dict or raw JSON)."""
        if isinstance(payload, dict):
            job = BulkJob.model_validate(payload)
        else:
            job = BulkJob.model_validate_json(payload)
        return cls(job, session, config)

    @property
    def id(self) -> str:
        return self.job.id

    @property
    def status_url(self) -> str:
        return self._session.make_url(f"jobs/query/{self.id}")

    @property
    def results_url(self) -> str:
        return self._session.make_url(f"jobs/query/{self.id}/results")

    def __repr__(self) -> str:
        return f"BulkQueryJob(id={self.id!r}, object={self.job.object!r})"

    # ---------------- Status -----------------
    async def get_status(self) -> BulkJobStatus:
        """Fetch a fresh status snapshot.

        Raises:
            StatusDecodeError: the body is not a valid status document. Carries
                the platform error parsed from the body and the decode error.
        """
        raw = await self._session.request("GET", self.status_url)
        try:
            status = BulkJobStatus.model_validate_json(raw)
        except ValidationError as exc:
            api_error = parse_salesforce_error(0, raw)
            raise StatusDecodeError(api_error, exc) from exc
        logger.debug(
            f"[bulk:status] job_id={self.id} state={status.state} processed={status.number_records_processed} retries={status.retries}"
        )
        return status

    async def wait(self, cancel_event: Optional[asyncio.Event] = None) -> BulkJobStatus:
        """Poll until the job reaches a terminal state.

        The event is checked before every poll, and setting it also cuts the
        pause between polls short. A status request already in flight is
        allowed to complete.

        Returns:
            The final status when the job completed successfully.

        Raises:
            JobWaitCancelled: `cancel_event` was set before the job finished.
            JobAbortedError, JobFailedError: the job ended unsuccessfully.
        """
        token = job_id_var.set(self.id)
        try:
            polls = 0
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    logger.info(f"[bulk:wait] cancelled job_id={self.id} polls={polls}")
                    raise JobWaitCancelled(self.id)

                status = await self.get_status()
                polls += 1

                if status.state.is_finished:
                    logger.info(
                        f"[bulk:wait] terminal state job_id={self.id} state={status.state} polls={polls}"
                    )
                    error = status.state.to_error(self.id)
                    if error is not None:
                        raise error
                    return status

                await self._pause(cancel_event)
        finally:
            job_id_var.reset(token)

    async def _pause(self, cancel_event: Optional[asyncio.Event]) -> None:
        """Sleep one poll interval, returning early if `cancel_event` is set."""
        if cancel_event is None:
            await asyncio.sleep(self.config.poll_interval)
            return
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=self.config.poll_interval)
        except asyncio.TimeoutError:
            pass

    # ---------------- Results -----------------
    async def get_result_set(
        self, locator: str = "", max_records: Optional[int] = None
    ) -> ResultSetPage:
        """Fetch one page of CSV results.

        Args:
            locator: Continuation token from the previous page; empty for the first page.
            max_records: Optional page size hint forwarded as ``maxRecords``.

        Raises:
            BulkHTTPError: the endpoint answered with status >= 400.
        """
        params: Dict[str, str] = {}
        if locator:
            params["locator"] = locator
        if max_records is not None:
            params["maxRecords"] = str(max_records)

        response = await self._session.send(
            "GET",
            self.results_url,
            headers={
                "Content-Type": "application/json",
                "Accept": "text/csv",
                "Authorization": f"Bearer {self._session.access_token}",
            },
            params=params or None,
        )
        if response.status >= 400:
            raise BulkHTTPError(
                "get result set from bulk job", response.status, response.reason, response.text
            )

        page = ResultSetPage.from_response(response.body, response.headers)
        logger.debug(
            f"[bulk:results] job_id={self.id} rows={page.rows} bytes={len(page.body)} has_more={page.has_more}"
        )
        return page

    async def iter_result_sets(
        self, max_records: Optional[int] = None
    ) -> AsyncIterator[ResultSetPage]:
        """Yield every result page, following the locator until it runs out."""
        locator = ""
        while True:
            page = await self.get_result_set(locator, max_records=max_records)
            yield page
            if not page.has_more:
                return
            locator = page.next_locator

    # ---------------- Delete -----------------
    async def delete(self) -> None:
        """Delete the job on the server.

        Repeated calls are passed through to the server unchanged.

        Raises:
            BulkHTTPError: the endpoint answered with status >= 400.
        """
        response = await self._session.send(
            self.config.delete_method,
            self.status_url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._session.access_token}",
            },
        )
        if response.status >= 400:
            raise BulkHTTPError(
                "delete bulk job", response.status, response.reason, response.text
            )
        logger.info(f"[bulk:delete] job_id={self.id} method={self.config.delete_method} status={response.status}")
