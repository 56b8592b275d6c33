import json
from collections import deque

import pytest
from multidict import CIMultiDict

from forcebulk.core.config import BulkJobConfig
from forcebulk.core.interfaces.http_client import HttpResponse, SalesforceSessionPort


class FakeSalesforceSession(SalesforceSessionPort):
    """In-memory session port: queued bodies for `request`, queued responses for `send`."""

    def __init__(self):
        self.request_bodies = deque()
        self.send_responses = deque()
        self.request_calls = []
        self.send_calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    @property
    def access_token(self) -> str:
        return "00Dtoken"

    def make_url(self, path: str) -> str:
        return "https://example.my.salesforce.com/services/data/v59.0/" + path

    def queue_status(self, state: str, processed: int = 0) -> None:
        self.request_bodies.append(
            json.dumps(
                {
                    "state": state,
                    "numberRecordsProcessed": processed,
                    "retries": 0,
                    "totalProcessingTime": 100,
                }
            ).encode()
        )

    def queue_response(self, status=200, body=b"", headers=None, reason="OK") -> None:
        self.send_responses.append(
            HttpResponse(status=status, reason=reason, headers=CIMultiDict(headers or {}), body=body)
        )

    async def request(self, method: str, url: str) -> bytes:
        self.request_calls.append((method, url))
        item = self.request_bodies.popleft()
        if isinstance(item, Exception):
            raise item
        return item

    async def send(self, method, url, headers=None, params=None) -> HttpResponse:
        self.send_calls.append({"method": method, "url": url, "headers": headers, "params": params})
        return self.send_responses.popleft()

    async def close(self) -> None:
        pass


@pytest.fixture
def fake_session():
    return FakeSalesforceSession()


@pytest.fixture
def fast_config():
    return BulkJobConfig(poll_interval=0.01)
