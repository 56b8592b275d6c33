# forcebulk/core/interfaces/http_client.py
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

from multidict import CIMultiDict


@dataclass(frozen=True)
class HttpResponse:
    """Raw response as returned by `SalesforceSessionPort.send`.

    Headers are case-insensitive. The body is fully read.
    """
    status: int
    reason: str = ""
    headers: CIMultiDict = field(default_factory=CIMultiDict)
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class SalesforceSessionPort(ABC):
    """Authenticated access to the platform REST API.

    Shared between jobs; implementations must tolerate concurrent use from
    several coroutines.
    """

    @abstractmethod
    async def __aenter__(self) -> "SalesforceSessionPort":
        """Async context manager entry method"""
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit method"""
        pass

    @property
    @abstractmethod
    def access_token(self) -> str:
        """Bearer credential for the current session."""
        pass

    @abstractmethod
    def make_url(self, path: str) -> str:
        """Resolve a path relative to the versioned data API base URL."""
        pass

    @abstractmethod
    async def request(self, method: str, url: str) -> bytes:
        """Perform an authenticated request and return the response body.

        Raises SalesforceAPIError for status codes outside 2xx/3xx.
        """
        pass

    @abstractmethod
    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> HttpResponse:
        """Perform a request exactly as given and return the raw response.

        No status check and no headers added; callers inspect `status` themselves.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the HTTP client session"""
        pass
