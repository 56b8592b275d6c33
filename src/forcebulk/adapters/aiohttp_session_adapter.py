# forcebulk/adapters/aiohttp_session_adapter.py
import asyncio
from typing import Dict, Optional

import aiohttp
from multidict import CIMultiDict

from forcebulk.core.interfaces.http_client import HttpResponse, SalesforceSessionPort
from forcebulk.core.models.api_error import parse_salesforce_error
from forcebulk.core.settings import logger

READ_CHUNK_SIZE = 64 * 1024


class AioHttpSalesforceSession(SalesforceSessionPort):
    """aiohttp-backed session bound to one org instance and access token.

    Owns a single `aiohttp.ClientSession`; use it as an async context manager and
    share it between jobs.
    """

    def __init__(
        self,
        instance_url: str,
        access_token: str,
        api_version: str = "59.0",
        total_timeout: float = 120.0,
        connect_timeout: float = 10.0,
    ):
        self.instance_url = str(instance_url).rstrip("/")
        self.api_version = api_version.lstrip("vV")
        self._access_token = access_token
        self._session: Optional[aiohttp.ClientSession] = None
        # Result pages can be large; total is generous, connect is not.
        self._default_client_timeout = aiohttp.ClientTimeout(
            total=total_timeout,
            sock_connect=connect_timeout,
        )

    @classmethod
    def from_settings(cls, settings) -> "AioHttpSalesforceSession":
        if settings.FORCEBULK_INSTANCE_URL is None:
            raise ValueError("FORCEBULK_INSTANCE_URL is not configured")
        return cls(
            instance_url=str(settings.FORCEBULK_INSTANCE_URL),
            access_token=settings.FORCEBULK_ACCESS_TOKEN.get_secret_value(),
            api_version=settings.FORCEBULK_API_VERSION,
            total_timeout=settings.FORCEBULK_HTTP_TIMEOUT,
            connect_timeout=settings.FORCEBULK_HTTP_CONNECT_TIMEOUT,
        )

    async def __aenter__(self):
        """Async context manager entry"""
        self._session = aiohttp.ClientSession(timeout=self._default_client_timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
        return False

    @property
    def access_token(self) -> str:
        return self._access_token

    @property
    def base_url(self) -> str:
        return f"{self.instance_url}/services/data/v{self.api_version}/"

    def make_url(self, path: str) -> str:
        return self.base_url + path.lstrip("/")

    async def request(self, method: str, url: str) -> bytes:
        response = await self.send(
            method,
            url,
            headers={
                "Authorization": f"Bearer {self._access_token}",
                "Accept": "application/json",
            },
        )
        if response.status < 200 or response.status >= 400:
            logger.debug(
                f"[http:request] {method} url={url} status={response.status} body={response.text[:200]}"
            )
            raise parse_salesforce_error(response.status, response.body)
        return response.body

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> HttpResponse:
        if self._session is None:
            raise RuntimeError("HTTP client not initialized. Use 'async with' context manager.")

        try:
            async with self._session.request(method, url, headers=headers, params=params) as response:
                buffer = bytearray()
                async for chunk in response.content.iter_chunked(READ_CHUNK_SIZE):
                    buffer.extend(chunk)
                logger.debug(
                    f"[http:send] {method} url={url} status={response.status} bytes={len(buffer)} content_length={response.content_length}"
                )
                return HttpResponse(
                    status=response.status,
                    reason=response.reason or "",
                    headers=CIMultiDict(response.headers),
                    body=bytes(buffer),
                )

        except asyncio.TimeoutError:
            logger.error("Timeout when requesting Salesforce. URL: %s", url)
            raise

        except aiohttp.ClientError as client_error:
            logger.error(
                "Connection error when requesting Salesforce. URL: %s, Error: %s",
                url,
                str(client_error),
            )
            raise

    async def close(self) -> None:
        """Close the session"""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
