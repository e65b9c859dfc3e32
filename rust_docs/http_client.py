#!/usr/bin/env python3
"""
HTTP adapters for the two upstream origins.

Each HttpClient is bound to one origin (docs.rs or the crates.io API), sends
that origin's fixed headers, aborts after REQUEST_TIMEOUT seconds and tells
the caller whether the body came back as JSON or as text/HTML. There are no
retries: every call is exactly one attempt.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode, urljoin

import aiohttp

from .config import (
    CRATES_IO_BASE_URL,
    CRATES_IO_HEADERS,
    DOCS_RS_BASE_URL,
    DOCS_RS_HEADERS,
    REQUEST_TIMEOUT,
)
from .errors import RequestTimeoutError, ResponseShapeError, TransportError, UpstreamHTTPError
from .logger import get_logger

logger = get_logger("http")

QueryParams = Mapping[str, Union[str, int, bool, None]]


@dataclass
class HttpResponse:
    """A successful upstream response."""

    data: Any
    status: int
    headers: Dict[str, str]
    content_type: str  # "json" or "text"

    @property
    def is_json(self) -> bool:
        return self.content_type == "json"


class HttpClient:
    """Request adapter bound to a single origin."""

    def __init__(self, base_url: str, headers: Mapping[str, str], timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url
        self.headers = dict(headers)
        self.timeout = timeout

    def build_url(self, path: str, params: Optional[QueryParams] = None) -> str:
        """Join a relative path onto the origin and append the non-None params."""
        url = urljoin(self.base_url.rstrip("/") + "/", path.lstrip("/"))
        if params:
            query = {
                key: str(value).lower() if isinstance(value, bool) else value
                for key, value in params.items()
                if value is not None
            }
            if query:
                url = f"{url}?{urlencode(query)}"
        return url

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[QueryParams] = None,
        body: Any = None,
    ) -> HttpResponse:
        url = self.build_url(path, params)
        logger.debug(
            "Making request",
            extra={'extra_data': {'method': method, 'url': url, 'params': dict(params or {})}}
        )

        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self.headers,
            ) as session:
                async with session.request(method, url, json=body) as response:
                    raw_content_type = response.headers.get("Content-Type", "")
                    logger.debug(
                        "Received response",
                        extra={'extra_data': {'url': url, 'status': response.status, 'content_type': raw_content_type}}
                    )

                    if not 200 <= response.status < 300:
                        raise UpstreamHTTPError(response.status, url)

                    if "application/json" in raw_content_type.lower():
                        try:
                            data = await response.json(content_type=None)
                        except ValueError as e:
                            raise ResponseShapeError("JSON", "a malformed JSON body") from e
                        kind = "json"
                    else:
                        try:
                            data = await response.text()
                        except UnicodeDecodeError as e:
                            raise ResponseShapeError("text", f"a body that does not decode as {e.encoding}") from e
                        kind = "text"

                    return HttpResponse(
                        data=data,
                        status=response.status,
                        headers=dict(response.headers),
                        content_type=kind,
                    )

        except UpstreamHTTPError as e:
            logger.error("HTTP error from upstream", extra={'extra_data': {'url': url, 'status': e.status}})
            raise
        except ResponseShapeError:
            logger.error("Malformed response body", extra={'extra_data': {'url': url}})
            raise
        except asyncio.TimeoutError as e:
            logger.error("Request timed out", extra={'extra_data': {'url': url, 'timeout': self.timeout}})
            raise RequestTimeoutError(url, self.timeout) from e
        except aiohttp.ClientError as e:
            logger.error("No response received", extra={'extra_data': {'url': url, 'error': str(e)}})
            raise TransportError(url, str(e)) from e

    async def get(self, path: str, params: Optional[QueryParams] = None) -> HttpResponse:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, params: Optional[QueryParams] = None, body: Any = None) -> HttpResponse:
        return await self.request("POST", path, params=params, body=body)

    async def put(self, path: str, params: Optional[QueryParams] = None, body: Any = None) -> HttpResponse:
        return await self.request("PUT", path, params=params, body=body)

    async def delete(self, path: str, params: Optional[QueryParams] = None) -> HttpResponse:
        return await self.request("DELETE", path, params=params)


def create_docs_rs_client(timeout: float = REQUEST_TIMEOUT) -> HttpClient:
    """Adapter for the docs.rs HTML pages."""
    return HttpClient(DOCS_RS_BASE_URL, DOCS_RS_HEADERS, timeout)


def create_crates_io_client(timeout: float = REQUEST_TIMEOUT) -> HttpClient:
    """Adapter for the crates.io JSON API."""
    return HttpClient(CRATES_IO_BASE_URL, CRATES_IO_HEADERS, timeout)
