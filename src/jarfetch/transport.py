"""
HTTP transport used by the manifest client and the artifact download.

The pipeline only depends on the HttpTransport protocol so tests can swap in
in-memory fixtures. AiohttpTransport is the production implementation:
one GET per call, no retries, aiohttp's default timeout.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import aiohttp

from jarfetch.config import FetchConfig

if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when a GET fails or ends with a non-2xx status."""

    def __init__(self, message: str, *, url: str, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class HttpTransport(Protocol):
    """Minimal HTTP capability the pipeline needs."""

    async def get_bytes(self, url: str) -> bytes:
        """GET url and return the full response body."""
        ...

    async def download_to(self, url: str, destination: Path) -> int:
        """GET url and stream the body into destination, returning bytes written."""
        ...


class AiohttpTransport:
    """
    aiohttp-backed HttpTransport.

    Use as an async context manager so the session is closed on exit:

        async with AiohttpTransport(config) as transport:
            body = await transport.get_bytes(url)
    """

    def __init__(self, config: FetchConfig | None = None) -> None:
        self._config = config or FetchConfig()
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> AiohttpTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self._config.user_agent},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def get_bytes(self, url: str) -> bytes:
        session = await self._get_session()
        logger.debug("GET", extra={"url": url})
        try:
            async with session.get(url) as response:
                if not 200 <= response.status < 300:
                    # Error pages need not be UTF-8
                    raw = await response.read()
                    logger.error(
                        "HTTP error",
                        extra={
                            "url": url,
                            "status": response.status,
                            "body": raw[:500].decode("utf-8", "replace"),
                        },
                    )
                    raise TransportError(
                        f"HTTP {response.status} from {url}",
                        url=url,
                        status=response.status,
                    )
                body: bytes = await response.read()
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning("Request failed", extra={"url": url, "error": str(e)})
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e
        return body

    async def download_to(self, url: str, destination: Path) -> int:
        session = await self._get_session()
        written = 0
        logger.debug("GET (streamed)", extra={"url": url, "destination": str(destination)})
        try:
            async with session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise TransportError(
                        f"HTTP {response.status} from {url}",
                        url=url,
                        status=response.status,
                    )
                with destination.open("wb") as f:
                    async for chunk in response.content.iter_chunked(self._config.chunk_size):
                        f.write(chunk)
                        written += len(chunk)
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning(
                "Download interrupted",
                extra={"url": url, "error": str(e), "bytes_written": written},
            )
            raise TransportError(f"Download from {url} failed: {e}", url=url) from e
        return written
