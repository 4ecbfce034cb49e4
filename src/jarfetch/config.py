"""
Runtime configuration for jarfetch.

Values come from keyword arguments, falling back to JARFETCH_* environment
variables via FetchConfig.from_env(). Validation happens at construction time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_CATALOG_URL = "https://launchermeta.mojang.com/mc/game/version_manifest.json"
DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_USER_AGENT = "jarfetch/0.1"

MIN_CHUNK_SIZE = 1024
MAX_CHUNK_SIZE = 16 * 1024 * 1024

ENV_CATALOG_URL = "JARFETCH_CATALOG_URL"
ENV_CHUNK_SIZE = "JARFETCH_CHUNK_SIZE"
ENV_USER_AGENT = "JARFETCH_USER_AGENT"


def is_http_url(value: str) -> bool:
    """Check that value is an absolute http(s) URL with a host."""
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


@dataclass(frozen=True)
class FetchConfig:
    """
    Configuration for catalog lookups and artifact transfer.

    Attributes:
        catalog_url: Well-known root catalog endpoint.
        chunk_size: Bytes per streamed read when downloading and hashing.
        user_agent: User-Agent header sent with every request.
    """

    catalog_url: str = DEFAULT_CATALOG_URL
    chunk_size: int = DEFAULT_CHUNK_SIZE
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not is_http_url(self.catalog_url):
            msg = f"catalog_url must be an http(s) URL, got {self.catalog_url!r}"
            raise ValueError(msg)
        if not MIN_CHUNK_SIZE <= self.chunk_size <= MAX_CHUNK_SIZE:
            msg = (
                f"chunk_size must be {MIN_CHUNK_SIZE}..{MAX_CHUNK_SIZE}, "
                f"got {self.chunk_size}"
            )
            raise ValueError(msg)
        if not self.user_agent.strip():
            raise ValueError("user_agent must not be empty")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        catalog_url: str | None = None,
    ) -> FetchConfig:
        """
        Build config from environment variables.

        Args:
            environ: Environment mapping (default: os.environ).
            catalog_url: Explicit catalog URL, takes precedence over env.

        Returns:
            Validated FetchConfig.

        Raises:
            ValueError: If any value is invalid.
        """
        env = os.environ if environ is None else environ

        raw_chunk = env.get(ENV_CHUNK_SIZE, "").strip()
        if raw_chunk:
            try:
                chunk_size = int(raw_chunk)
            except ValueError:
                msg = f"{ENV_CHUNK_SIZE} must be an integer, got {raw_chunk!r}"
                raise ValueError(msg) from None
        else:
            chunk_size = DEFAULT_CHUNK_SIZE

        return cls(
            catalog_url=catalog_url or env.get(ENV_CATALOG_URL, "").strip() or DEFAULT_CATALOG_URL,
            chunk_size=chunk_size,
            user_agent=env.get(ENV_USER_AGENT, "").strip() or DEFAULT_USER_AGENT,
        )
