"""
Manifest client: the two JSON fetches of the pipeline.

Each call performs exactly one GET through the injected transport. Transport
failures become NetworkFailure; bodies that are not JSON of the expected
shape become MalformedResponse. Nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from jarfetch.errors import MalformedResponse, NetworkFailure, Stage
from jarfetch.manifest.models import RootCatalog, VersionDescriptor
from jarfetch.transport import TransportError

if TYPE_CHECKING:
    from jarfetch.transport import HttpTransport

logger = logging.getLogger(__name__)


class ManifestClient:
    """Fetches the root catalog and per-version descriptors."""

    def __init__(self, transport: HttpTransport, catalog_url: str) -> None:
        """
        Initialize the manifest client.

        Args:
            transport: HTTP capability used for every fetch.
            catalog_url: Well-known root catalog endpoint.
        """
        self._transport = transport
        self._catalog_url = catalog_url

    @property
    def catalog_url(self) -> str:
        return self._catalog_url

    async def _fetch(self, url: str, stage: Stage) -> bytes:
        try:
            return await self._transport.get_bytes(url)
        except TransportError as e:
            raise NetworkFailure(str(e), url=url, stage=stage, status=e.status) from e

    async def fetch_root_catalog(self) -> RootCatalog:
        """
        Fetch and parse the root version catalog.

        Returns:
            RootCatalog built from the response.

        Raises:
            NetworkFailure: If the GET fails.
            MalformedResponse: If the body is not a valid catalog.
        """
        logger.info("Fetching version catalog", extra={"url": self._catalog_url})
        body = await self._fetch(self._catalog_url, Stage.CATALOG)
        try:
            catalog = RootCatalog.from_json(body)
        except (orjson.JSONDecodeError, ValidationError) as e:
            msg = f"Version catalog from {self._catalog_url} is malformed: {e}"
            raise MalformedResponse(msg, stage=Stage.CATALOG) from e

        logger.info(
            "Fetched version catalog",
            extra={
                "count": len(catalog.version_ids),
                "latest_release": catalog.latest_stable,
                "latest_snapshot": catalog.latest_snapshot,
            },
        )
        return catalog

    async def fetch_version_descriptor(self, url: str) -> VersionDescriptor:
        """
        Fetch and parse a per-version descriptor.

        Args:
            url: Descriptor URL taken from a catalog entry.

        Returns:
            VersionDescriptor built from the response.

        Raises:
            NetworkFailure: If the GET fails.
            MalformedResponse: If the body is not a JSON object.
        """
        logger.info("Fetching version descriptor", extra={"url": url})
        body = await self._fetch(url, Stage.DESCRIPTOR)
        try:
            return VersionDescriptor.from_json(body)
        except (orjson.JSONDecodeError, ValidationError) as e:
            msg = f"Version descriptor from {url} is malformed: {e}"
            raise MalformedResponse(msg, stage=Stage.DESCRIPTOR) from e
