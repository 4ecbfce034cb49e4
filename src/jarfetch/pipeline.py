"""
Download & verify pipeline.

Stages run strictly in sequence, each feeding the next:

    catalog -> resolve -> descriptor -> locate -> (download) -> verify

Any failure raises a JarfetchError subclass and aborts the remaining stages.
Nothing is retried and no compensating action is taken; a partially written
download is left where it is.
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from jarfetch.config import FetchConfig
from jarfetch.errors import DownloadFailed, FileNotFound, IntegrityMismatch, Stage
from jarfetch.hashing import compute_file_sha1, digests_match
from jarfetch.locator import ArtifactRef, locate
from jarfetch.manifest.client import ManifestClient
from jarfetch.resolver import VersionToken, parse_version_token, resolve
from jarfetch.transport import AiohttpTransport, TransportError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from jarfetch.transport import HttpTransport

    StageCallback = Callable[[Stage, str], None]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of a successful download or verify run.

    Attributes:
        version_id: Concrete version id the token resolved to.
        path: Verified artifact file.
        artifact: Artifact location and expected digest from the descriptor.
        actual_sha1: Digest computed from the file.
        bytes_written: Bytes transferred (None for verify-only runs).
    """

    version_id: str
    path: Path
    artifact: ArtifactRef
    actual_sha1: str
    bytes_written: int | None = None


class ArtifactPipeline:
    """Resolves a version token, fetches its artifact and checks its SHA-1."""

    def __init__(
        self,
        client: ManifestClient,
        transport: HttpTransport,
        *,
        config: FetchConfig | None = None,
        on_stage: StageCallback | None = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            client: Manifest client for the catalog and descriptor fetches.
            transport: HTTP capability used for the artifact download.
            config: Fetch configuration (chunk size for hashing).
            on_stage: Optional callback invoked as each stage starts.
        """
        self._client = client
        self._transport = transport
        self._config = config or FetchConfig()
        self._on_stage = on_stage

    def _enter(self, stage: Stage, detail: str) -> None:
        logger.debug("Entering stage", extra={"stage": stage.value, "detail": detail})
        if self._on_stage is not None:
            self._on_stage(stage, detail)

    @staticmethod
    def _parse(token: VersionToken | str) -> VersionToken:
        return parse_version_token(token) if isinstance(token, str) else token

    async def resolve_alias(self, token: VersionToken | str) -> str:
        """
        Resolve a token to a concrete version id (catalog + resolve stages only).

        Raises:
            UnknownAlias, VersionNotFound, NetworkFailure, MalformedResponse.
        """
        token = self._parse(token)
        self._enter(Stage.CATALOG, self._client.catalog_url)
        catalog = await self._client.fetch_root_catalog()
        self._enter(Stage.RESOLVE, str(token))
        return resolve(token, catalog)

    async def locate_artifact(self, token: VersionToken | str) -> tuple[str, ArtifactRef]:
        """
        Run the four lookup stages shared by download and verify.

        Returns:
            Tuple of (resolved version id, artifact reference).
        """
        token = self._parse(token)
        self._enter(Stage.CATALOG, self._client.catalog_url)
        catalog = await self._client.fetch_root_catalog()

        self._enter(Stage.RESOLVE, str(token))
        version_id = resolve(token, catalog)

        descriptor_url = catalog.descriptor_url(version_id)
        assert descriptor_url is not None  # resolve() guarantees membership
        self._enter(Stage.DESCRIPTOR, version_id)
        descriptor = await self._client.fetch_version_descriptor(descriptor_url)

        self._enter(Stage.LOCATE, version_id)
        artifact = locate(descriptor)
        logger.info(
            "Located artifact",
            extra={"version": version_id, "url": artifact.url, "sha1": artifact.sha1},
        )
        return version_id, artifact

    def _check(self, path: Path, version_id: str, artifact: ArtifactRef) -> str:
        try:
            actual = compute_file_sha1(path, chunk_size=self._config.chunk_size)
        except FileNotFoundError as e:
            raise FileNotFound(path, "no such file") from e
        except IsADirectoryError as e:
            raise FileNotFound(path, "is a directory") from e
        except OSError as e:
            raise FileNotFound(path, e.strerror or str(e)) from e

        if not digests_match(artifact.sha1, actual):
            logger.error(
                "Checksum mismatch",
                extra={"version": version_id, "expected": artifact.sha1, "actual": actual},
            )
            raise IntegrityMismatch(path, expected=artifact.sha1, actual=actual)

        logger.info("Checksum verified", extra={"version": version_id, "sha1": actual})
        return actual

    async def download(
        self, token: VersionToken | str, destination: str | Path
    ) -> VerificationResult:
        """
        Download the artifact for token to destination and verify it.

        An existing file at destination is overwritten. On IntegrityMismatch
        the downloaded file is left in place.

        Raises:
            UnknownAlias, VersionNotFound, NetworkFailure, MalformedResponse,
            DownloadFailed, IntegrityMismatch.
        """
        destination = Path(destination)
        version_id, artifact = await self.locate_artifact(token)

        self._enter(Stage.DOWNLOAD, artifact.url)
        try:
            written = await self._transport.download_to(artifact.url, destination)
        except TransportError as e:
            raise DownloadFailed(str(e), url=artifact.url, status=e.status) from e
        except OSError as e:
            msg = f"Cannot write {destination}: {e.strerror or e}"
            raise DownloadFailed(msg, url=artifact.url) from e

        if artifact.size_bytes is not None and written != artifact.size_bytes:
            logger.warning(
                "Downloaded size differs from descriptor",
                extra={"expected_bytes": artifact.size_bytes, "bytes_written": written},
            )

        self._enter(Stage.VERIFY, str(destination))
        actual = self._check(destination, version_id, artifact)
        return VerificationResult(
            version_id=version_id,
            path=destination,
            artifact=artifact,
            actual_sha1=actual,
            bytes_written=written,
        )

    async def verify(self, token: VersionToken | str, path: str | Path) -> VerificationResult:
        """
        Verify an existing file against the checksum published for token.

        Reads path only; nothing is downloaded or written.

        Raises:
            UnknownAlias, VersionNotFound, NetworkFailure, MalformedResponse,
            FileNotFound, IntegrityMismatch.
        """
        path = Path(path)
        version_id, artifact = await self.locate_artifact(token)

        self._enter(Stage.VERIFY, str(path))
        actual = self._check(path, version_id, artifact)
        return VerificationResult(
            version_id=version_id,
            path=path,
            artifact=artifact,
            actual_sha1=actual,
        )


@contextlib.asynccontextmanager
async def open_pipeline(
    config: FetchConfig | None = None,
    *,
    on_stage: StageCallback | None = None,
) -> AsyncIterator[ArtifactPipeline]:
    """Create a pipeline backed by aiohttp, closing the session on exit."""
    config = config or FetchConfig()
    async with AiohttpTransport(config) as transport:
        client = ManifestClient(transport, config.catalog_url)
        yield ArtifactPipeline(client, transport, config=config, on_stage=on_stage)
