"""
Artifact locator.

Extracts the server artifact's download URL and expected SHA-1 from a version
descriptor (`downloads.server.{url,sha1}`). No other artifact kinds (client,
mappings) are considered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jarfetch.config import is_http_url
from jarfetch.errors import MalformedResponse, Stage
from jarfetch.hashing import normalize_digest

if TYPE_CHECKING:
    from jarfetch.manifest.models import VersionDescriptor

ARTIFACT_KEY = "server"


@dataclass(frozen=True)
class ArtifactRef:
    """
    Location and checksum of a downloadable artifact.

    Attributes:
        url: HTTP(S) download URL.
        sha1: Expected lowercase SHA-1 hex digest.
        size_bytes: Advertised size, if the descriptor has one.
    """

    url: str
    sha1: str
    size_bytes: int | None = None


def _malformed(detail: str) -> MalformedResponse:
    return MalformedResponse(
        f"Version descriptor has no usable downloads.{ARTIFACT_KEY} entry: {detail}",
        stage=Stage.LOCATE,
    )


def locate_in_document(downloads: Any) -> ArtifactRef:
    """
    Extract the server artifact from a raw `downloads` object.

    Raises:
        MalformedResponse: If any required field is missing or mistyped.
    """
    if not isinstance(downloads, dict):
        raise _malformed("downloads is not an object")

    entry = downloads.get(ARTIFACT_KEY)
    if not isinstance(entry, dict):
        raise _malformed(f"{ARTIFACT_KEY} is missing or not an object")

    url = entry.get("url")
    if not isinstance(url, str) or not is_http_url(url):
        raise _malformed(f"url is missing or not an http(s) URL: {url!r}")

    sha1 = entry.get("sha1")
    if not isinstance(sha1, str):
        raise _malformed("sha1 is missing or not a string")
    try:
        digest = normalize_digest(sha1)
    except ValueError as e:
        raise _malformed(str(e)) from e

    size = entry.get("size")
    size_bytes = size if isinstance(size, int) and not isinstance(size, bool) else None

    return ArtifactRef(url=url, sha1=digest, size_bytes=size_bytes)


def locate(descriptor: VersionDescriptor) -> ArtifactRef:
    """Extract the server artifact reference from a version descriptor."""
    return locate_in_document(descriptor.downloads)
