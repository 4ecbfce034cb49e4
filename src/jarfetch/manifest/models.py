"""
Typed views over the two remote manifest documents.

Root catalog (version_manifest.json):
    {
        "latest": {"release": "1.20.4", "snapshot": "24w03a"},
        "versions": [
            {"id": "24w03a", "type": "snapshot", "url": "https://.../24w03a.json", ...},
            {"id": "1.20.4", "type": "release", "url": "https://.../1.20.4.json", ...},
            ...
        ]
    }

Version descriptor (<id>.json):
    {
        "id": "1.20.4",
        "downloads": {
            "server": {"sha1": "8dd1a28015f51b1803213892b50b7b4fc76e594d", "size": 49150256,
                       "url": "https://piston-data.mojang.com/v1/objects/.../server.jar"},
            ...
        },
        ...
    }

Unknown fields are ignored; only the fields below are part of the contract.
"""

from __future__ import annotations

from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class VersionEntry(BaseModel):
    """
    One entry of the catalog's version list.

    Attributes:
        id: Version id (e.g., "1.20.4", "24w03a").
        url: URL of the version's descriptor document.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., description="Version id")
    url: str = Field(..., description="Descriptor document URL")


class LatestPointers(BaseModel):
    """Catalog pointers to the newest stable and snapshot ids."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    release: str = Field(..., description="Latest stable version id")
    snapshot: str = Field(..., description="Latest snapshot version id")


class RootCatalog(BaseModel):
    """
    Root version catalog.

    The pointers in `latest` are expected to name ids present in `versions`,
    but this is not enforced here: resolving a dangling pointer is reported by
    the resolver as a missing version.

    Attributes:
        latest: Pointers to latest stable and snapshot ids.
        versions: Ordered version entries as published.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    latest: LatestPointers
    versions: tuple[VersionEntry, ...] = Field(default_factory=tuple)

    _index: dict[str, str] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        """Build the id -> descriptor URL index (first occurrence wins)."""
        for entry in self.versions:
            self._index.setdefault(entry.id, entry.url)

    @property
    def latest_stable(self) -> str:
        """Id the `latest` alias points at."""
        return self.latest.release

    @property
    def latest_snapshot(self) -> str:
        """Id the `latest-snapshot` alias points at."""
        return self.latest.snapshot

    def __contains__(self, version_id: object) -> bool:
        return isinstance(version_id, str) and version_id in self._index

    def descriptor_url(self, version_id: str) -> str | None:
        """Get descriptor URL for a version id, or None if not listed."""
        return self._index.get(version_id)

    @property
    def version_ids(self) -> list[str]:
        """Unique version ids in catalog order."""
        return list(self._index)

    @classmethod
    def from_json(cls, data: bytes | str) -> RootCatalog:
        """Deserialize from JSON."""
        if isinstance(data, str):
            data = data.encode()
        return cls.model_validate(orjson.loads(data))


class VersionDescriptor(BaseModel):
    """
    Per-version descriptor document.

    `downloads` is kept untyped; the artifact locator owns the shape checks
    for the one entry it needs.

    Attributes:
        id: Version id echoed by the document, if present.
        downloads: Raw `downloads` object.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None
    downloads: Any = None

    @classmethod
    def from_json(cls, data: bytes | str) -> VersionDescriptor:
        """Deserialize from JSON."""
        if isinstance(data, str):
            data = data.encode()
        return cls.model_validate(orjson.loads(data))
