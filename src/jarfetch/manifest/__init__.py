"""Remote manifest documents and the client that fetches them."""

from jarfetch.manifest.client import ManifestClient
from jarfetch.manifest.models import (
    LatestPointers,
    RootCatalog,
    VersionDescriptor,
    VersionEntry,
)

__all__ = [
    "LatestPointers",
    "ManifestClient",
    "RootCatalog",
    "VersionDescriptor",
    "VersionEntry",
]
