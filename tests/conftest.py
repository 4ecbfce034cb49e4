"""Shared fixtures for pipeline, client and CLI tests."""

from __future__ import annotations

import pytest

from jarfetch.config import FetchConfig
from jarfetch.manifest.client import ManifestClient
from jarfetch.pipeline import ArtifactPipeline
from tests.catalog_fixtures import CATALOG_URL, FakeTransport, build_transport


@pytest.fixture
def config() -> FetchConfig:
    return FetchConfig(catalog_url=CATALOG_URL, chunk_size=4096)


@pytest.fixture
def transport() -> FakeTransport:
    """Fake transport serving the default catalog, descriptors and artifacts."""
    return build_transport()


@pytest.fixture
def pipeline(transport: FakeTransport, config: FetchConfig) -> ArtifactPipeline:
    client = ManifestClient(transport, config.catalog_url)
    return ArtifactPipeline(client, transport, config=config)
