"""Tests for the artifact locator."""

from __future__ import annotations

from typing import Any

import pytest

from jarfetch.errors import MalformedResponse, Stage
from jarfetch.locator import ArtifactRef, locate, locate_in_document
from jarfetch.manifest.models import VersionDescriptor

SHA1_A = "a" * 40
SERVER_URL = "https://x.test/server.jar"


def _descriptor(downloads: Any) -> VersionDescriptor:
    return VersionDescriptor.model_validate({"id": "1.14", "downloads": downloads})


class TestLocate:
    """Tests for locate."""

    def test_extracts_server_entry(self) -> None:
        descriptor = _descriptor(
            {
                "client": {"url": "https://x.test/client.jar", "sha1": "b" * 40},
                "server": {"url": SERVER_URL, "sha1": SHA1_A, "size": 1234},
            }
        )

        ref = locate(descriptor)

        assert ref == ArtifactRef(url=SERVER_URL, sha1=SHA1_A, size_bytes=1234)

    def test_uppercase_digest_normalised(self) -> None:
        ref = locate(_descriptor({"server": {"url": SERVER_URL, "sha1": "ABCDEF" * 6 + "0123"}}))
        assert ref.sha1 == "abcdef" * 6 + "0123"

    def test_size_optional(self) -> None:
        ref = locate(_descriptor({"server": {"url": SERVER_URL, "sha1": SHA1_A}}))
        assert ref.size_bytes is None

    @pytest.mark.parametrize(
        "downloads",
        [
            None,
            [],
            {},
            {"client": {"url": SERVER_URL, "sha1": SHA1_A}},
            {"server": "https://x.test/server.jar"},
            {"server": {"sha1": SHA1_A}},
            {"server": {"url": 42, "sha1": SHA1_A}},
            {"server": {"url": "ftp://x.test/server.jar", "sha1": SHA1_A}},
            {"server": {"url": "not a url", "sha1": SHA1_A}},
            {"server": {"url": SERVER_URL}},
            {"server": {"url": SERVER_URL, "sha1": None}},
            {"server": {"url": SERVER_URL, "sha1": "a" * 39}},
            {"server": {"url": SERVER_URL, "sha1": "g" * 40}},
        ],
    )
    def test_missing_or_mistyped_fields_malformed(self, downloads: Any) -> None:
        """No fallback: anything but a valid server entry is MalformedResponse."""
        with pytest.raises(MalformedResponse) as exc_info:
            locate(_descriptor(downloads))
        assert exc_info.value.stage == Stage.LOCATE

    def test_locate_in_document_raw_mapping(self) -> None:
        ref = locate_in_document({"server": {"url": SERVER_URL, "sha1": SHA1_A}})
        assert ref.url == SERVER_URL
