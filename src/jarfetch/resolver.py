"""
Version resolver.

Maps a user-supplied version token onto a concrete version id listed in the
root catalog. Tokens are parsed once into a closed set of kinds:

    latest           -> TokenKind.LATEST_STABLE   (catalog latest.release)
    latest-snapshot  -> TokenKind.LATEST_SNAPSHOT (catalog latest.snapshot)
    anything else    -> TokenKind.EXPLICIT        (literal id, unchanged)

Explicit ids are looked up byte-for-byte. One that starts with "latest" and is
not listed in the catalog is reported as UnknownAlias rather than
VersionNotFound, since it is most likely a mistyped alias.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from jarfetch.errors import UnknownAlias, VersionNotFound

if TYPE_CHECKING:
    from jarfetch.manifest.models import RootCatalog

logger = logging.getLogger(__name__)

ALIAS_LATEST = "latest"
ALIAS_LATEST_SNAPSHOT = "latest-snapshot"

_ALIAS_PREFIX = "latest"


class TokenKind(str, Enum):
    """Kind of version token."""

    EXPLICIT = "explicit"
    LATEST_STABLE = "latest_stable"
    LATEST_SNAPSHOT = "latest_snapshot"


@dataclass(frozen=True)
class VersionToken:
    """
    Parsed version token.

    Attributes:
        kind: Which variant this token is.
        version_id: Literal id for EXPLICIT tokens, None for aliases.
    """

    kind: TokenKind
    version_id: str | None = None

    def __str__(self) -> str:
        if self.kind == TokenKind.LATEST_STABLE:
            return ALIAS_LATEST
        if self.kind == TokenKind.LATEST_SNAPSHOT:
            return ALIAS_LATEST_SNAPSHOT
        return self.version_id or ""

    @property
    def is_alias(self) -> bool:
        return self.kind != TokenKind.EXPLICIT

    @classmethod
    def explicit(cls, version_id: str) -> VersionToken:
        return cls(kind=TokenKind.EXPLICIT, version_id=version_id)


LATEST_STABLE = VersionToken(kind=TokenKind.LATEST_STABLE)
LATEST_SNAPSHOT = VersionToken(kind=TokenKind.LATEST_SNAPSHOT)


def parse_version_token(raw: str) -> VersionToken:
    """
    Parse user input into a VersionToken.

    Args:
        raw: Version argument as typed by the user.

    Returns:
        The matching VersionToken.

    Raises:
        UnknownAlias: If raw is empty.
    """
    if raw == ALIAS_LATEST:
        return LATEST_STABLE
    if raw == ALIAS_LATEST_SNAPSHOT:
        return LATEST_SNAPSHOT
    if not raw:
        raise UnknownAlias(raw)
    return VersionToken.explicit(raw)


def looks_like_alias(version_id: str) -> bool:
    """Check whether an explicit id reads like a mistyped alias."""
    return version_id.lower().startswith(_ALIAS_PREFIX)


def target_id(token: VersionToken, catalog: RootCatalog) -> str:
    """Substitute alias pointers; explicit ids pass through unchanged."""
    if token.kind == TokenKind.LATEST_STABLE:
        return catalog.latest_stable
    if token.kind == TokenKind.LATEST_SNAPSHOT:
        return catalog.latest_snapshot
    assert token.version_id is not None  # Type narrowing
    return token.version_id


def resolve(token: VersionToken | str, catalog: RootCatalog) -> str:
    """
    Resolve a version token to a version id present in the catalog.

    A dangling alias pointer and an unknown explicit id both fail with
    VersionNotFound, except that an unlisted id starting with "latest"
    fails with UnknownAlias. Listed ids always resolve, whatever they
    start with.

    Args:
        token: Parsed token, or raw user input.
        catalog: Root catalog to resolve against.

    Returns:
        Concrete version id, guaranteed to be a catalog key.

    Raises:
        UnknownAlias: If the token is empty, or an unlisted id that starts
            with "latest".
        VersionNotFound: If the resolved id is not listed in the catalog.
    """
    if isinstance(token, str):
        token = parse_version_token(token)

    version_id = target_id(token, catalog)
    if version_id not in catalog:
        if not token.is_alias and looks_like_alias(version_id):
            raise UnknownAlias(version_id)
        raise VersionNotFound(version_id)

    if token.is_alias:
        logger.info("Resolved alias", extra={"alias": str(token), "version": version_id})
    return version_id
