"""
Failure taxonomy for the resolve -> download -> verify pipeline.

Every failure is terminal for the current invocation. Each exception records
the pipeline stage it came from and the process exit code the CLI reports for
it. IntegrityMismatch is the only kind with its own exit code so scripts can
branch on a tampered or corrupted artifact.
"""

from __future__ import annotations

from enum import Enum

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2  # argparse convention
EXIT_INTEGRITY_MISMATCH = 3


class Stage(str, Enum):
    """Pipeline stage a failure originated from."""

    CATALOG = "catalog"
    RESOLVE = "resolve"
    DESCRIPTOR = "descriptor"
    LOCATE = "locate"
    DOWNLOAD = "download"
    VERIFY = "verify"


class JarfetchError(Exception):
    """Base exception for all pipeline failures."""

    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str, *, stage: Stage | None = None) -> None:
        super().__init__(message)
        self.stage = stage

    @property
    def kind(self) -> str:
        """Failure kind name as reported to operators."""
        return type(self).__name__


class NetworkFailure(JarfetchError):
    """Raised when a manifest fetch fails at the transport level."""

    def __init__(
        self,
        message: str,
        *,
        url: str,
        stage: Stage | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(message, stage=stage)
        self.url = url
        self.status = status


class MalformedResponse(JarfetchError):
    """Raised when remote data does not have the expected shape."""


class ResolutionError(JarfetchError):
    """Base for failures mapping a version token onto a catalog entry."""


class UnknownAlias(ResolutionError):
    """Raised when a token looks like an alias but is not a reserved one."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown version alias: {token!r}", stage=Stage.RESOLVE)
        self.token = token


class VersionNotFound(ResolutionError):
    """Raised when the resolved version id is not listed in the catalog."""

    def __init__(self, version_id: str) -> None:
        super().__init__(f"Version not found in catalog: {version_id!r}", stage=Stage.RESOLVE)
        self.version_id = version_id


class DownloadFailed(JarfetchError):
    """Raised when the artifact transfer fails after its URL was obtained."""

    def __init__(self, message: str, *, url: str, status: int | None = None) -> None:
        super().__init__(message, stage=Stage.DOWNLOAD)
        self.url = url
        self.status = status


class FileNotFound(JarfetchError):
    """Raised when the file to verify is missing or unreadable."""

    def __init__(self, path: object, reason: str | None = None) -> None:
        message = f"Cannot read artifact file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, stage=Stage.VERIFY)
        self.path = path


class IntegrityMismatch(JarfetchError):
    """Raised when the artifact checksum differs from the catalog's."""

    exit_code = EXIT_INTEGRITY_MISMATCH

    def __init__(self, path: object, *, expected: str, actual: str) -> None:
        super().__init__(
            f"SHA-1 mismatch for {path}: expected {expected}, got {actual}",
            stage=Stage.VERIFY,
        )
        self.path = path
        self.expected = expected
        self.actual = actual
