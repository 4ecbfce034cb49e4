"""
Command-line entry point.

Usage:
    jarfetch download <version> <file>    # fetch and verify a server artifact
    jarfetch verify <version> <file>      # check an existing file
    jarfetch latest-release               # print the latest stable id
    jarfetch latest-snapshot              # print the latest snapshot id
    jarfetch help

<version> is a literal id (e.g. 1.20.4) or one of the aliases `latest` and
`latest-snapshot`.

Exit codes: 0 success, 1 failure, 2 usage error, 3 checksum mismatch.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING, TextIO

from jarfetch import __version__
from jarfetch.config import FetchConfig
from jarfetch.errors import EXIT_FAILURE, EXIT_OK, EXIT_USAGE, JarfetchError, Stage
from jarfetch.logging_config import setup_logging
from jarfetch.pipeline import open_pipeline
from jarfetch.resolver import LATEST_SNAPSHOT, LATEST_STABLE

if TYPE_CHECKING:
    from collections.abc import Sequence

    from jarfetch.pipeline import ArtifactPipeline, VerificationResult

logger = logging.getLogger(__name__)

_STAGE_NARRATION: dict[Stage, str] = {
    Stage.CATALOG: "Fetching version catalog",
    Stage.RESOLVE: "Resolving version {detail}",
    Stage.DESCRIPTOR: "Fetching descriptor for {detail}",
    Stage.LOCATE: "Locating server artifact for {detail}",
    Stage.DOWNLOAD: "Downloading {detail}",
    Stage.VERIFY: "Verifying SHA-1 of {detail}",
}


class Narrator:
    """Prints progress lines on stdout unless silenced."""

    def __init__(self, *, silent: bool, out: TextIO | None = None) -> None:
        self.silent = silent
        self._out = out or sys.stdout

    def say(self, text: str) -> None:
        if not self.silent:
            print(text, file=self._out)

    def on_stage(self, stage: Stage, detail: str) -> None:
        self.say(_STAGE_NARRATION[stage].format(detail=detail))

    def result(self, text: str) -> None:
        """Print command output, which silent mode keeps."""
        print(text, file=self._out)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    # Options accepted before or after the command; SUPPRESS keeps the
    # subcommand parser from overwriting values given earlier.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-s", "--silent", action="store_true", default=argparse.SUPPRESS,
        help="Suppress progress output; alias commands print only the id",
    )
    common.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
        help="Enable debug logging on stderr",
    )
    common.add_argument(
        "--json-logs", action="store_true", default=argparse.SUPPRESS,
        help="Emit log records as JSON lines",
    )
    common.add_argument(
        "--catalog-url", default=argparse.SUPPRESS, metavar="URL",
        help="Override the version catalog endpoint",
    )

    parser = argparse.ArgumentParser(
        prog="jarfetch",
        description="Download and verify server artifacts from a version catalog.",
        parents=[common],
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    download = sub.add_parser(
        "download", parents=[common], help="Download and verify an artifact"
    )
    download.add_argument("version", help="Version id, `latest` or `latest-snapshot`")
    download.add_argument("file", help="Destination path (overwritten)")

    verify = sub.add_parser(
        "verify", parents=[common], help="Verify an existing file against the catalog"
    )
    verify.add_argument("version", help="Version id, `latest` or `latest-snapshot`")
    verify.add_argument("file", help="File to check")

    sub.add_parser("latest-release", parents=[common], help="Print the latest stable id")
    sub.add_parser("latest-snapshot", parents=[common], help="Print the latest snapshot id")
    sub.add_parser("help", help="Show this help")

    return parser


def _report_success(narrator: Narrator, result: VerificationResult, verb: str) -> None:
    narrator.say(f"Checksum OK: {result.actual_sha1}")
    narrator.say(f"{verb} {result.version_id} at {result.path}")


async def _dispatch(
    args: argparse.Namespace, pipeline: ArtifactPipeline, narrator: Narrator
) -> int:
    if args.command == "download":
        result = await pipeline.download(args.version, args.file)
        _report_success(narrator, result, "Downloaded")
    elif args.command == "verify":
        result = await pipeline.verify(args.version, args.file)
        _report_success(narrator, result, "Verified")
    elif args.command == "latest-release":
        version_id = await pipeline.resolve_alias(LATEST_STABLE)
        narrator.result(version_id if narrator.silent else f"Latest release: {version_id}")
    elif args.command == "latest-snapshot":
        version_id = await pipeline.resolve_alias(LATEST_SNAPSHOT)
        narrator.result(version_id if narrator.silent else f"Latest snapshot: {version_id}")
    return EXIT_OK


async def run(args: argparse.Namespace, config: FetchConfig, narrator: Narrator) -> int:
    """Run one command against a live aiohttp-backed pipeline."""
    async with open_pipeline(config, on_stage=narrator.on_stage) as pipeline:
        return await _dispatch(args, pipeline, narrator)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "help"):
        parser.print_help()
        return EXIT_OK if args.command == "help" else EXIT_USAGE

    silent = getattr(args, "silent", False)
    verbose = getattr(args, "verbose", False)
    setup_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        json_format=getattr(args, "json_logs", False),
    )

    try:
        config = FetchConfig.from_env(catalog_url=getattr(args, "catalog_url", None))
    except ValueError as e:
        print(f"jarfetch: configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    narrator = Narrator(silent=silent)
    try:
        return asyncio.run(run(args, config, narrator))
    except JarfetchError as e:
        stage = e.stage.value if e.stage is not None else "-"
        logger.debug("Pipeline failed", exc_info=True)
        print(f"jarfetch: {e.kind} [{stage}]: {e}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        print("jarfetch: interrupted", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
