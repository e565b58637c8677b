"""Command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from .constants import (
    COMMIT_MESSAGE,
    DIR_COLUMN,
    FOLDER_KEYS,
    GIT_REMOTE,
    GIT_TIMEOUT,
    MANIFEST_FILE,
    NAME_COLUMN,
    ROOT_DIR,
)
from .errors import PageSyncError
from .git import GitRepo
from .http import is_remote
from .orchestrator import run_sync

log = logging.getLogger("pagesync")


def parse_folder_keys(value: str) -> tuple[str, ...]:
    """Parse ``a,b,c`` or a run of single-character keys like ``abc``."""
    if "," in value:
        keys = [part.strip() for part in value.split(",") if part.strip()]
    else:
        keys = list(value.strip())
    if not keys:
        raise argparse.ArgumentTypeError("at least one folder key is required")
    return tuple(dict.fromkeys(keys))


def parse_ratio(value: str) -> float:
    ratio = float(value)
    if not 0.0 <= ratio <= 1.0:
        raise argparse.ArgumentTypeError("ratio must be between 0 and 1")
    return ratio


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagesync",
        description="Reconcile per-folder static pages against a CSV "
        "manifest and push the result.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=ROOT_DIR,
        help="Repository root holding one folder per key (default: .).",
    )
    parser.add_argument(
        "--manifest",
        type=str,
        default=str(MANIFEST_FILE),
        help="Manifest CSV path (relative to --root) or http(s) URL.",
    )
    parser.add_argument(
        "--folders",
        type=parse_folder_keys,
        default=FOLDER_KEYS,
        help="Managed folder keys, comma-separated or as a run of "
        "letters (default: a-z).",
    )
    parser.add_argument("--dir-column", default=DIR_COLUMN)
    parser.add_argument("--name-column", default=NAME_COLUMN)
    parser.add_argument("--remote", default=GIT_REMOTE)
    parser.add_argument(
        "--branch",
        default=None,
        help="Branch to pull and push (default: the current branch).",
    )
    parser.add_argument("--message", default=COMMIT_MESSAGE)
    parser.add_argument(
        "--timeout",
        type=float,
        default=GIT_TIMEOUT,
        help="Seconds before a git command is abandoned.",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Report what would change without writing or pushing.",
    )
    parser.add_argument(
        "--no-git",
        action="store_true",
        help="Reconcile folders locally; skip pull, commit and push.",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue past per-file failures and report them at the end.",
    )
    parser.add_argument(
        "--max-delete-ratio",
        type=parse_ratio,
        default=None,
        help="Abort if more than this share of existing pages would be "
        "deleted.",
    )
    parser.add_argument(
        "--no-escape",
        action="store_true",
        help="Insert file names into generated HTML without escaping.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.verbose:
        log.setLevel(logging.DEBUG)

    manifest_source = args.manifest
    if not is_remote(manifest_source):
        manifest_source = args.root / manifest_source

    repo = None
    if not args.no_git:
        repo = GitRepo(
            args.root,
            remote=args.remote,
            branch=args.branch,
            timeout=args.timeout,
        )

    try:
        result = run_sync(
            manifest_source,
            root=args.root,
            repo=repo,
            folder_keys=args.folders,
            dir_column=args.dir_column,
            name_column=args.name_column,
            commit_message=args.message,
            escape=not args.no_escape,
            skip_git=args.no_git,
            verify_only=args.verify,
            keep_going=args.keep_going,
            max_delete_ratio=args.max_delete_ratio,
        )
    except PageSyncError as exc:
        log.error("%s: %s", type(exc).__name__, exc)
        sys.exit(exc.exit_code)

    if result.failures:
        for failure in result.failures:
            log.error(
                "FileOperationFailed: %s (%s)",
                failure, type(failure.cause).__name__,
            )
        sys.exit(1)

    log.info("Sync complete.")


if __name__ == "__main__":
    main()
