"""Sync orchestration: pull, reconcile, commit, push, verify."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .constants import (
    COMMIT_MESSAGE,
    DIR_COLUMN,
    FOLDER_KEYS,
    INDEX_FILE,
    MANIFEST_FILE,
    MARKER_FILE,
    NAME_COLUMN,
    PAGE_SUFFIX,
    ROOT_DIR,
)
from .errors import (
    DeletionThresholdExceeded,
    GitCommandError,
    PushRejected,
    SyncConflict,
)
from .git import GitRepo
from .http import fetch_text
from .manifest import FetchFn, load_manifest
from .reconciler import FolderReport, check_deletion_threshold, reconcile_all

log = logging.getLogger("pagesync")


@dataclass
class SyncResult:
    """Outcome of one run."""

    reports: list[FolderReport] = field(default_factory=list)
    pulled: bool = False
    committed: bool = False
    pushed: bool = False
    local_tip: str | None = None
    upstream_tip: str | None = None

    @property
    def failures(self) -> list:
        return [f for report in self.reports for f in report.failures]

    @property
    def in_sync(self) -> bool:
        return bool(self.local_tip) and self.local_tip == self.upstream_tip


def verify_upstream(repo: GitRepo, result: SyncResult) -> bool:
    """Fetch and compare the local tip against the upstream tip.

    Only logs; never raises.  Returns True when the tips match.
    """
    try:
        repo.fetch()
        result.local_tip = repo.local_tip()
        result.upstream_tip = repo.upstream_tip()
    except GitCommandError as exc:
        log.warning("Could not verify upstream state: %s", exc)
        return False

    if result.in_sync:
        log.info(
            "Local %s matches %s (%s)",
            repo.branch, repo.upstream_ref, result.local_tip[:12],
        )
        return True

    log.warning(
        "Local %s (%s) differs from %s (%s)",
        repo.branch, (result.local_tip or "?")[:12],
        repo.upstream_ref, (result.upstream_tip or "?")[:12],
    )
    return False


def run_sync(
    manifest_source: str | Path = MANIFEST_FILE,
    *,
    root: Path = ROOT_DIR,
    repo: GitRepo | None = None,
    folder_keys: tuple[str, ...] = FOLDER_KEYS,
    dir_column: str = DIR_COLUMN,
    name_column: str = NAME_COLUMN,
    index_name: str = INDEX_FILE,
    marker_name: str = MARKER_FILE,
    page_suffix: str = PAGE_SUFFIX,
    commit_message: str = COMMIT_MESSAGE,
    escape: bool = True,
    skip_git: bool = False,
    verify_only: bool = False,
    keep_going: bool = False,
    max_delete_ratio: float | None = None,
    fetch_fn: FetchFn = fetch_text,
) -> SyncResult:
    """Bring the page tree under *root* in line with the manifest and push.

    Phases run in order and each is a precondition for the next; any
    ``PageSyncError`` aborts the remaining phases.  With *skip_git* only
    the manifest is loaded and folders reconciled.  With *verify_only*
    nothing is written locally or remotely.
    """
    result = SyncResult()
    use_git = not skip_git
    if use_git and repo is None:
        repo = GitRepo(root)

    # Phase 1: start from the latest upstream state
    if use_git and not verify_only:
        try:
            log.info("Pulling %s", repo.upstream_ref)
            repo.pull()
        except GitCommandError as exc:
            raise SyncConflict(f"Pull failed: {exc}") from exc
        result.pulled = True

    # Phase 2: manifest
    manifest = load_manifest(
        manifest_source,
        folder_keys=folder_keys,
        dir_column=dir_column,
        name_column=name_column,
        index_name=index_name,
        fetch_fn=fetch_fn,
    )

    if max_delete_ratio is not None and not check_deletion_threshold(
        manifest, max_delete_ratio,
        root=root,
        folder_keys=folder_keys,
        index_name=index_name,
        page_suffix=page_suffix,
    ):
        raise DeletionThresholdExceeded(
            f"Manifest would delete more than {max_delete_ratio:.0%} "
            f"of existing pages"
        )

    # Phase 3: converge every folder
    result.reports = reconcile_all(
        manifest,
        root=root,
        folder_keys=folder_keys,
        index_name=index_name,
        marker_name=marker_name,
        page_suffix=page_suffix,
        escape=escape,
        verify_only=verify_only,
        keep_going=keep_going,
    )

    if not use_git or verify_only:
        return result

    if result.failures:
        log.error(
            "%d file operation(s) failed; not committing", len(result.failures),
        )
        return result

    # Phase 4: commit and push only when the tree changed
    try:
        changed = repo.has_changes()
    except GitCommandError as exc:
        raise SyncConflict(f"Cannot read working tree status: {exc}") from exc

    if not changed:
        log.info("No changes to commit")
    else:
        try:
            repo.commit_all(commit_message)
        except GitCommandError as exc:
            raise SyncConflict(f"Commit failed: {exc}") from exc
        result.committed = True
        log.info("Committed changes: %s", commit_message)

        try:
            repo.push()
        except GitCommandError as exc:
            raise PushRejected(
                f"Push to {repo.upstream_ref} failed: {exc}"
            ) from exc
        result.pushed = True
        log.info("Pushed to %s", repo.upstream_ref)

    # Phase 5: report, never fail
    verify_upstream(repo, result)
    return result
