"""Folder reconciliation, empty-folder markers, and deletion thresholds."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .constants import (
    FOLDER_KEYS,
    INDEX_FILE,
    MARKER_FILE,
    PAGE_SUFFIX,
    ROOT_DIR,
)
from .errors import FileOperationFailed
from .paths import page_filepath
from .templates import render_index, render_page

log = logging.getLogger("pagesync")


@dataclass
class FolderReport:
    """What reconciling one folder did (or would do in verify mode)."""

    folder_key: str
    created: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    index_changed: bool = False
    marker_added: bool = False
    marker_removed: bool = False
    failures: list[FileOperationFailed] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(
            self.created or self.removed or self.index_changed
            or self.marker_added or self.marker_removed
        )


def discover_pages(folder: Path, page_suffix: str = PAGE_SUFFIX) -> set[str]:
    """Return the names of regular files in *folder* ending in *page_suffix*."""
    if not folder.is_dir():
        return set()
    return {
        entry.name for entry in folder.iterdir()
        if entry.is_file() and entry.name.endswith(page_suffix)
    }


def _attempt(
    report: FolderReport,
    file_name: str,
    action: Callable[[], None],
    *,
    keep_going: bool,
) -> bool:
    """Run *action*; wrap ``OSError`` as ``FileOperationFailed``.

    Raises unless *keep_going*, in which case the failure is recorded on
    *report* and False is returned.
    """
    try:
        action()
    except OSError as exc:
        failure = FileOperationFailed(report.folder_key, file_name, exc)
        if not keep_going:
            raise failure from exc
        log.error("  failed %s", failure)
        report.failures.append(failure)
        return False
    return True


def _create_page(path: Path, content: str) -> None:
    # "x" refuses to clobber a file that appeared since the existence check
    with path.open("x", encoding="utf-8") as fh:
        fh.write(content)


def _ensure_page(
    path: Path, name: str, *, escape: bool, verify_only: bool,
) -> bool:
    """Create *path* from the page template unless something is already there.

    Returns True if the page was (or in verify mode would be) created.
    """
    if path.exists() or path.is_symlink():
        return False
    if verify_only:
        return True
    try:
        _create_page(path, render_page(name, escape=escape))
    except FileExistsError:
        return False
    return True


def reconcile_folder(
    folder_key: str,
    required: list[str],
    *,
    root: Path = ROOT_DIR,
    index_name: str = INDEX_FILE,
    marker_name: str = MARKER_FILE,
    page_suffix: str = PAGE_SUFFIX,
    escape: bool = True,
    verify_only: bool = False,
    keep_going: bool = False,
) -> FolderReport:
    """Converge ``root/folder_key`` toward the *required* page names.

    Creates missing pages from the placeholder template, deletes pages not
    in *required*, rewrites the index, and keeps the empty-folder marker in
    step with whether *required* is empty.  Existing required pages are
    never opened.
    """
    report = FolderReport(folder_key)
    folder = root / folder_key
    required_set = set(required)

    if not folder.is_dir():
        if verify_only:
            log.info("  would create folder %s", folder)
        elif not _attempt(
            report, "",
            lambda: folder.mkdir(parents=True, exist_ok=True),
            keep_going=keep_going,
        ):
            return report

    existing: set[str] = set()

    def _scan() -> None:
        existing.update(discover_pages(folder, page_suffix))

    if not _attempt(report, "", _scan, keep_going=keep_going):
        return report

    # Missing required pages
    for name in sorted(required_set):
        made: list[Path] = []

        def _ensure(name: str = name) -> None:
            path = page_filepath(folder_key, name, root)
            if _ensure_page(
                path, name, escape=escape, verify_only=verify_only,
            ):
                made.append(path)

        if _attempt(report, name, _ensure, keep_going=keep_going) and made:
            log.info(
                "  %s %s",
                "would create" if verify_only else "created", made[0],
            )
            report.created.append(name)

    # Pages no longer in the manifest
    for name in sorted(existing - required_set - {index_name}):
        path = folder / name
        if verify_only:
            log.info("  would delete %s (not in manifest)", path)
            report.removed.append(name)
            continue
        if _attempt(report, name, path.unlink, keep_going=keep_going):
            log.info("  deleted %s (not in manifest)", path)
            report.removed.append(name)

    # Index is rewritten every run
    index_path = folder / index_name
    index_content = render_index(folder_key, sorted(required_set), escape=escape)

    index_bytes = index_content.encode("utf-8")

    def _write_index() -> None:
        previous = index_path.read_bytes() if index_path.is_file() else None
        report.index_changed = previous != index_bytes
        if not verify_only:
            index_path.write_bytes(index_bytes)

    _attempt(report, index_name, _write_index, keep_going=keep_going)
    if report.index_changed:
        log.info(
            "  %s %s",
            "would rewrite" if verify_only else "rewrote", index_path,
        )

    marker = folder / marker_name
    if not required_set:
        if not marker.exists():
            if verify_only:
                log.info("  would add %s", marker)
                report.marker_added = True
            elif _attempt(report, marker_name, marker.touch,
                          keep_going=keep_going):
                log.info("  added %s", marker)
                report.marker_added = True
    elif marker.exists():
        if verify_only:
            log.info("  would remove %s", marker)
            report.marker_removed = True
        elif _attempt(
            report, marker_name,
            lambda: marker.unlink(missing_ok=True),
            keep_going=keep_going,
        ):
            log.info("  removed %s", marker)
            report.marker_removed = True

    log.debug(
        "[%s] created %d, removed %d, index %s",
        folder_key, len(report.created), len(report.removed),
        "changed" if report.index_changed else "unchanged",
    )
    return report


def reconcile_all(
    manifest: dict[str, list[str]],
    *,
    root: Path = ROOT_DIR,
    folder_keys: tuple[str, ...] = FOLDER_KEYS,
    index_name: str = INDEX_FILE,
    marker_name: str = MARKER_FILE,
    page_suffix: str = PAGE_SUFFIX,
    escape: bool = True,
    verify_only: bool = False,
    keep_going: bool = False,
) -> list[FolderReport]:
    """Reconcile every key in *folder_keys*, in sorted order.

    Keys missing from *manifest* are reconciled against an empty list.
    """
    reports = []
    for key in sorted(folder_keys):
        reports.append(reconcile_folder(
            key, manifest.get(key, []),
            root=root,
            index_name=index_name,
            marker_name=marker_name,
            page_suffix=page_suffix,
            escape=escape,
            verify_only=verify_only,
            keep_going=keep_going,
        ))

    log.info(
        "Reconciled %d folder(s): created %d, removed %d, "
        "indexes changed %d, failed %d",
        len(reports),
        sum(len(r.created) for r in reports),
        sum(len(r.removed) for r in reports),
        sum(1 for r in reports if r.index_changed),
        sum(len(r.failures) for r in reports),
    )
    return reports


def check_deletion_threshold(
    manifest: dict[str, list[str]],
    max_ratio: float,
    *,
    root: Path = ROOT_DIR,
    folder_keys: tuple[str, ...] = FOLDER_KEYS,
    index_name: str = INDEX_FILE,
    page_suffix: str = PAGE_SUFFIX,
) -> bool:
    """Check whether reconciling would delete too much of the existing tree.

    Returns True if the share of existing pages that would be deleted is at
    most *max_ratio*, False (after logging why) otherwise.
    """
    existing_count = 0
    doomed_count = 0
    for key in folder_keys:
        pages = discover_pages(root / key, page_suffix) - {index_name}
        existing_count += len(pages)
        doomed_count += len(pages - set(manifest.get(key, [])))

    # Nothing on disk yet, nothing to protect
    if existing_count == 0:
        return True

    if doomed_count > existing_count * max_ratio:
        log.error(
            "THRESHOLD: manifest would delete %d of %d existing pages "
            "(>%.0f%%). Possible truncated or wrong manifest. Aborting "
            "to protect the site.",
            doomed_count, existing_count, max_ratio * 100,
        )
        return False

    return True
