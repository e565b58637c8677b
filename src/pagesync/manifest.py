"""Manifest loading: CSV rows to per-folder required page names."""

import csv
import io
import logging
from pathlib import Path
from typing import Callable

import requests

from .constants import (
    DIR_COLUMN,
    FOLDER_KEYS,
    INDEX_FILE,
    MANIFEST_FILE,
    NAME_COLUMN,
)
from .errors import ManifestUnreadable
from .http import fetch_text, is_remote
from .paths import folder_key_from_reference, validate_page_name

log = logging.getLogger("pagesync")

# Type alias for the remote fetch function signature
FetchFn = Callable[[str], str]


def read_manifest_text(
    source: str | Path,
    fetch_fn: FetchFn = fetch_text,
) -> str:
    """Return the raw manifest text from a local path or an http(s) URL."""
    if isinstance(source, str) and is_remote(source):
        try:
            return fetch_fn(source)
        except requests.RequestException as exc:
            raise ManifestUnreadable(
                f"Cannot fetch manifest {source}: {exc}"
            ) from exc

    path = Path(source)
    try:
        # utf-8-sig drops the BOM spreadsheet exports tend to add
        return path.read_text("utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestUnreadable(
            f"Cannot read manifest {path}: {exc}"
        ) from exc


def _find_column(fieldnames: list[str], wanted: str) -> str:
    for field in fieldnames:
        if field is not None and field.strip().lower() == wanted.lower():
            return field
    raise ManifestUnreadable(
        f"Manifest has no {wanted!r} column (columns: {fieldnames})"
    )


def parse_manifest(
    text: str,
    *,
    folder_keys: tuple[str, ...] = FOLDER_KEYS,
    dir_column: str = DIR_COLUMN,
    name_column: str = NAME_COLUMN,
    index_name: str = INDEX_FILE,
) -> dict[str, list[str]]:
    """Parse manifest CSV *text* into ``{folder_key: sorted names}``.

    Every key in *folder_keys* is present in the result, with an empty list
    when the manifest does not mention it.
    """
    buckets: dict[str, set[str]] = {key: set() for key in folder_keys}

    try:
        reader = csv.DictReader(io.StringIO(text))
        fieldnames = reader.fieldnames
        if not fieldnames:
            raise ManifestUnreadable("Manifest is empty or has no header row")
        dir_field = _find_column(fieldnames, dir_column)
        name_field = _find_column(fieldnames, name_column)

        for line_no, row in enumerate(reader, 2):
            reference = (row.get(dir_field) or "").strip()
            name = (row.get(name_field) or "").strip()

            if not reference and not name:
                continue
            if not reference or not name:
                raise ManifestUnreadable(
                    f"Manifest line {line_no}: both {dir_column!r} and "
                    f"{name_column!r} are required"
                )

            key = folder_key_from_reference(reference, folder_keys)
            name = validate_page_name(name)
            if name == index_name:
                log.warning(
                    "Manifest line %d: ignoring %s/%s (index is generated)",
                    line_no, key, name,
                )
                continue
            buckets[key].add(name)
    except csv.Error as exc:
        raise ManifestUnreadable(f"Malformed manifest CSV: {exc}") from exc

    return {key: sorted(names) for key, names in buckets.items()}


def load_manifest(
    source: str | Path = MANIFEST_FILE,
    *,
    folder_keys: tuple[str, ...] = FOLDER_KEYS,
    dir_column: str = DIR_COLUMN,
    name_column: str = NAME_COLUMN,
    index_name: str = INDEX_FILE,
    fetch_fn: FetchFn = fetch_text,
) -> dict[str, list[str]]:
    """Load the manifest from *source* and group names by folder key."""
    text = read_manifest_text(source, fetch_fn=fetch_fn)
    manifest = parse_manifest(
        text,
        folder_keys=folder_keys,
        dir_column=dir_column,
        name_column=name_column,
        index_name=index_name,
    )
    log.info(
        "Loaded manifest: %d page(s) across %d folder(s)",
        sum(len(names) for names in manifest.values()),
        sum(1 for names in manifest.values() if names),
    )
    return manifest
