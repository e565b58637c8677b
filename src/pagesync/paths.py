"""Folder-key derivation, page-name validation, and filepath mapping."""

from pathlib import Path, PurePosixPath

from .constants import FOLDER_KEYS, ROOT_DIR
from .errors import UnsupportedFileName, UnsupportedFolderKey


def folder_key_from_reference(
    reference: str,
    folder_keys: tuple[str, ...] = FOLDER_KEYS,
) -> str:
    """Return the folder key named by the last segment of *reference*.

    Accepts bare keys (``a``) and paths (``site/a``, ``site\\a/``).  Only the
    leaf folder name is used; it must be one of *folder_keys*.
    """
    normalized = reference.strip().replace("\\", "/").rstrip("/")
    leaf = PurePosixPath(normalized).name if normalized else ""

    if leaf not in folder_keys:
        raise UnsupportedFolderKey(
            f"Directory reference {reference!r} does not resolve to a "
            f"managed folder (got {leaf!r})"
        )
    return leaf


def validate_page_name(name: str) -> str:
    """Ensure *name* is a plain file name and return it stripped."""
    name = name.strip()
    if not name:
        raise UnsupportedFileName("Empty file name in manifest")
    if "/" in name or "\\" in name or name in (".", ".."):
        raise UnsupportedFileName(
            f"Manifest name {name!r} is not a plain file name"
        )
    return name


def page_filepath(
    folder_key: str,
    name: str,
    root: Path = ROOT_DIR,
) -> Path:
    """Map a ``(folder_key, name)`` pair to its path under *root*.

    Example: ``("a", "apple.html")`` → ``<root>/a/apple.html``
    """
    folder = root / folder_key
    filepath = folder / validate_page_name(name)

    if not filepath.resolve().is_relative_to(folder.resolve()):
        raise UnsupportedFileName(
            f"Resolved path escapes folder {folder_key!r}: {filepath}"
        )

    return filepath
