"""Exception types raised while reconciling and syncing pages."""


class PageSyncError(Exception):
    """Base class for every fatal pagesync error."""

    exit_code = 1


class ManifestUnreadable(PageSyncError):
    """The manifest could not be read or parsed."""


class UnsupportedFolderKey(ManifestUnreadable):
    """A directory reference does not resolve to a configured folder key."""


class UnsupportedFileName(ManifestUnreadable):
    """A manifest name is not a plain file name."""


class FileOperationFailed(PageSyncError):
    """Creating, writing or deleting a file under a folder failed."""

    def __init__(self, folder_key: str, file_name: str, cause: Exception):
        self.folder_key = folder_key
        self.file_name = file_name
        self.cause = cause
        super().__init__(f"{folder_key}/{file_name}: {cause}")


class DeletionThresholdExceeded(PageSyncError):
    """Too many existing pages would be deleted in one run."""

    exit_code = 2


class GitCommandError(PageSyncError):
    """A git invocation exited non-zero or timed out."""

    def __init__(
        self, command: list[str], returncode: int | None, stderr: str = ""
    ):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            detail = "timed out"
        else:
            detail = f"exited with status {returncode}"
        message = f"`{' '.join(command)}` {detail}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)


class SyncConflict(PageSyncError):
    """Pulling or committing could not complete cleanly."""


class PushRejected(PageSyncError):
    """The remote refused the push."""
