"""Thin wrapper around the ``git`` executable."""

import logging
import subprocess
from pathlib import Path

from .constants import GIT_REMOTE, GIT_TIMEOUT, ROOT_DIR
from .errors import GitCommandError

log = logging.getLogger("pagesync")


class GitRepo:
    """A working tree plus the remote branch it syncs with.

    When *branch* is None the currently checked-out branch is used.
    """

    def __init__(
        self,
        root: Path = ROOT_DIR,
        *,
        remote: str = GIT_REMOTE,
        branch: str | None = None,
        timeout: float = GIT_TIMEOUT,
    ) -> None:
        self.root = Path(root)
        self.remote = remote
        self._branch = branch
        self.timeout = timeout

    def run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        """Run ``git <args>`` in the working tree.

        Raises ``GitCommandError`` on timeout, or on a non-zero exit when
        *check* is set.
        """
        cmd = ["git", *args]
        log.debug("$ %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=self.root,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise GitCommandError(cmd, None) from exc
        if check and result.returncode != 0:
            raise GitCommandError(cmd, result.returncode, result.stderr)
        return result

    @property
    def branch(self) -> str:
        if self._branch is None:
            self._branch = self.run(
                "rev-parse", "--abbrev-ref", "HEAD",
            ).stdout.strip()
        return self._branch

    @property
    def upstream_ref(self) -> str:
        return f"{self.remote}/{self.branch}"

    def pull(self) -> None:
        """Rebase local commits onto the upstream branch.

        A failed rebase is aborted so the tree is left as it was before
        re-raising.
        """
        try:
            self.run("pull", "--rebase", self.remote, self.branch)
        except GitCommandError:
            self.run("rebase", "--abort", check=False)
            raise

    def has_changes(self) -> bool:
        """Return True if the working tree differs from HEAD (untracked too)."""
        status = self.run("status", "--porcelain").stdout
        return bool(status.strip())

    def commit_all(self, message: str) -> None:
        self.run("add", "-A")
        self.run("commit", "-m", message)

    def push(self) -> None:
        self.run("push", self.remote, self.branch)

    def fetch(self) -> None:
        self.run("fetch", self.remote, self.branch)

    def local_tip(self) -> str:
        return self.run("rev-parse", "HEAD").stdout.strip()

    def upstream_tip(self) -> str:
        return self.run("rev-parse", self.upstream_ref).stdout.strip()
