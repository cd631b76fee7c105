"""Current-branch lookup via the git CLI."""

import logging
import os
import subprocess
from pathlib import Path

from jira_scp.settings import ScpSettings

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    pass


class NotAGitRepository(GitError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"{path} is not a git repository")
        self.path = path


def resolve_workspace(settings: ScpSettings) -> Path:
    """Pick the directory to inspect.

    First non-empty of: WORKSPACE_FOLDER_PATHS, the inherited PWD, the process cwd.
    """
    # TODO: PWD is stale when the launcher chdir()s without updating it; drop it
    # if no MCP client turns out to rely on it.
    chosen = settings.workspace_folder_paths or os.environ.get("PWD")
    return Path(chosen).expanduser() if chosen else Path.cwd()


class GitRepo:
    def __init__(self, path: Path) -> None:
        self.path = path

    def _git(self, *args: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(["git", *args], cwd=self.path, capture_output=True, text=True)
        except OSError as exc:
            # Missing git binary, or a workspace that is missing or unreadable
            raise GitError(f"Cannot run git in {self.path}: {exc}") from exc

    def is_repo(self) -> bool:
        try:
            result = self._git("rev-parse", "--is-inside-work-tree")
        except GitError as exc:
            logger.warning("%s", exc)
            return False
        return result.returncode == 0 and result.stdout.strip() == "true"

    def current_branch(self) -> str:
        """Return the checked-out branch, or the short commit hash on a detached HEAD."""
        result = self._git("symbolic-ref", "--short", "HEAD")
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()

        detached = self._git("rev-parse", "--short", "HEAD")
        if detached.returncode == 0 and detached.stdout.strip():
            return detached.stdout.strip()

        raise GitError(f"Could not determine the current branch in {self.path}: {result.stderr.strip()}")


def resolve_current_branch(path: Path) -> str:
    repo = GitRepo(path)
    if not repo.is_repo():
        raise NotAGitRepository(path)
    return repo.current_branch()
