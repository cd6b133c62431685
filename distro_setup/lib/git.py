from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .command import CmdResult, CommandRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositoryHandle:
    remote_url: str
    local_path: Path

    @property
    def exists(self) -> bool:
        return self.local_path.exists()


def git_available(runner: CommandRunner) -> bool:
    return runner.which("git") is not None


def clone(runner: CommandRunner, repo: RepositoryHandle) -> CmdResult:
    return runner.run(["git", "clone", repo.remote_url, str(repo.local_path)])


def pull_first_branch(runner: CommandRunner, repo: RepositoryHandle, branches: Sequence[str]) -> Optional[str]:
    """Pull from origin, trying each branch in order.

    Returns the branch that pulled cleanly, or None if none did.
    """

    for branch in branches:
        r = runner.run(["git", "-C", str(repo.local_path), "pull", "origin", branch])
        if r.ok:
            return branch
        logger.debug("git pull origin %s failed (rc=%s)", branch, r.returncode)
    return None


def set_global_identity(runner: CommandRunner, *, name: str, email: str) -> None:
    runner.run(["git", "config", "--global", "user.name", name], check=True)
    runner.run(["git", "config", "--global", "user.email", email], check=True)
