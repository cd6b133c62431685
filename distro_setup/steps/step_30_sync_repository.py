from __future__ import annotations

import logging

from ..context import SetupContext
from ..errors import FatalSetupError, StepFailed
from ..lib.git import RepositoryHandle, clone, pull_first_branch

logger = logging.getLogger(__name__)


class SyncRepositoryStep:
    step_id = "30_sync_repository"
    title = "Cloning GitHub repository"
    confirm_prompt = "Clone your GitHub repository?"

    def run(self, ctx: SetupContext) -> None:
        cfg = ctx.config
        repo = RepositoryHandle(remote_url=cfg.repo_url, local_path=cfg.repo_dir)

        if repo.exists:
            logger.info("Repository already exists at %s", repo.local_path)
            if not ctx.prompter.confirm("Pull latest changes?"):
                return
            logger.info("Updating repository...")
            branch = pull_first_branch(ctx.runner, repo, cfg.pull_branches)
            if branch is None:
                raise StepFailed(
                    f"Failed to update repository (tried branches: {', '.join(cfg.pull_branches)})"
                )
            logger.info("Repository updated (origin/%s)", branch)
            return

        logger.info("Cloning %s...", repo.remote_url)
        r = clone(ctx.runner, repo)
        if not r.ok:
            logger.error("Failed to clone repository")
            logger.info("Make sure:")
            logger.info("  1. The repository exists: %s", cfg.repo_web_url)
            logger.info("  2. You have access to it")
            logger.info("  3. Your SSH key is properly configured")
            raise FatalSetupError(f"git clone {repo.remote_url} failed ({r.returncode})")
        logger.info("Repository cloned to %s", repo.local_path)
