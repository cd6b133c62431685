from __future__ import annotations

import logging

from ..context import SetupContext
from ..errors import FatalSetupError
from ..lib.git import git_available, set_global_identity
from ..lib.pkg import install_packages, resolve_package_manager
from ..lib.ssh import KeyPair, add_key_to_agent, archive_key_pair, generate_key_pair, probe_git_host

logger = logging.getLogger(__name__)


class SetupCredentialsStep:
    step_id = "20_setup_credentials"
    title = "Setting up Git and SSH authentication"
    confirm_prompt = "Setup Git and SSH authentication?"

    def _ensure_git(self, ctx: SetupContext) -> None:
        if git_available(ctx.runner):
            logger.info("Git is already installed")
            return

        profile = ctx.require_profile()
        pm = resolve_package_manager(profile.distro_id, profile.id_like)
        if pm is None:
            raise FatalSetupError(f"Unsupported distro for automatic git installation: {profile.distro_id}")
        logger.info("Installing Git...")
        install_packages(ctx.runner, pm, ["git"])
        logger.info("Git installed")

    def _ensure_key(self, ctx: SetupContext) -> KeyPair:
        cfg = ctx.config
        key = KeyPair.at(cfg.ssh_dir, cfg.key_name)
        if key.exists():
            # Existing keys are used as-is: no rotation, no validation.
            logger.info("SSH key already exists at %s", key.private_key_path)
            return key

        email = cfg.email or ctx.prompter.ask_text("Enter your GitHub email")
        if not email:
            raise FatalSetupError("An email is required to generate an SSH key")
        ctx.email = email

        logger.info("Generating new SSH key...")
        key = KeyPair.at(cfg.ssh_dir, cfg.key_name, comment=email)
        generate_key_pair(ctx.runner, key)
        logger.info("SSH key generated at %s", key.private_key_path)
        return key

    def _show_public_key(self, ctx: SetupContext, key: KeyPair) -> None:
        if key.public_key_path.exists():
            public_key = key.public_key_path.read_text(encoding="utf-8").strip()
        else:
            public_key = f"(not available: {key.public_key_path})"
        logger.info("Your SSH public key:\n%s", public_key)
        logger.info("Add this key to your account: %s", ctx.config.keys_url)
        ctx.prompter.pause("Press Enter after adding the key to GitHub...")

    def _verify_connection(self, ctx: SetupContext) -> None:
        host = ctx.config.git_host
        logger.info("Testing SSH connection to %s...", host)
        if probe_git_host(ctx.runner, host):
            logger.info("SSH connection to %s verified", host)
            return

        logger.error("SSH authentication to %s failed", host)
        logger.info("Please verify:")
        logger.info("  1. You added the public key to %s", ctx.config.keys_url)
        logger.info("  2. You selected the correct account")
        if not ctx.prompter.confirm("Continue anyway? (not recommended)"):
            raise FatalSetupError(f"Aborted: SSH authentication to {host} failed")

    def _offer_backup(self, ctx: SetupContext, key: KeyPair) -> None:
        if not ctx.prompter.confirm("Create a backup of your SSH keys?"):
            return
        archive = ctx.home / f"ssh_key_backup_{ctx.date_stamp}.tar.gz"
        if ctx.dry_run:
            logger.info("Would archive %s to %s", key.private_key_path, archive)
            return
        archive_key_pair(key, archive)
        logger.info("Backup created at %s", archive)
        logger.info("Store this backup in a secure location!")

    def run(self, ctx: SetupContext) -> None:
        self._ensure_git(ctx)
        key = self._ensure_key(ctx)

        logger.info("Starting SSH agent and adding key...")
        add_key_to_agent(ctx.runner, key)

        self._show_public_key(ctx, key)
        self._verify_connection(ctx)

        if ctx.email:
            set_global_identity(ctx.runner, name=ctx.config.github_user, email=ctx.email)
            logger.info("Git global config set (user: %s, email: %s)", ctx.config.github_user, ctx.email)

        self._offer_backup(ctx, key)
