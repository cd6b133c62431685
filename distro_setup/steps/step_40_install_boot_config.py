from __future__ import annotations

import logging

from ..context import SetupContext
from ..errors import StepFailed
from ..lib.bootloader import BootConfig, install_boot_config, regenerate_grub
from ..lib.pkg import resolve_package_manager

logger = logging.getLogger(__name__)

DEFAULT_GRUB_REGENERATE = ("update-grub",)


class InstallBootConfigStep:
    step_id = "40_install_boot_config"
    title = "Setting up GRUB configuration"
    confirm_prompt = "Setup GRUB configuration?"

    def run(self, ctx: SetupContext) -> None:
        cfg = ctx.config
        if not cfg.grub_source.is_file():
            logger.warning("GRUB config not found at %s", cfg.grub_source)
            logger.info("Skipping GRUB setup")
            return

        profile = ctx.require_profile()
        pm = resolve_package_manager(profile.distro_id, profile.id_like)
        regenerate = pm.grub_regenerate if pm is not None else DEFAULT_GRUB_REGENERATE

        boot = BootConfig.for_run(cfg.grub_source, cfg.grub_destination, ctx.stamp)
        backup = install_boot_config(ctx.runner, boot)

        # No rollback: the backup is left for the user to restore by hand.
        r = regenerate_grub(ctx.runner, regenerate)
        if not r.ok:
            hint = f"; previous config saved at {backup}" if backup else ""
            raise StepFailed(f"{' '.join(regenerate)} failed ({r.returncode}){hint}")
        logger.info("GRUB configuration updated")
