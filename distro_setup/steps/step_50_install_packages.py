from __future__ import annotations

import logging

from ..context import SetupContext
from ..errors import StepFailed
from ..lib.pkg import install_packages, resolve_package_manager, run_extras

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "50_install_packages"
    title = "Installing essential applications"
    confirm_prompt = "Install essential applications?"

    def run(self, ctx: SetupContext) -> None:
        profile = ctx.require_profile()
        pm = resolve_package_manager(profile.distro_id, profile.id_like)
        if pm is None:
            raise StepFailed(f"Unsupported distribution for automatic package installation: {profile.distro_id}")

        logger.info("Installing %d packages via %s (%s family)", len(pm.packages), pm.install[0], pm.family)
        install_packages(ctx.runner, pm, pm.packages)
        run_extras(ctx.runner, pm)
        logger.info("All applications installed successfully")
