from __future__ import annotations

import logging

from ..context import SetupContext, SystemProfile
from ..errors import FatalSetupError
from ..lib.sysdetect import ensure_sudo, is_superuser, read_os_release

logger = logging.getLogger(__name__)


class DetectSystemStep:
    step_id = "10_detect_system"
    title = "Detecting system information"
    confirm_prompt = None

    def run(self, ctx: SetupContext) -> None:
        path = ctx.config.os_release_path
        fields = read_os_release(path)
        if fields is None:
            raise FatalSetupError(f"Cannot detect Linux distribution ({path} not found)")

        distro_id = (fields.get("ID") or "").lower()
        distro_name = fields.get("NAME") or fields.get("PRETTY_NAME") or distro_id or "Linux"
        id_like = tuple(t.lower() for t in (fields.get("ID_LIKE") or "").split())
        logger.info("Detected: %s (id=%s%s)", distro_name, distro_id, f", like={' '.join(id_like)}" if id_like else "")

        if is_superuser():
            raise FatalSetupError("Please don't run this setup as root (no sudo)")

        if not ensure_sudo(ctx.runner):
            raise FatalSetupError("sudo access is required to continue")

        ctx.profile = SystemProfile(
            distro_name=distro_name,
            distro_id=distro_id,
            id_like=id_like,
            is_privileged_user=False,
            has_sudo=True,
        )
        logger.info("System checks passed")
