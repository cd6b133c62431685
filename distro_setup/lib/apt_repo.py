from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from .command import CommandRunner

if TYPE_CHECKING:
    from .pkg import PackageManager

logger = logging.getLogger(__name__)

MICROSOFT_KEY_URL = "https://packages.microsoft.com/keys/microsoft.asc"
MICROSOFT_KEYRING = "/etc/apt/keyrings/packages.microsoft.gpg"
VSCODE_LIST = "/etc/apt/sources.list.d/vscode.list"
VSCODE_SOURCE = (
    f"deb [arch=amd64,arm64,armhf signed-by={MICROSOFT_KEYRING}] "
    "https://packages.microsoft.com/repos/code stable main"
)


def add_signed_repo(
    runner: CommandRunner,
    *,
    key_url: str,
    keyring_path: str,
    source_line: str,
    list_path: str,
) -> None:
    """Register a third-party apt repository with its own signing key.

    The armored key is fetched and dearmored in a scratch directory, installed
    root-owned with mode 0644, and the source line is written with sudo tee.
    """

    with tempfile.TemporaryDirectory(prefix="distro-setup-") as tmp:
        armored = Path(tmp) / "key.asc"
        dearmored = Path(tmp) / "key.gpg"
        runner.run(["wget", "-qO", str(armored), key_url], check=True)
        runner.run(["gpg", "--dearmor", "--yes", "-o", str(dearmored), str(armored)], check=True)
        runner.sudo(
            ["install", "-D", "-o", "root", "-g", "root", "-m", "644", str(dearmored), keyring_path],
            check=True,
        )

    runner.sudo(["tee", list_path], input_text=source_line + "\n", check=True)
    logger.info("Configured apt repo: %s", list_path)


def install_vscode_apt(runner: CommandRunner, pm: "PackageManager") -> None:
    if runner.which("code"):
        logger.info("VSCode already installed")
        return

    logger.info("Installing Visual Studio Code...")
    add_signed_repo(
        runner,
        key_url=MICROSOFT_KEY_URL,
        keyring_path=MICROSOFT_KEYRING,
        source_line=VSCODE_SOURCE,
        list_path=VSCODE_LIST,
    )
    if pm.update:
        runner.sudo(list(pm.update), check=True)
    runner.sudo([*pm.install, "code"], check=True)
    logger.info("VSCode installed")
