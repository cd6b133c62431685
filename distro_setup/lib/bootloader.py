from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .command import CmdResult, CommandRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BootConfig:
    source_path: Path
    destination_path: Path
    backup_path: Path

    @classmethod
    def for_run(cls, source: Path, destination: Path, stamp: str) -> "BootConfig":
        return cls(
            source_path=source,
            destination_path=destination,
            backup_path=destination.with_name(f"{destination.name}.backup.{stamp}"),
        )


def install_boot_config(runner: CommandRunner, cfg: BootConfig) -> Optional[Path]:
    """Back up the current destination (if any) and copy the source over it.

    Returns the backup path when a backup was made.
    """

    backup: Optional[Path] = None
    if cfg.destination_path.exists():
        logger.info("Backing up existing GRUB config...")
        runner.sudo(["cp", str(cfg.destination_path), str(cfg.backup_path)], check=True)
        backup = cfg.backup_path
        logger.info("Backup created at %s", backup)

    logger.info("Installing new GRUB configuration...")
    runner.sudo(["cp", str(cfg.source_path), str(cfg.destination_path)], check=True)
    return backup


def regenerate_grub(runner: CommandRunner, argv: Sequence[str]) -> CmdResult:
    logger.info("Updating GRUB bootloader...")
    return runner.sudo(list(argv))
