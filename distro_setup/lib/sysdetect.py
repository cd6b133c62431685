from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path
from typing import Dict, Optional

from .command import CommandRunner

logger = logging.getLogger(__name__)


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse os-release(5) content into a dict.

    Values may be quoted; comments and blank lines are ignored.
    """

    fields: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value.strip("\"'")]
        fields[key.strip()] = parts[0] if parts else ""
    return fields


def read_os_release(path: Path) -> Optional[Dict[str, str]]:
    if not path.is_file():
        return None
    return parse_os_release(path.read_text(encoding="utf-8", errors="ignore"))


def is_superuser() -> bool:
    return os.geteuid() == 0


def ensure_sudo(runner: CommandRunner) -> bool:
    """Make sure sudo works for the rest of the run.

    Uses the cached credential when there is one, otherwise asks for the
    password once via `sudo -v`.
    """

    if runner.run(["sudo", "-n", "true"]).ok:
        return True

    logger.info("This setup requires sudo access. You may be prompted for your password.")
    return runner.run(["sudo", "-v"], interactive=True).ok
