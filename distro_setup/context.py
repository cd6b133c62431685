from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from .config import SetupConfig
from .errors import FatalSetupError
from .lib.command import CommandRunner
from .prompts import Prompter


@dataclass(frozen=True)
class SystemProfile:
    distro_name: str
    distro_id: str
    id_like: Tuple[str, ...] = ()
    is_privileged_user: bool = False
    has_sudo: bool = False


@dataclass
class SetupContext:
    """Everything the stages share for one run."""

    config: SetupConfig
    prompter: Prompter
    runner: CommandRunner
    started_at: datetime = field(default_factory=datetime.now)
    log_path: Optional[str] = None
    profile: Optional[SystemProfile] = None
    email: Optional[str] = None

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    @property
    def stamp(self) -> str:
        return self.started_at.strftime("%Y-%m-%d-%H%M%S")

    @property
    def date_stamp(self) -> str:
        return self.started_at.strftime("%Y-%m-%d")

    @property
    def home(self) -> Path:
        return Path.home()

    def require_profile(self) -> SystemProfile:
        if self.profile is None:
            raise FatalSetupError("System detection has not run; cannot continue")
        return self.profile
