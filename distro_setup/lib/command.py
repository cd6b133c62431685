from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from ..errors import FatalSetupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return (self.stdout or "") + (self.stderr or "")


class CommandError(FatalSetupError):
    """A checked command exited non-zero."""

    def __init__(self, result: CmdResult):
        self.result = result
        super().__init__(
            f"Command failed ({result.returncode}): {_fmt_argv(result.argv)}\n{result.stderr}".rstrip()
        )


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    interactive: bool = False,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr unless interactive (sudo password prompts).
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    pipe = None if interactive else subprocess.PIPE
    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            stdout=pipe,
            stderr=pipe,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except FileNotFoundError as e:
        # Reported like a shell does for a missing program.
        logger.debug("Command not found: %s", argv_list[0])
        result = CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))
        if check:
            raise CommandError(result) from e
        return result

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    result = CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout or "", stderr=p.stderr or "")
    if check and not result.ok:
        raise CommandError(result)
    return result


class CommandRunner:
    """Runs external tools for the setup stages.

    Stages never call subprocess directly; they go through a runner so that a
    recording double can stand in for it.
    """

    def __init__(self, *, dry_run: bool = False, sudo_argv: Sequence[str] = ("sudo",)):
        self.dry_run = dry_run
        self.sudo_argv = list(sudo_argv)

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = False,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
        input_text: str | None = None,
        interactive: bool = False,
    ) -> CmdResult:
        return run_cmd(
            argv,
            check=check,
            env=env,
            cwd=cwd,
            input_text=input_text,
            interactive=interactive,
            dry_run=self.dry_run,
        )

    def sudo(self, argv: Sequence[str], **kwargs) -> CmdResult:
        return self.run([*self.sudo_argv, *argv], **kwargs)

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)
