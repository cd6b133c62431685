from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from distro_setup.config import SetupConfig  # noqa: E402
from distro_setup.context import SetupContext, SystemProfile  # noqa: E402
from distro_setup.lib.command import CmdResult, CommandError  # noqa: E402
from distro_setup.prompts import ScriptedPrompter  # noqa: E402


Response = Tuple[int, str, str]


class FakeRunner:
    """Records commands instead of running them.

    `cp` is carried out for real (with or without sudo) so file effects can be
    asserted; every other command answers from `responses`, keyed by argv
    prefix, or succeeds with empty output.
    """

    def __init__(self, *, tools: Sequence[str] = (), dry_run: bool = False):
        self.dry_run = dry_run
        self.tools = set(tools)
        self.calls: List[List[str]] = []
        self.responses: List[Tuple[Tuple[str, ...], Callable[[], Response]]] = []

    def respond(self, prefix: Sequence[str], returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.responses.insert(0, (tuple(prefix), lambda: (returncode, stdout, stderr)))

    def run(self, argv, *, check=False, env=None, cwd=None, input_text=None, interactive=False) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        is_sudo_wrapped = len(argv) > 1 and argv[0] == "sudo" and not argv[1].startswith("-")
        effective = argv[1:] if is_sudo_wrapped else argv

        rc, out, err = 0, "", ""
        for prefix, fn in self.responses:
            if tuple(argv[: len(prefix)]) == prefix or tuple(effective[: len(prefix)]) == prefix:
                rc, out, err = fn()
                break
        else:
            if effective and effective[0] == "cp":
                shutil.copy2(effective[1], effective[2])

        result = CmdResult(argv=argv, returncode=rc, stdout=out, stderr=err)
        if check and rc != 0:
            raise CommandError(result)
        return result

    def sudo(self, argv, **kwargs) -> CmdResult:
        return self.run(["sudo", *argv], **kwargs)

    def which(self, name: str) -> Optional[str]:
        return f"/usr/bin/{name}" if name in self.tools else None

    def commands(self, name: str) -> List[List[str]]:
        """Calls whose program (ignoring a sudo prefix) is `name`."""
        found = []
        for argv in self.calls:
            prog = argv[1] if argv[0] == "sudo" and len(argv) > 1 and not argv[1].startswith("-") else argv[0]
            if prog == name:
                found.append(argv)
        return found


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    monkeypatch.setenv("HOME", str(h))
    # setenv first so anything the agent code exports is undone at teardown
    for var in ("SSH_AUTH_SOCK", "SSH_AGENT_PID"):
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    return h


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner(tools=["git"])


@pytest.fixture
def make_ctx(home: Path, runner: FakeRunner) -> Callable[..., SetupContext]:
    def _make(
        answers=(),
        *,
        distro_id: str = "ubuntu",
        id_like: Tuple[str, ...] = (),
        config: Optional[Dict] = None,
        profile: bool = True,
    ) -> SetupContext:
        raw = {
            "ssh_dir": str(home / ".ssh"),
            "repo_dir": str(home / "pc-backups"),
            "grub_destination": str(home / "etc-default-grub"),
        }
        raw.update(config or {})
        ctx = SetupContext(config=SetupConfig(raw=raw), prompter=ScriptedPrompter(answers), runner=runner)
        if profile:
            ctx.profile = SystemProfile(
                distro_name=distro_id.title(),
                distro_id=distro_id,
                id_like=id_like,
                has_sudo=True,
            )
        return ctx

    return _make
