from __future__ import annotations

import logging
import os
import re
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from .command import CommandRunner

logger = logging.getLogger(__name__)

AUTH_SUCCESS_MARKER = "successfully authenticated"

_AGENT_VAR_RE = re.compile(r"^(SSH_AUTH_SOCK|SSH_AGENT_PID)=([^;]+);", re.MULTILINE)


@dataclass(frozen=True)
class KeyPair:
    private_key_path: Path
    public_key_path: Path
    comment: str = ""

    @classmethod
    def at(cls, ssh_dir: Path, key_name: str, comment: str = "") -> "KeyPair":
        private = ssh_dir / key_name
        return cls(private_key_path=private, public_key_path=private.with_name(private.name + ".pub"), comment=comment)

    def exists(self) -> bool:
        return self.private_key_path.exists()


def generate_key_pair(runner: CommandRunner, key: KeyPair) -> None:
    """Create an ed25519 key pair with no passphrase.

    The containing directory is created and restricted to the owner.
    """

    ssh_dir = key.private_key_path.parent
    if not runner.dry_run:
        ssh_dir.mkdir(parents=True, exist_ok=True)
        ssh_dir.chmod(0o700)
    runner.run(
        ["ssh-keygen", "-t", "ed25519", "-C", key.comment, "-f", str(key.private_key_path), "-N", ""],
        check=True,
    )


def parse_agent_env(output: str) -> Dict[str, str]:
    return {m.group(1): m.group(2) for m in _AGENT_VAR_RE.finditer(output)}


def ensure_agent(runner: CommandRunner) -> bool:
    """Reuse a running agent or start one and export its variables."""

    sock = os.environ.get("SSH_AUTH_SOCK")
    if sock and Path(sock).exists():
        logger.debug("Reusing ssh-agent at %s", sock)
        return True

    r = runner.run(["ssh-agent", "-s"])
    env = parse_agent_env(r.stdout) if r.ok else {}
    if "SSH_AUTH_SOCK" not in env:
        logger.debug("ssh-agent did not start (rc=%s)", r.returncode)
        return False
    os.environ.update(env)
    return True


def add_key_to_agent(runner: CommandRunner, key: KeyPair) -> bool:
    """Best effort; failures are only visible at debug level."""

    if not ensure_agent(runner):
        return False
    r = runner.run(["ssh-add", str(key.private_key_path)])
    if not r.ok:
        logger.debug("ssh-add failed (rc=%s)", r.returncode)
    return r.ok


def probe_git_host(runner: CommandRunner, host: str) -> bool:
    """Authenticated SSH handshake against the Git host.

    The host refuses a shell and exits 1 even when authentication worked, so
    success is judged from the greeting only.
    """

    r = runner.run(["ssh", "-T", f"git@{host}"])
    return AUTH_SUCCESS_MARKER in r.output


def archive_key_pair(key: KeyPair, archive_path: Path) -> Path:
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(archive_path, "w:gz") as tar:
        for p in (key.private_key_path, key.public_key_path):
            tar.add(str(p), arcname=p.name)
    archive_path.chmod(0o600)
    return archive_path
