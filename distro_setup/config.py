from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .lib.manifests import load_yaml_file

DEFAULT_GITHUB_USER = "EiadurRahman"
DEFAULT_REPO_NAME = "pc-backups"
DEFAULT_GIT_HOST = "github.com"


def _expand(value: Any) -> Path:
    return Path(str(value)).expanduser()


@dataclass(frozen=True)
class SetupConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def github_user(self) -> str:
        return str(self.raw.get("github_user") or DEFAULT_GITHUB_USER)

    @property
    def repo_name(self) -> str:
        return str(self.raw.get("repo_name") or DEFAULT_REPO_NAME)

    @property
    def git_host(self) -> str:
        return str(self.raw.get("git_host") or DEFAULT_GIT_HOST)

    @property
    def repo_url(self) -> str:
        url = self.raw.get("repo_url")
        if url:
            return str(url)
        return f"git@{self.git_host}:{self.github_user}/{self.repo_name}.git"

    @property
    def repo_web_url(self) -> str:
        return f"https://{self.git_host}/{self.github_user}/{self.repo_name}"

    @property
    def repo_dir(self) -> Path:
        explicit = self.raw.get("repo_dir")
        if explicit:
            return _expand(explicit)
        return Path.home() / self.repo_name

    @property
    def keys_url(self) -> str:
        return str(self.raw.get("keys_url") or f"https://{self.git_host}/settings/keys")

    @property
    def ssh_dir(self) -> Path:
        return _expand(self.raw.get("ssh_dir") or "~/.ssh")

    @property
    def key_name(self) -> str:
        return str(self.raw.get("key_name") or "id_ed25519")

    @property
    def email(self) -> Optional[str]:
        value = self.raw.get("email")
        return str(value) if value else None

    @property
    def grub_source(self) -> Path:
        explicit = self.raw.get("grub_source")
        if explicit:
            return _expand(explicit)
        return self.repo_dir / "grub"

    @property
    def grub_destination(self) -> Path:
        return _expand(self.raw.get("grub_destination") or "/etc/default/grub")

    @property
    def os_release_path(self) -> Path:
        return _expand(self.raw.get("os_release_path") or "/etc/os-release")

    @property
    def pull_branches(self) -> List[str]:
        return [str(b) for b in (self.raw.get("pull_branches") or ["main", "master"])]

    @property
    def log_dir(self) -> Path:
        return _expand(self.raw.get("log_dir") or "~")

    def with_overrides(self, **overrides: Any) -> "SetupConfig":
        merged = dict(self.raw)
        merged.update({k: v for k, v in overrides.items() if v is not None})
        return SetupConfig(raw=merged)


def load_setup_config(path: Optional[str]) -> SetupConfig:
    if not path:
        return SetupConfig()

    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("setup config must be YAML")

    return SetupConfig(raw=load_yaml_file(p))
