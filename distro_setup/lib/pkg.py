from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .apt_repo import install_vscode_apt
from .command import CommandRunner
from .manifests import load_package_managers_manifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManager:
    family: str
    distro_ids: Tuple[str, ...]
    update: Tuple[str, ...]
    install: Tuple[str, ...]
    packages: Tuple[str, ...]
    grub_regenerate: Tuple[str, ...] = ("update-grub",)
    extras: Tuple[str, ...] = ()

    @classmethod
    def from_manifest(cls, family: str, raw: Dict[str, Any]) -> "PackageManager":
        def _strs(key: str) -> Tuple[str, ...]:
            value = raw.get(key) or []
            if not isinstance(value, list):
                raise RuntimeError(f"package_managers.yaml: {family}.{key} must be a list")
            return tuple(str(v).strip() for v in value if str(v).strip())

        install = _strs("install")
        if not install:
            raise RuntimeError(f"package_managers.yaml: {family}.install is required")

        return cls(
            family=family,
            distro_ids=tuple(d.lower() for d in _strs("distro_ids")),
            update=_strs("update"),
            install=install,
            packages=_strs("packages"),
            grub_regenerate=_strs("grub_regenerate") or ("update-grub",),
            extras=_strs("extras"),
        )


def load_package_managers(manifest: Optional[Dict[str, Any]] = None) -> List[PackageManager]:
    manifest = manifest if manifest is not None else load_package_managers_manifest()
    families = manifest.get("families") or {}
    if not isinstance(families, dict):
        raise RuntimeError("package_managers.yaml: families must be a mapping")
    return [PackageManager.from_manifest(str(name), raw or {}) for name, raw in families.items()]


def resolve_package_manager(
    distro_id: str,
    id_like: Iterable[str] = (),
    *,
    managers: Optional[Sequence[PackageManager]] = None,
) -> Optional[PackageManager]:
    """Pick the table row for a distro: exact ID first, then ID_LIKE in order."""

    table = list(managers) if managers is not None else load_package_managers()
    for candidate in [distro_id, *id_like]:
        candidate = candidate.lower()
        for pm in table:
            if candidate in pm.distro_ids:
                return pm
    return None


def install_packages(runner: CommandRunner, pm: PackageManager, packages: Sequence[str]) -> None:
    """Refresh the index (when the family needs a separate step) and install."""

    if not packages:
        return
    if pm.update:
        runner.sudo(list(pm.update), check=True)
    runner.sudo([*pm.install, *packages], check=True)


ExtraStep = Callable[[CommandRunner, PackageManager], None]

EXTRA_STEPS: Dict[str, ExtraStep] = {
    "vscode": install_vscode_apt,
}


def run_extras(runner: CommandRunner, pm: PackageManager) -> None:
    for name in pm.extras:
        fn = EXTRA_STEPS.get(name)
        if fn is None:
            raise RuntimeError(f"Unknown extra step {name!r} for family {pm.family}")
        logger.info("Running extra step %s (%s)", name, pm.family)
        fn(runner, pm)
