from __future__ import annotations

from pathlib import Path
from typing import Any, Dict


def _manifests_dir() -> Path:
    # distro_setup/lib/manifests.py -> distro_setup/manifests
    return Path(__file__).resolve().parents[1] / "manifests"


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load a YAML document that must be a mapping."""
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML required to load manifests and config") from e

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {path}")
    return data


def load_manifest(name: str) -> Dict[str, Any]:
    return load_yaml_file(_manifests_dir() / name)


def load_package_managers_manifest() -> Dict[str, Any]:
    return load_manifest("package_managers.yaml")
