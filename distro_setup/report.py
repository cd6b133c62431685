from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from .context import SetupContext
from .pipeline import PipelineResult

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def build_summary(
    ctx: SetupContext,
    result: PipelineResult,
    errors: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    profile = asdict(ctx.profile) if ctx.profile else None
    if profile:
        profile["id_like"] = list(profile["id_like"])
    return {
        "started_at": ctx.started_at.isoformat(timespec="seconds"),
        "profile": profile,
        "dry_run": ctx.dry_run,
        "paths": {
            "log": ctx.log_path,
            "repo_dir": str(ctx.config.repo_dir),
        },
        "ran_steps": list(result.ran_steps),
        "skipped_steps": list(result.skipped_steps),
        "failed_steps": dict(result.failed_steps),
        "errors": list(errors or []),
    }


def save_summary(path: str, summary: Dict[str, Any]) -> None:
    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)

    fmt = _detect_format(p)
    if fmt in {"yaml", "yml"}:
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("YAML summary requested but PyYAML is not available.") from e
        p.write_text(yaml.safe_dump(summary, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(summary, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.info("Run summary written to %s", p)


def print_completion(ctx: SetupContext, result: PipelineResult) -> None:
    if result.failed_steps:
        logger.warning("Setup finished with errors in: %s", ", ".join(result.failed_steps))
    else:
        logger.info("Setup complete! Your system is now configured and ready to use.")
    if result.skipped_steps:
        logger.info("Skipped: %s", ", ".join(result.skipped_steps))
    logger.info("Setup log saved to: %s", ctx.log_path)
    logger.info("Repository location: %s", ctx.config.repo_dir)
