from __future__ import annotations

import argparse
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import yaml

from .config import SetupConfig, load_setup_config
from .context import SetupContext
from .errors import SetupError
from .lib.command import CommandRunner
from .logging_utils import configure_logging, default_log_path
from .pipeline import PipelineResult, run_pipeline
from .prompts import AutoPrompter, ConsolePrompter, Prompter
from .report import build_summary, print_completion, save_summary
from .steps import (
    DetectSystemStep,
    InstallBootConfigStep,
    InstallPackagesStep,
    SetupCredentialsStep,
    SyncRepositoryStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        DetectSystemStep(),
        SetupCredentialsStep(),
        SyncRepositoryStep(),
        InstallBootConfigStep(),
        InstallPackagesStep(),
    ]


def run(
    *,
    config: Optional[SetupConfig] = None,
    log_path: Optional[str] = None,
    summary_path: Optional[str] = None,
    prompter: Optional[Prompter] = None,
    runner: Optional[CommandRunner] = None,
    dry_run: bool = False,
) -> PipelineResult:
    """Run every stage once, in order, and report."""

    config = config or SetupConfig()
    started_at = datetime.now()
    actual_log_path = configure_logging(log_path or default_log_path(config.log_dir, started_at))

    ctx = SetupContext(
        config=config,
        prompter=prompter or ConsolePrompter(),
        runner=runner or CommandRunner(dry_run=dry_run),
        started_at=started_at,
        log_path=actual_log_path,
    )
    result = PipelineResult()
    errors: List[Dict[str, Any]] = []

    try:
        run_pipeline(ctx=ctx, steps=build_steps(), result=result)
        print_completion(ctx, result)
        return result
    except Exception as e:
        logger.exception("Error during step %s: %s. Check %s", result.current_step, e, actual_log_path)
        errors.append({"step": result.current_step, "error": str(e)})
        raise
    finally:
        if summary_path:
            save_summary(summary_path, build_summary(ctx, result, errors))


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="distro-setup")
    p.add_argument("--config", default=None, help="Path to a YAML setup config")
    p.add_argument("--log", default=None, help="Path to the run log (default: ~/setup-<timestamp>.log)")
    p.add_argument("--summary", default=None, help="Write a run summary (json|yaml)")
    p.add_argument("--email", default=None, help="Email for a new SSH key and git config")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    answers = p.add_mutually_exclusive_group()
    answers.add_argument("--assume-yes", action="store_true", help="Answer yes to every confirmation")
    answers.add_argument("--assume-no", action="store_true", help="Answer no to every confirmation")

    args = p.parse_args(argv)

    prompter: Prompter
    if args.assume_yes:
        prompter = AutoPrompter(answer=True)
    elif args.assume_no:
        prompter = AutoPrompter(answer=False)
    else:
        prompter = ConsolePrompter()

    try:
        config = load_setup_config(args.config).with_overrides(email=args.email)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Cannot load setup config %s: %s", args.config, e)
        return 1

    try:
        run(
            config=config,
            log_path=args.log,
            summary_path=args.summary,
            prompter=prompter,
            dry_run=bool(args.dry_run),
        )
    except SetupError as e:
        return e.exit_code
    except KeyboardInterrupt:
        logger.warning("Interrupted; the current stage may be left half-done")
        return 130
    return 0
