from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence

from .context import SetupContext
from .errors import StepFailed

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single provisioning stage.

    `confirm_prompt` of None means the stage always runs.
    """

    step_id: str
    title: str
    confirm_prompt: Optional[str]

    def run(self, ctx: SetupContext) -> None:
        ...


@dataclass
class PipelineResult:
    ran_steps: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)
    failed_steps: Dict[str, str] = field(default_factory=dict)
    current_step: Optional[str] = None


def run_pipeline(
    *,
    ctx: SetupContext,
    steps: Sequence[Step],
    result: Optional[PipelineResult] = None,
) -> PipelineResult:
    """Run stages in order, asking before each gated one.

    StepFailed is reported and the run moves on; any other exception stops it
    with `result.current_step` pointing at the stage that raised.
    """

    result = result if result is not None else PipelineResult()

    for step in steps:
        result.current_step = step.step_id

        if step.confirm_prompt and not ctx.prompter.confirm(step.confirm_prompt):
            logger.info("Skipping %s", step.title)
            result.skipped_steps.append(step.step_id)
            continue

        logger.info("==> %s", step.title)
        try:
            step.run(ctx)
        except StepFailed as e:
            logger.error("%s failed: %s", step.title, e)
            result.failed_steps[step.step_id] = str(e)
            continue
        result.ran_steps.append(step.step_id)

    result.current_step = None
    return result
