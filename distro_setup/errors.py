from __future__ import annotations


class SetupError(RuntimeError):
    """Base class for errors the CLI maps to an exit code."""

    exit_code = 1


class FatalSetupError(SetupError):
    """Halts the whole run."""


class StepFailed(SetupError):
    """A stage failed but later stages may still run."""
