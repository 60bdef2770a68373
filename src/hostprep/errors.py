"""Error kinds shared by the registry, runner, and providers."""
from __future__ import annotations


class GuardError(RuntimeError):
    """Raised when the host cannot be provisioned at all.

    Guard failures are fatal: they abort the run before (or between) actions
    and the CLI exits non-zero.
    """


class InvalidSelection(ValueError):
    """Raised when operator input does not resolve to a menu entry."""


class StepError(RuntimeError):
    """Raised when a single sub-step fails.

    Step failures are reported and recorded but never abort sibling steps or
    later actions.
    """


__all__ = ["GuardError", "InvalidSelection", "StepError"]
