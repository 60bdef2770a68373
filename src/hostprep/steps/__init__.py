"""Action registry, selection and runner."""

from __future__ import annotations

from .context import ActionContext
from .engine import execute, selected_actions
from .models import (
    ALL,
    Action,
    ActionBody,
    ActionResult,
    ExecutionResult,
    Selection,
    StepResult,
    StepStatus,
)
from .registry import ALL_LABEL, ensure_unique, render_menu, resolve_selection

__all__ = [
    "ALL",
    "ALL_LABEL",
    "Action",
    "ActionBody",
    "ActionContext",
    "ActionResult",
    "ExecutionResult",
    "Selection",
    "StepResult",
    "StepStatus",
    "ensure_unique",
    "execute",
    "render_menu",
    "resolve_selection",
    "selected_actions",
]
