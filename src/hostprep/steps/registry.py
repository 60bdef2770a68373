"""Menu rendering and selection parsing for registered actions."""

from __future__ import annotations

import re
from collections.abc import Sequence

from ..errors import InvalidSelection
from .models import Action, Selection

ALL_LABEL = "ALL"
_MENU_NUMBER = re.compile(r"[0-9]+")


def ensure_unique(actions: Sequence[Action]) -> None:
    """Raise ``ValueError`` when two actions share a name."""
    seen: set[str] = set()
    for action in actions:
        if action.name in seen:
            raise ValueError(f"Duplicate action name '{action.name}'.")
        seen.add(action.name)


def render_menu(actions: Sequence[Action]) -> str:
    """Return the numbered menu: ``0`` runs everything, ``1..N`` one action."""
    lines = [f"0\t{ALL_LABEL}"]
    lines.extend(f"{index}\t{action.name}" for index, action in enumerate(actions, start=1))
    return "\n".join(lines)


def resolve_selection(raw: str | None, action_count: int) -> Selection:
    """Parse operator input into a :class:`Selection`."""
    text = (raw or "").strip()
    if not _MENU_NUMBER.fullmatch(text):
        raise InvalidSelection(f"Invalid operation selected: {text!r}")
    index = int(text)
    if index < 0 or index > action_count:
        raise InvalidSelection(
            f"Invalid operation selected: {index} (expected 0..{action_count})"
        )
    return Selection(index)


__all__ = ["ALL_LABEL", "ensure_unique", "render_menu", "resolve_selection"]
