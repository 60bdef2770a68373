"""Yes/no confirmations gating individual steps.

The decision (:func:`parse_confirmation`) is a pure function of the answer
text and the step default. Reading the answer is delegated to a confirmer:
:class:`PromptConfirmer` asks the operator on the console while
:class:`ScriptedConfirmer` replays canned answers.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from rich.console import Console
from rich.markup import escape


class Confirmer(Protocol):
    """Callable returning whether the step described by *prompt* may proceed."""

    def __call__(self, prompt: str, *, default: bool) -> bool: ...


def parse_confirmation(answer: str | None, *, default: bool) -> bool:
    """Return the decision for *answer*.

    An empty answer takes *default*; anything starting with ``y`` or ``Y`` is
    a yes and everything else is a no.
    """
    text = (answer or "").strip()
    if not text:
        return default
    return text[0] in "yY"


def prompt_suffix(default: bool) -> str:
    """Return the ``[Y/n]`` / ``[y/N]`` hint for *default*."""
    return "[Y/n]" if default else "[y/N]"


class PromptConfirmer:
    """Ask the operator through a rich console."""

    def __init__(self, console: Console) -> None:
        """Store the console used for prompting."""
        self._console = console

    def __call__(self, prompt: str, *, default: bool) -> bool:
        """Prompt and parse the operator's answer."""
        try:
            answer = self._console.input(escape(f"{prompt} {prompt_suffix(default)}? "))
        except EOFError:
            return default
        return parse_confirmation(answer, default=default)


class ScriptedConfirmer:
    """Replay canned answers; falls back to the step default when exhausted."""

    def __init__(self, answers: Iterable[str] = ()) -> None:
        """Queue *answers* in the order they will be consumed."""
        self._answers = list(answers)
        self.asked: list[tuple[str, bool]] = []

    def __call__(self, prompt: str, *, default: bool) -> bool:
        """Consume the next answer for *prompt*."""
        self.asked.append((prompt, default))
        answer = self._answers.pop(0) if self._answers else ""
        return parse_confirmation(answer, default=default)


__all__ = [
    "Confirmer",
    "PromptConfirmer",
    "ScriptedConfirmer",
    "parse_confirmation",
    "prompt_suffix",
]
