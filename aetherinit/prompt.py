"""Question-asking collaborators for the interactive parts of setup."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Protocol

from rich.console import Console
from rich.prompt import Prompt as RichPrompt


class Prompt(Protocol):
    async def ask(self, question: str) -> str:
        """Ask a question and return the trimmed answer."""
        ...


def is_yes(answer: str) -> bool:
    return answer.strip().lower() in ("y", "yes")


class ConsolePrompt:
    """Reads answers from the terminal without blocking the event loop."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    async def ask(self, question: str) -> str:
        # rich adds its own ": " suffix
        answer = await asyncio.to_thread(
            RichPrompt.ask,
            question.rstrip(": "),
            console=self.console,
            default="",
            show_default=False,
        )
        return (answer or "").strip()


class ScriptedPrompt:
    """Replays canned answers in order, then answers with empty strings."""

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self._answers = list(answers)
        self.questions: list[str] = []

    async def ask(self, question: str) -> str:
        self.questions.append(question)
        if not self._answers:
            return ""
        return self._answers.pop(0).strip()
