"""User interaction for the setup run.

Stages only talk to a Prompter, so the same run can be driven from a terminal,
answered automatically (--assume-yes / --assume-no) or scripted in tests.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, List, Optional, Protocol, Tuple, Union

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    def confirm(self, question: str) -> bool:
        ...

    def ask_text(self, question: str, default: Optional[str] = None) -> str:
        ...

    def pause(self, message: str) -> None:
        ...


class ConsolePrompter:
    """Reads answers from stdin. Only y/Y accepts; anything else declines."""

    def confirm(self, question: str) -> bool:
        try:
            answer = input(f"{question} [y/N]: ")
        except EOFError:
            return False
        return answer.strip() in {"y", "Y"}

    def ask_text(self, question: str, default: Optional[str] = None) -> str:
        suffix = f" [{default}]" if default else ""
        try:
            answer = input(f"{question}{suffix}: ").strip()
        except EOFError:
            answer = ""
        return answer or (default or "")

    def pause(self, message: str) -> None:
        try:
            input(message)
        except EOFError:
            pass


class AutoPrompter:
    """Answers every confirmation the same way without reading stdin."""

    def __init__(self, *, answer: bool):
        self.answer = answer

    def confirm(self, question: str) -> bool:
        logger.info("%s -> %s (non-interactive)", question, "yes" if self.answer else "no")
        return self.answer

    def ask_text(self, question: str, default: Optional[str] = None) -> str:
        # No answer to give; the caller decides whether an empty one is fatal.
        if default is None:
            logger.info("%s -> (no answer, non-interactive)", question)
        return default or ""

    def pause(self, message: str) -> None:
        logger.info("%s (non-interactive, continuing)", message.strip())


Answer = Union[bool, str]


class ScriptedPrompter:
    """Replays a queue of answers and records every question asked."""

    def __init__(self, answers: Iterable[Answer] = (), *, default_confirm: bool = False):
        self._answers = deque(answers)
        self.default_confirm = default_confirm
        self.asked: List[Tuple[str, str]] = []

    def _next(self, kind: str, question: str) -> Optional[Answer]:
        self.asked.append((kind, question))
        if self._answers:
            return self._answers.popleft()
        return None

    def confirm(self, question: str) -> bool:
        answer = self._next("confirm", question)
        if answer is None:
            return self.default_confirm
        if not isinstance(answer, bool):
            raise TypeError(f"Expected a yes/no answer for {question!r}, got {answer!r}")
        return answer

    def ask_text(self, question: str, default: Optional[str] = None) -> str:
        answer = self._next("text", question)
        if answer is None:
            if default is None:
                raise ValueError(f"No scripted answer for {question!r}")
            return default
        return str(answer)

    def pause(self, message: str) -> None:
        self.asked.append(("pause", message))

    def questions(self, kind: Optional[str] = None) -> List[str]:
        return [q for k, q in self.asked if kind is None or k == kind]
