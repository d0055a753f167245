"""Host ports for running without an attached editor."""

from __future__ import annotations

from collections.abc import Callable

import click

from tabstash.ports import LayoutError


class DetachedHost:
    """Layout and document ports for the CLI.

    Nothing is ever open and layout calls fail, so registry operations that
    need the editor (save, open, restore) degrade to logged no-ops while
    persistence, import and export work normally.
    """

    def capture(self) -> bytes:
        raise LayoutError("No editor attached")

    def replay(self, blob: bytes) -> None:
        raise LayoutError("No editor attached")

    def open_documents(self) -> list[str]:
        return []

    def open(self, path: str) -> None:
        raise LayoutError(f"No editor attached, cannot open {path}")

    def close_all(self, predicate: Callable[[str], bool]) -> None:
        return None


class ConsolePrompt:
    """PromptPort answering through ``click.confirm``, or with a fixed answer."""

    def __init__(self, answer: bool | None = None) -> None:
        self._answer = answer

    def confirm_delete(self, group_name: str) -> bool:
        return self._ask(f"Delete group {group_name!r}?")

    def confirm_translate(self, original_key: str, target_key: str) -> bool:
        return self._ask(f"Groups were exported from {original_key}. Rewrite their paths for {target_key}?")

    def _ask(self, question: str) -> bool:
        if self._answer is not None:
            return self._answer
        return click.confirm(question, default=False)
