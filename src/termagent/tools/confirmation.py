from __future__ import annotations

from typing import Callable, Optional

from rich.markup import escape

from ..util.console import console

AskFn = Callable[[str], str]


def _console_ask(description: str) -> str:
    return console.input(f"[yellow]{escape(description)}[/yellow] (y/n): ")


class ConfirmationGate:
    """Interactive yes/no approval for side effects and out-of-tree paths.

    With ``auto_approve`` every request is granted without prompting. The gate
    only decides whether an action may start; it never limits what an approved
    action does.
    """

    def __init__(self, auto_approve: bool = False, ask: Optional[AskFn] = None):
        self.auto_approve = auto_approve
        self.ask = ask or _console_ask

    def confirm(self, description: str) -> bool:
        if self.auto_approve:
            return True
        try:
            resp = self.ask(description)
        except (EOFError, KeyboardInterrupt):
            return False
        return (resp or "").strip().lower() in {"y", "yes"}
