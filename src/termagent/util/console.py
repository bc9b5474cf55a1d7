from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel

console = Console()


def _to_json(payload: Any) -> str:
    try:
        return json.dumps(payload, ensure_ascii=False, indent=2, default=str)
    except (TypeError, ValueError):
        return str(payload)


def debug_panel(enabled: bool, title: str, payload: Any, limit: int = 4000) -> None:
    """Print a diagnostic panel when debug output is enabled."""
    if not enabled:
        return
    text = _to_json(payload)
    if len(text) > limit:
        text = text[:limit] + "\n... (truncated)"
    console.print(Panel.fit(text, title=f"debug: {title}", border_style="dim"))
