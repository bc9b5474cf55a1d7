from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Sequence

import yaml

from ..session.models import ConversationStep, ModelError, ModelEvent, TextFragment, ToolInvocation


class ScriptedModelClient:
    """Plays back a fixed list of model steps, one per ``step`` call.

    Once the script runs out every further step is empty, which ends the turn.
    ``seen_results`` records how many tool results the conversation held at
    each step, so callers can check what the model had observed.
    """

    def __init__(self, steps: Sequence[Sequence[ModelEvent]]):
        self._steps = [list(s) for s in steps]
        self._next = 0
        self.seen_results: list[int] = []

    def step(self, conversation: ConversationStep) -> Iterator[ModelEvent]:
        self.seen_results.append(len(conversation.results()))
        if self._next >= len(self._steps):
            return iter(())
        events = self._steps[self._next]
        self._next += 1
        return iter(events)


def _parse_event(obj: Any) -> ModelEvent:
    if isinstance(obj, str):
        return TextFragment(obj)
    if not isinstance(obj, dict):
        raise ValueError(f"Script event must be a mapping or string, got {type(obj).__name__}")
    if "text" in obj:
        return TextFragment(str(obj["text"]))
    if "tool" in obj:
        args = obj.get("args") or {}
        if not isinstance(args, dict):
            raise ValueError(f"Script args for {obj['tool']} must be a mapping.")
        return ToolInvocation(id=str(obj.get("id") or ""), name=str(obj["tool"]), arguments=args)
    if "error" in obj:
        return ModelError(str(obj["error"]))
    raise ValueError(f"Unrecognised script event: {obj!r}")


def load_script(path: str | Path) -> ScriptedModelClient:
    """Load a YAML (or JSON) script: ``steps`` is a list of event lists."""
    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise FileNotFoundError(f"Script not found: {p}")
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    steps = data.get("steps") if isinstance(data, dict) else None
    if not isinstance(steps, list):
        raise ValueError("Script must contain a 'steps:' list.")
    parsed: list[list[ModelEvent]] = []
    for i, step in enumerate(steps):
        if not isinstance(step, list):
            raise ValueError(f"steps[{i}] must be a list of events.")
        parsed.append([_parse_event(ev) for ev in step])
    return ScriptedModelClient(parsed)
