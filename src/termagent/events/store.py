from __future__ import annotations

import json
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from platformdirs import user_data_dir

APP_NAME = "termagent"


def _events_dir() -> Path:
    root = Path(user_data_dir(APP_NAME))
    d = root / "events"
    d.mkdir(parents=True, exist_ok=True)
    return d


@dataclass
class Event:
    ts: float
    type: str
    data: dict[str, Any]


@dataclass
class EventStore:
    """Append-only event log for one run.

    Backed by a jsonl file when ``path`` is set, otherwise kept in memory.
    Reading tolerates partial corruption.
    """

    run_id: str
    path: Path | None = None
    _memory: list[Event] = field(default_factory=list)

    @staticmethod
    def open(run_id: str | None = None) -> "EventStore":
        rid = run_id or uuid.uuid4().hex[:12]
        return EventStore(run_id=rid, path=_events_dir() / f"{rid}.jsonl")

    @staticmethod
    def in_memory(run_id: str = "memory") -> "EventStore":
        return EventStore(run_id=run_id)

    def append(self, event_type: str, data: dict[str, Any]) -> None:
        ev = Event(ts=time.time(), type=event_type, data=data)
        if self.path is None:
            self._memory.append(ev)
            return
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(ev.__dict__, ensure_ascii=False, default=str) + "\n")

    def iter_events(self) -> Iterable[Event]:
        if self.path is None:
            return list(self._memory)
        if not self.path.exists():
            return []
        out: list[Event] = []
        for line in self.path.read_text(encoding="utf-8", errors="replace").splitlines():
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
                out.append(Event(ts=float(obj.get("ts", 0.0)), type=str(obj.get("type")), data=obj.get("data") or {}))
            except (ValueError, AttributeError):
                continue
        return out

    def types(self) -> list[str]:
        return [e.type for e in self.iter_events()]
