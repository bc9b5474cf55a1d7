from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from ..util.subprocess import DEFAULT_TIMEOUT, OUTPUT_LIMIT


@dataclass(frozen=True)
class EngineConfig:
    """Process-wide settings; read-only for the duration of a run."""

    debug: bool = False
    auto_approve: bool = False
    # Maximum tool-call rounds per turn.
    max_steps: int = 10
    command_timeout: float = DEFAULT_TIMEOUT
    output_limit: int = OUTPUT_LIMIT
    # Parallel sibling walks in list_directory.
    walk_workers: int = 4

    loaded_from: Path | None = None

    @staticmethod
    def from_obj(obj: Any, base: "EngineConfig | None" = None) -> "EngineConfig":
        """Overlay the recognised keys of a JSON object on ``base``; bad values are skipped."""
        cfg = base or EngineConfig()
        if not isinstance(obj, dict):
            return cfg
        updates: dict[str, Any] = {}
        for key in ("debug", "auto_approve"):
            v = obj.get(key)
            if isinstance(v, bool):
                updates[key] = v
        for key in ("max_steps", "output_limit", "walk_workers"):
            v = obj.get(key)
            if isinstance(v, int) and not isinstance(v, bool) and v > 0:
                updates[key] = v
        v = obj.get("command_timeout")
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v > 0:
            updates["command_timeout"] = float(v)
        return replace(cfg, **updates)
