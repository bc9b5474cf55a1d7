from __future__ import annotations

import json
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping

from platformdirs import user_config_dir

from .models import EngineConfig

APP_NAME = "termagent"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _candidate_paths(cwd: Path) -> list[Path]:
    # project-level (higher priority)
    return [
        cwd / ".termagent.json",
        cwd / "termagent.json",
    ]


def _global_candidate_paths() -> list[Path]:
    cfg_dir = Path(user_config_dir(APP_NAME))
    return [cfg_dir / "termagent.json"]


def _load_json(p: Path) -> dict[str, Any] | None:
    try:
        obj = json.loads(p.read_text(encoding="utf-8"))
        if isinstance(obj, dict):
            return obj
        return None
    except (OSError, ValueError):
        return None


def _merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge_dicts(out[k], v)  # type: ignore
        else:
            out[k] = v
    return out


def _env_flag(env: Mapping[str, str], name: str) -> bool | None:
    raw = env.get(name)
    if raw is None:
        return None
    raw = raw.strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    return None


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    debug = _env_flag(env, "TERMAGENT_DEBUG")
    if debug is not None:
        out["debug"] = debug
    yolo = _env_flag(env, "TERMAGENT_AUTO_APPROVE")
    if yolo is not None:
        out["auto_approve"] = yolo
    steps = (env.get("TERMAGENT_MAX_STEPS") or "").strip()
    if steps.isdigit():
        out["max_steps"] = int(steps)
    return out


def load_engine_config(
    *,
    cwd: Path,
    explicit_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> EngineConfig:
    """Load engine config.

    Merge order: global < project < explicit_path < environment.
    """
    env = os.environ if env is None else env
    merged: dict[str, Any] = {}
    loaded_from: Path | None = None

    for p in _global_candidate_paths():
        if p.exists() and p.is_file():
            obj = _load_json(p)
            if obj is not None:
                merged = _merge_dicts(merged, obj)
                loaded_from = p

    for p in _candidate_paths(cwd):
        if p.exists() and p.is_file():
            obj = _load_json(p)
            if obj is not None:
                merged = _merge_dicts(merged, obj)
                loaded_from = p
                break  # first match wins for project-level

    if explicit_path is not None:
        p = explicit_path.expanduser().resolve()
        if p.exists() and p.is_file():
            obj = _load_json(p)
            if obj is not None:
                merged = _merge_dicts(merged, obj)
                loaded_from = p

    merged = _merge_dicts(merged, _env_overrides(env))
    cfg = EngineConfig.from_obj(merged)
    return replace(cfg, loaded_from=loaded_from)
