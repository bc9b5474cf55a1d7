from __future__ import annotations

import copy
from typing import Any

from jsonschema import Draft7Validator


def _coerce(value: Any, prop: dict[str, Any]) -> Any:
    # Models sometimes send numbers and booleans as strings.
    t = prop.get("type")
    if isinstance(value, str):
        s = value.strip()
        if t == "integer" and s.lstrip("-").isdigit():
            return int(s)
        if t == "number":
            try:
                return float(s)
            except ValueError:
                return value
        if t == "boolean" and s.lower() in {"true", "false"}:
            return s.lower() == "true"
    if t == "integer" and isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def coerce_arguments(schema: dict[str, Any], args: dict[str, Any]) -> dict[str, Any]:
    """Apply schema defaults and loose scalar coercion to the top-level arguments."""
    props: dict[str, Any] = schema.get("properties", {})
    out = dict(args)
    for name, prop in props.items():
        if name in out:
            out[name] = _coerce(out[name], prop)
        elif "default" in prop:
            out[name] = copy.deepcopy(prop["default"])
    return out


def _format_error(err) -> str:
    where = ".".join(str(p) for p in err.absolute_path)
    return f"{where}: {err.message}" if where else err.message


def validate_arguments(schema: dict[str, Any], args: Any) -> tuple[dict[str, Any], list[str]]:
    """Return ``(coerced_args, violations)``; an empty list means the call is valid."""
    if not isinstance(args, dict):
        return {}, [f"arguments must be an object, got {type(args).__name__}"]
    coerced = coerce_arguments(schema, args)
    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(coerced), key=lambda e: [str(p) for p in e.absolute_path])
    return coerced, [_format_error(e) for e in errors]
