from __future__ import annotations
import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol

from ..util.fs import is_within, resolve_path

if TYPE_CHECKING:
    from ..config.models import EngineConfig
    from .confirmation import ConfirmationGate


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    NOT_CONFIRMED = "not_confirmed"
    NO_MATCHES = "no_matches"
    TIMEOUT = "timeout"
    INVALID_ARGUMENTS = "invalid_arguments"
    UNKNOWN_TOOL = "unknown_tool"
    STEP_LIMIT_EXCEEDED = "step_limit_exceeded"
    IO_FAILURE = "io_failure"


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    parameters: dict[str, Any]   # JSONSchema
    hide_args: tuple[str, ...] = ()

    def describe(self) -> dict[str, Any]:
        """OpenAI-style function description handed to the model client."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass
class ToolResult:
    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    kind: ErrorKind | None = None

    @staticmethod
    def ok(**data: Any) -> "ToolResult":
        return ToolResult(success=True, data=data)

    @staticmethod
    def fail(kind: ErrorKind, error: str, **data: Any) -> "ToolResult":
        return ToolResult(success=False, data=data, error=error, kind=kind)

    @property
    def is_error(self) -> bool:
        return not self.success

    def to_payload(self) -> dict[str, Any]:
        out = dict(self.data)
        out["success"] = self.success
        if self.error is not None:
            out["error"] = self.error
        if self.kind is not None:
            out["error_kind"] = self.kind.value
        return out

    @property
    def content(self) -> str:
        return json.dumps(self.to_payload(), ensure_ascii=False, default=str)


@dataclass
class Workspace:
    """Mutable working directory shared by every tool of a run (``cd`` moves it)."""
    cwd: Path


@dataclass
class ToolContext:
    workspace: Workspace
    gate: "ConfirmationGate"
    config: "EngineConfig"

    @property
    def cwd(self) -> Path:
        return self.workspace.cwd

    def resolve(self, path_str: str) -> Path:
        return resolve_path(self.cwd, path_str)

    def allow_path(self, target: Path, description: str) -> bool:
        """Paths inside the working directory pass; anything else asks the gate."""
        if is_within(self.cwd, target):
            return True
        return self.gate.confirm(description)


def disallowed(action: str, **data: Any) -> ToolResult:
    return ToolResult.fail(ErrorKind.NOT_CONFIRMED, f"{action} was interactively disallowed by the user.", **data)


def io_failure(err: OSError, **data: Any) -> ToolResult:
    if isinstance(err, FileNotFoundError):
        return ToolResult.fail(ErrorKind.NOT_FOUND, "File not found", **data)
    return ToolResult.fail(ErrorKind.IO_FAILURE, err.strerror or str(err), **data)


class Tool(Protocol):
    spec: ToolSpec
    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult: ...


def get_renderer(tool: Tool) -> Optional[Callable[[ToolResult], str]]:
    return getattr(tool, "render", None)


def format_call(spec: ToolSpec, args: dict[str, Any]) -> str:
    """One-line summary of a call, leaving out the tool's hidden arguments."""
    items = args.items() if isinstance(args, dict) else ()
    shown = ", ".join(f"{k}={v}" for k, v in items if k not in spec.hide_args)
    return f"{spec.name}({shown})"
