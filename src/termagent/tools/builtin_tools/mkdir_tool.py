from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..base import ToolSpec, ToolResult, ToolContext, disallowed, io_failure

@dataclass
class MkdirTool:
    spec: ToolSpec = ToolSpec(
        name="mkdir",
        description="Create a directory (recursively by default).",
        parameters={
            "type": "object",
            "properties": {
                "dir": {"type": "string", "description": "The directory to create."},
                "recursive": {"type": "boolean", "default": True},
            },
            "required": ["dir"],
        },
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        path = args["dir"]
        recursive = bool(args.get("recursive", True))
        p = ctx.resolve(path)
        if not ctx.allow_path(p, f'Allow agent to create directory "{p}"?'):
            return disallowed(f'Creating directory "{p}"', dir=path)
        try:
            p.mkdir(parents=recursive, exist_ok=recursive)
        except OSError as e:
            return io_failure(e, dir=path)
        return ToolResult.ok(dir=path)
