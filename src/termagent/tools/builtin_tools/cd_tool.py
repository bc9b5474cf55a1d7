from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..base import ErrorKind, ToolSpec, ToolResult, ToolContext, disallowed

@dataclass
class ChangeDirTool:
    spec: ToolSpec = ToolSpec(
        name="cd",
        description="Change the agent's working directory. Requires confirmation.",
        parameters={
            "type": "object",
            "properties": {
                "dir": {"type": "string", "description": "The directory to change to."},
            },
            "required": ["dir"],
        },
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        target = ctx.resolve(args["dir"])
        if not target.exists():
            return ToolResult.fail(ErrorKind.NOT_FOUND, f"Target directory does not exist: {target}", dir=str(target))
        if not target.is_dir():
            return ToolResult.fail(ErrorKind.NOT_FOUND, f"Target path is not a directory: {target}", dir=str(target))
        if not ctx.gate.confirm(f'Allow agent to change directory to "{target}"?'):
            return disallowed(f'Changing directory to "{target}"', dir=str(target))
        ctx.workspace.cwd = target
        return ToolResult.ok(dir=str(target), cwd=str(ctx.cwd))
