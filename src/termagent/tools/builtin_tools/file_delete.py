from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..base import ToolSpec, ToolResult, ToolContext, disallowed, io_failure

@dataclass
class DeleteFileTool:
    spec: ToolSpec = ToolSpec(
        name="delete_file",
        description="Delete a file.",
        parameters={
            "type": "object",
            "properties": {
                "file": {"type": "string", "description": "The file to delete."},
            },
            "required": ["file"],
        },
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        path = args["file"]
        p = ctx.resolve(path)
        if not ctx.allow_path(p, f'Allow agent to delete "{p}"?'):
            return disallowed(f'Deleting "{p}"', file=path)
        try:
            p.unlink()
        except OSError as e:
            return io_failure(e, file=path)
        return ToolResult.ok(file=path)

    def render(self, result: ToolResult) -> str:
        return f"Deleted file: {result.data.get('file')}"
