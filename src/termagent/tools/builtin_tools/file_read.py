from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..base import ToolSpec, ToolResult, ToolContext, disallowed, io_failure
from ...util.fs import pick_encoding, read_text

@dataclass
class ReadFileTool:
    spec: ToolSpec = ToolSpec(
        name="read_file",
        description="Read the contents of a file.",
        parameters={
            "type": "object",
            "properties": {
                "file": {"type": "string", "description": "The file to read."},
                "encoding": {"type": "string", "default": "utf-8"},
            },
            "required": ["file"],
        },
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        path = args["file"]
        p = ctx.resolve(path)
        if not ctx.allow_path(p, f'Allow agent to read "{p}"?'):
            return disallowed(f'Reading "{p}"', file=path)
        try:
            content = read_text(p, pick_encoding(args.get("encoding")))
        except OSError as e:
            return io_failure(e, file=path)
        return ToolResult.ok(file=path, content=content)
