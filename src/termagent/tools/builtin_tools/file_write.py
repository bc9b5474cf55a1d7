from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..base import ErrorKind, ToolSpec, ToolResult, ToolContext, disallowed, io_failure
from ...util.fs import pick_encoding

@dataclass
class WriteFileTool:
    spec: ToolSpec = ToolSpec(
        name="write_file",
        description="Write content to a file (overwrites if it exists).",
        parameters={
            "type": "object",
            "properties": {
                "file": {"type": "string", "description": "The file to write to."},
                "content": {"type": "string", "description": "The content to write."},
                "encoding": {"type": "string", "default": "utf-8"},
            },
            "required": ["file", "content"],
        },
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        path = args["file"]
        content = args["content"]
        p = ctx.resolve(path)
        if not ctx.allow_path(p, f'Allow agent to write "{p}"?'):
            return disallowed(f'Writing "{p}"', file=path)
        try:
            data = content.encode(pick_encoding(args.get("encoding")))
        except UnicodeEncodeError as e:
            return ToolResult.fail(ErrorKind.INVALID_ARGUMENTS, f"Cannot encode content: {e}", file=path)
        try:
            p.write_bytes(data)
        except OSError as e:
            return io_failure(e, file=path)
        return ToolResult.ok(file=path, content_length=len(content))
