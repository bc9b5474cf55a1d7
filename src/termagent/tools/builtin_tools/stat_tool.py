from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ..base import ToolSpec, ToolResult, ToolContext, disallowed, io_failure

@dataclass
class StatFileTool:
    spec: ToolSpec = ToolSpec(
        name="stat_file",
        description="Get file or directory stats.",
        parameters={
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "The file or directory to stat."},
            },
            "required": ["path"],
        },
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        path = args["path"]
        p = ctx.resolve(path)
        if not ctx.allow_path(p, f'Allow agent to stat "{p}"?'):
            return disallowed(f'Reading stats of "{p}"', path=path)
        try:
            st = p.stat()
        except OSError as e:
            return io_failure(e, path=path)
        return ToolResult.ok(
            path=path,
            is_file=p.is_file(),
            is_directory=p.is_dir(),
            size=st.st_size,
            mtime=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc).isoformat(),
        )
