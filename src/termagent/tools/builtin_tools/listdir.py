from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..base import ErrorKind, ToolSpec, ToolResult, ToolContext, disallowed
from ..ignore import build_ignore_filter
from ..walker import walk_files
from ...util.console import debug_panel

@dataclass
class ListDirectoryTool:
    spec: ToolSpec = ToolSpec(
        name="list_directory",
        description=(
            "List files in a directory. By default respects .gitignore and excludes common version control "
            "and package management directories (node_modules, .git, etc). This can be disabled with "
            "include_vc_and_pkg_dirs."
        ),
        parameters={
            "type": "object",
            "properties": {
                "dir": {"type": "string", "description": "The directory to list."},
                "recursive_depth": {
                    "type": "integer",
                    "minimum": 0,
                    "default": 0,
                    "description": "How deep to recurse into subdirectories. 0 means no recursion.",
                },
                "include_vc_and_pkg_dirs": {
                    "type": "boolean",
                    "default": False,
                    "description": "Include version control and package management directories.",
                },
            },
            "required": ["dir"],
            "additionalProperties": False,
        },
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        root = ctx.resolve(args["dir"])
        depth = int(args.get("recursive_depth", 0))
        include_all = bool(args.get("include_vc_and_pkg_dirs", False))

        if not ctx.allow_path(root, f'Allow agent to list files in "{root}"?'):
            return disallowed(f'Listing files in "{root}"', root_dir=str(root), files=[])
        if not root.is_dir():
            return ToolResult.fail(ErrorKind.NOT_FOUND, f"Not a directory: {root}", root_dir=str(root), files=[])

        debug_panel(ctx.config.debug, "list_directory", {
            "dir": str(root), "recursive_depth": depth, "include_vc_and_pkg_dirs": include_all,
        })
        should_include = build_ignore_filter(root, include_all)
        files = walk_files(root, depth, should_include, max_workers=ctx.config.walk_workers)
        return ToolResult.ok(root_dir=str(root), files=[str(f.relative_to(root)) for f in files])

    def render(self, result: ToolResult) -> str:
        if result.is_error:
            return f"list_directory failed: {result.error}"
        return f"{len(result.data['files'])} files in {result.data['root_dir']}"
