from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..base import ErrorKind, ToolSpec, ToolResult, ToolContext, disallowed, io_failure
from ..edit import BlockReplace, EditError, EditSpec, FindReplace, LineRange, edit_file
from ...util.console import debug_panel
from ...util.fs import pick_encoding

DESCRIPTION = """Edit a segment of a file.

Mode find_replace: replace occurrences of a regex pattern.
- find: the regex pattern to find.
- all: replace all occurrences (default) or just the first one.

Mode block: replace the text between a start and an end marker.
- start / end: regex markers; end is searched after start.
- include_markers: also replace the markers themselves.

Mode line_range: replace a range of lines.
- start_line / end_line: 1-based line numbers.
- inclusive: whether end_line itself is replaced (default true).

Shared: file (the file to edit), replace (the new content).
"""


def _edit_spec(args: dict[str, Any]) -> EditSpec | str:
    """Build the edit from tool arguments, or return the missing-parameter message."""
    mode = args["mode"]
    replace = args["replace"]
    if mode == "find_replace":
        if not args.get("find"):
            return "Missing required parameter: find"
        return FindReplace(args["find"], replace, match_all=bool(args.get("all", True)))
    if mode == "block":
        if not args.get("start") or not args.get("end"):
            return "Missing required parameter: start or end"
        return BlockReplace(args["start"], args["end"], replace, include_markers=bool(args.get("include_markers", False)))
    if args.get("start_line") is None or args.get("end_line") is None:
        return "Missing required parameter: start_line or end_line"
    return LineRange(int(args["start_line"]), int(args["end_line"]), replace, inclusive=bool(args.get("inclusive", True)))


@dataclass
class EditFileSegmentTool:
    spec: ToolSpec = ToolSpec(
        name="edit_file_segment",
        description=DESCRIPTION,
        parameters={
            "type": "object",
            "properties": {
                "file": {"type": "string", "description": "The file to edit."},
                "replace": {"type": "string", "description": "The content to replace with."},
                "mode": {"type": "string", "enum": ["find_replace", "block", "line_range"]},
                "find": {"type": "string"},
                "all": {"type": "boolean", "default": True},
                "start": {"type": "string"},
                "end": {"type": "string"},
                "include_markers": {"type": "boolean", "default": False},
                "start_line": {"type": "integer"},
                "end_line": {"type": "integer"},
                "inclusive": {"type": "boolean", "default": True},
                "encoding": {"type": "string", "default": "utf-8"},
            },
            "required": ["file", "replace", "mode"],
        },
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        path = args["file"]
        mode = args["mode"]
        spec = _edit_spec(args)
        if isinstance(spec, str):
            return ToolResult.fail(ErrorKind.INVALID_ARGUMENTS, spec, file=path, mode=mode, matches=0)

        p = ctx.resolve(path)
        if not ctx.allow_path(p, f'Allow agent to edit "{p}"?'):
            return disallowed(f'Editing "{p}"', file=path, mode=mode, matches=0)

        try:
            outcome = edit_file(p, spec, encoding=pick_encoding(args.get("encoding")))
        except EditError as e:
            return ToolResult.fail(ErrorKind.INVALID_ARGUMENTS, str(e), file=path, mode=mode, matches=0)
        except UnicodeDecodeError as e:
            return ToolResult.fail(ErrorKind.IO_FAILURE, f"Cannot decode file: {e}", file=path, mode=mode, matches=0)
        except UnicodeEncodeError as e:
            return ToolResult.fail(ErrorKind.INVALID_ARGUMENTS, f"Cannot encode result: {e}", file=path, mode=mode, matches=0)
        except OSError as e:
            return io_failure(e, file=path, mode=mode, matches=0)

        debug_panel(ctx.config.debug, "edit_file_segment", {"file": str(p), "mode": mode, "matches": outcome.matches})
        if not outcome.success:
            return ToolResult.fail(ErrorKind.NO_MATCHES, outcome.error or "No matches found", file=path, mode=mode, matches=0)
        return ToolResult.ok(file=path, mode=mode, matches=outcome.matches)

    def render(self, result: ToolResult) -> str:
        if result.is_error:
            return f"Edit of {result.data.get('file')} failed: {result.error}"
        return f"Edited {result.data['file']} ({result.data['mode']}, {result.data['matches']} matches)"
