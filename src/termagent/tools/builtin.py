from __future__ import annotations

from .registry import ToolRegistry

from .builtin_tools.listdir import ListDirectoryTool
from .builtin_tools.file_read import ReadFileTool
from .builtin_tools.file_write import WriteFileTool
from .builtin_tools.file_delete import DeleteFileTool
from .builtin_tools.mkdir_tool import MkdirTool
from .builtin_tools.stat_tool import StatFileTool
from .builtin_tools.file_edit import EditFileSegmentTool
from .builtin_tools.exec_tool import ExecCommandTool
from .builtin_tools.cd_tool import ChangeDirTool

def builtin_tools() -> list:
    return [
        ListDirectoryTool(),
        ReadFileTool(),
        WriteFileTool(),
        DeleteFileTool(),
        MkdirTool(),
        StatFileTool(),
        EditFileSegmentTool(),
        ExecCommandTool(),
        ChangeDirTool(),
    ]

def build_builtin_registry() -> ToolRegistry:
    return ToolRegistry.build(builtin_tools())
