from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..base import ErrorKind, ToolSpec, ToolResult, ToolContext, disallowed
from ...util.console import debug_panel
from ...util.subprocess import ProcessRequest, run_process

@dataclass
class ExecCommandTool:
    spec: ToolSpec = ToolSpec(
        name="exec_command",
        description=(
            "Execute a shell command. Requires confirmation before running. stdout and stderr are each "
            "truncated to 8k (so sort/filter the output, or put what you want to see at the top). "
            "Default timeout is 20s. Does NOT support interactive commands."
        ),
        parameters={
            "type": "object",
            "properties": {
                "command": {"type": "string", "description": "The command to execute (e.g. 'ls')."},
                "args": {"type": "array", "items": {"type": "string"}, "default": [], "description": "Arguments to pass to the command."},
                "cwd": {"type": "string", "description": "Working directory to run the command in."},
                "env": {"type": "object", "additionalProperties": {"type": "string"}, "description": "Environment variables to set."},
                "shell": {"type": "boolean", "default": True, "description": "Run the command in a shell."},
            },
            "required": ["command"],
        },
        hide_args=("cwd", "shell", "env"),
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        command = (args.get("command") or "").strip()
        cmd_args = [str(a) for a in (args.get("args") or [])]
        if not command:
            return ToolResult.fail(ErrorKind.INVALID_ARGUMENTS, "Empty command.", command=command, args=cmd_args)

        req = ProcessRequest(
            command=command,
            args=cmd_args,
            cwd=str(ctx.resolve(args["cwd"])) if args.get("cwd") else str(ctx.cwd),
            env=args.get("env"),
            shell=bool(args.get("shell", True)),
        )
        if not ctx.gate.confirm(f"Allow agent to execute: {req.display()}"):
            return disallowed("Command execution", command=command, args=cmd_args)

        res = run_process(req, timeout=ctx.config.command_timeout, output_limit=ctx.config.output_limit)
        data = {
            "command": command,
            "args": cmd_args,
            "exit_code": res.exit_code,
            "stdout": res.stdout,
            "stderr": res.stderr,
            "truncated": {"stdout": res.stdout_truncated, "stderr": res.stderr_truncated},
        }
        debug_panel(ctx.config.debug, "exec_command", {**data, "cwd": req.cwd, "shell": req.shell, "timed_out": res.timed_out})
        if res.timed_out:
            return ToolResult.fail(ErrorKind.TIMEOUT, res.error or "timeout", **data)
        if res.error is not None:
            return ToolResult.fail(ErrorKind.IO_FAILURE, res.error, **data)
        if res.exit_code != 0:
            return ToolResult(success=False, data=data)
        return ToolResult.ok(**data)
