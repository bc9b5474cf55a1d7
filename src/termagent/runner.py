from __future__ import annotations

import json
import threading
import time
import uuid

from rich.markup import escape
from rich.panel import Panel

from .app_context import AppContext
from .llm.base import ModelClient
from .session.models import (
    ConversationStep,
    ModelError,
    TextFragment,
    ToolInvocation,
    ToolResultEntry,
    TurnOutcome,
    TurnStatus,
)
from .tools.base import ErrorKind, ToolResult, format_call, get_renderer
from .tools.validation import validate_arguments
from .util.console import console, debug_panel


def _args_preview(args: dict) -> str:
    try:
        s = json.dumps(args, ensure_ascii=False, indent=2)
    except (TypeError, ValueError):
        s = str(args)
    if len(s) > 2000:
        s = s[:2000] + "\n... (truncated)"
    return s


def _trace_result(ctx: AppContext, inv: ToolInvocation, res: ToolResult) -> None:
    tool = ctx.tools.get_optional(inv.name)
    title = format_call(tool.spec, inv.arguments) if tool else inv.name
    render = get_renderer(tool) if tool else None
    body = render(res) if render else res.content
    if len(body) > 1200:
        body = body[:1200] + "..."
    console.print(
        Panel.fit(
            escape(body),
            title=escape(title),
            border_style="red" if res.is_error else "green",
        )
    )


def dispatch(ctx: AppContext, inv: ToolInvocation) -> ToolResult:
    """Run one tool call. Every failure comes back as a ToolResult."""
    tool = ctx.tools.get_optional(inv.name)
    if tool is None:
        if ctx.events:
            ctx.events.append("tool.missing", {"tool": inv.name, "tool_call_id": inv.id})
        return ToolResult.fail(ErrorKind.UNKNOWN_TOOL, f"Tool {inv.name} not found.", tool=inv.name)

    args, violations = validate_arguments(tool.spec.parameters, inv.arguments)
    if violations:
        if ctx.events:
            ctx.events.append(
                "tool.invalid",
                {"tool": inv.name, "tool_call_id": inv.id, "violations": violations},
            )
        return ToolResult.fail(
            ErrorKind.INVALID_ARGUMENTS,
            f"Invalid arguments for {inv.name}: " + "; ".join(violations),
            violations=violations,
        )

    if ctx.events:
        ctx.events.append("tool.call", {"tool": inv.name, "tool_call_id": inv.id, "args": args})
    debug_panel(ctx.config.debug, f"call {inv.name}", {"id": inv.id, "args": _args_preview(args)})

    t0 = time.perf_counter()
    try:
        res = tool.execute(ctx.tool_context(), args)
    except Exception as e:
        res = ToolResult.fail(ErrorKind.IO_FAILURE, f"Tool {inv.name} exception: {e}")
    tool_elapsed_ms = int((time.perf_counter() - t0) * 1000)

    if ctx.events:
        ctx.events.append(
            "tool.result",
            {
                "tool": inv.name,
                "tool_call_id": inv.id,
                "success": res.success,
                "error_kind": res.kind.value if res.kind else None,
                "elapsed_ms": tool_elapsed_ms,
                "content_preview": res.content[:4000],
            },
        )
    return res


def _finish(
    ctx: AppContext,
    conversation: ConversationStep,
    status: TurnStatus,
    rounds: int,
    error: str | None = None,
) -> TurnOutcome:
    if ctx.events:
        ctx.events.append("turn.end", {"status": status.value, "rounds": rounds, "error": error})
    return TurnOutcome(status=status, text=conversation.text(), rounds=rounds, conversation=conversation, error=error)


def run_turn(
    ctx: AppContext,
    model: ModelClient,
    user_prompt: str | None = None,
    max_steps: int | None = None,
    cancel: threading.Event | None = None,
) -> TurnOutcome:
    """Drive one user turn: relay text, run requested tools in order, stop at the round limit.

    A model step that asks for at least one tool is a round. Tool calls run
    one at a time and each result is in the conversation before the next
    event is pulled from the model. When the model asks for a tool after
    ``max_steps`` rounds the turn ends with ``STEP_LIMIT_EXCEEDED`` and that
    call is answered with an error instead of being run.
    """
    limit = ctx.config.max_steps if max_steps is None else max_steps
    conversation = ConversationStep(prompt=user_prompt)
    rounds = 0
    step = 0

    if ctx.events:
        ctx.events.append("turn.start", {"prompt": user_prompt, "max_steps": limit})

    while True:
        if cancel is not None and cancel.is_set():
            return _finish(ctx, conversation, TurnStatus.CANCELLED, rounds)

        called = False
        for i, ev in enumerate(model.step(conversation)):
            if isinstance(ev, TextFragment):
                conversation.append(ev)
                continue

            if isinstance(ev, ModelError):
                conversation.append(ev)
                return _finish(ctx, conversation, TurnStatus.MODEL_ERROR, rounds, error=ev.error)

            if not ev.id:
                ev.id = f"tc_{step}_{i}_{uuid.uuid4().hex[:8]}"

            if cancel is not None and cancel.is_set():
                return _finish(ctx, conversation, TurnStatus.CANCELLED, rounds)

            if not called:
                if rounds >= limit:
                    msg = f"Reached max steps ({limit}) without final answer"
                    conversation.append(ev)
                    conversation.append(
                        ToolResultEntry(ev.id, ev.name, ToolResult.fail(ErrorKind.STEP_LIMIT_EXCEEDED, msg))
                    )
                    return _finish(ctx, conversation, TurnStatus.STEP_LIMIT_EXCEEDED, rounds, error=msg)
                rounds += 1
                called = True

            conversation.append(ev)
            res = dispatch(ctx, ev)
            conversation.append(ToolResultEntry(ev.id, ev.name, res))
            if ctx.trace:
                _trace_result(ctx, ev, res)

        step += 1
        # No tool calls: the model has given its final answer.
        if not called:
            return _finish(ctx, conversation, TurnStatus.COMPLETED, rounds)
