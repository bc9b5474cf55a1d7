from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from .config.loader import load_engine_config
from .config.models import EngineConfig
from .events.store import EventStore
from .tools.base import ToolContext, Workspace
from .tools.builtin import build_builtin_registry
from .tools.confirmation import AskFn, ConfirmationGate
from .tools.registry import ToolRegistry

@dataclass
class AppContext:
    workspace: Workspace
    config: EngineConfig
    tools: ToolRegistry
    gate: ConfirmationGate
    events: EventStore | None = None
    trace: bool = False

    @property
    def cwd(self) -> Path:
        return self.workspace.cwd

    def tool_context(self) -> ToolContext:
        return ToolContext(workspace=self.workspace, gate=self.gate, config=self.config)

    @staticmethod
    def create(
        cwd: Path,
        config: EngineConfig | None = None,
        tools: ToolRegistry | None = None,
        ask: Optional[AskFn] = None,
        events: EventStore | None = None,
        trace: bool = False,
    ) -> "AppContext":
        config = config or EngineConfig()
        return AppContext(
            workspace=Workspace(cwd=Path(cwd).expanduser().resolve()),
            config=config,
            tools=tools or build_builtin_registry(),
            gate=ConfirmationGate(auto_approve=config.auto_approve, ask=ask),
            events=events,
            trace=trace,
        )

    @staticmethod
    def from_env(
        cwd: Path,
        config_path: Path | None = None,
        auto_approve: bool = False,
        debug: bool = False,
        max_steps: int | None = None,
        trace: bool = False,
        persist_events: bool = True,
    ) -> "AppContext":
        # Start with config files and environment, then apply CLI overrides.
        config = load_engine_config(cwd=cwd, explicit_path=config_path)
        if auto_approve:
            config = replace(config, auto_approve=True)
        if debug:
            config = replace(config, debug=True)
        if max_steps is not None:
            config = replace(config, max_steps=max_steps)

        events = EventStore.open() if persist_events else EventStore.in_memory()
        return AppContext.create(cwd, config=config, events=events, trace=trace)
