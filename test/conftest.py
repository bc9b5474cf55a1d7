from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from termagent.app_context import AppContext
from termagent.config.models import EngineConfig
from termagent.events.store import EventStore


class RecordingAsk:
    """Stand-in for the terminal prompt: returns a fixed answer and remembers questions."""

    def __init__(self, answer: str):
        self.answer = answer
        self.questions: list[str] = []

    def __call__(self, description: str) -> str:
        self.questions.append(description)
        return self.answer


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def make_ctx(workspace: Path) -> Callable[..., AppContext]:
    def _make(answer: str | None = None, **config) -> AppContext:
        cfg = EngineConfig(auto_approve=answer is None, **config)
        ask = RecordingAsk(answer) if answer is not None else None
        return AppContext.create(workspace, config=cfg, ask=ask, events=EventStore.in_memory())
    return _make


@pytest.fixture
def ctx(make_ctx) -> AppContext:
    return make_ctx()
