from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Union

from ..tools.base import ToolResult


@dataclass
class TextFragment:
    text: str


@dataclass
class ToolInvocation:
    id: str
    name: str
    arguments: dict[str, Any]  # parsed json


@dataclass
class ModelError:
    error: str


ModelEvent = Union[TextFragment, ToolInvocation, ModelError]


@dataclass
class ToolResultEntry:
    tool_call_id: str
    name: str
    result: ToolResult


StepEntry = Union[TextFragment, ToolInvocation, ToolResultEntry, ModelError]


@dataclass
class ConversationStep:
    """Ordered log of one user turn. Not persisted past the turn."""

    prompt: str | None = None
    entries: list[StepEntry] = field(default_factory=list)

    def append(self, entry: StepEntry) -> None:
        # Adjacent text fragments are merged.
        if isinstance(entry, TextFragment) and self.entries and isinstance(self.entries[-1], TextFragment):
            self.entries[-1] = TextFragment(self.entries[-1].text + entry.text)
            return
        self.entries.append(entry)

    def invocations(self) -> list[ToolInvocation]:
        return [e for e in self.entries if isinstance(e, ToolInvocation)]

    def results(self) -> list[ToolResultEntry]:
        return [e for e in self.entries if isinstance(e, ToolResultEntry)]

    def text(self) -> str:
        return "".join(e.text for e in self.entries if isinstance(e, TextFragment))

    def __iter__(self) -> Iterator[StepEntry]:
        return iter(self.entries)


class TurnStatus(str, Enum):
    COMPLETED = "completed"
    STEP_LIMIT_EXCEEDED = "step_limit_exceeded"
    CANCELLED = "cancelled"
    MODEL_ERROR = "model_error"


@dataclass
class TurnOutcome:
    status: TurnStatus
    text: str
    rounds: int
    conversation: ConversationStep
    error: str | None = None
