from __future__ import annotations

from typing import Iterable, Protocol

from ..session.models import ConversationStep, ModelEvent


class ModelClient(Protocol):
    """The external model side of a turn.

    ``step`` is called once per model round with the turn's log so far (tool
    results included) and yields text fragments, tool invocations and errors.
    The engine pulls the next event only after the previous one's side effects
    are done.
    """

    def step(self, conversation: ConversationStep) -> Iterable[ModelEvent]: ...
