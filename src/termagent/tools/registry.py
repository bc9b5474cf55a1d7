from __future__ import annotations
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .base import Tool, ToolSpec


class RegistryError(ValueError):
    pass


class ToolRegistry:
    """Read-only name -> tool mapping, assembled once at startup."""

    def __init__(self, tools: Mapping[str, Tool]):
        if not tools:
            raise RegistryError("Tool registry is empty.")
        self._tools = MappingProxyType(dict(tools))

    @classmethod
    def build(cls, tools: Iterable[Tool]) -> "ToolRegistry":
        items: dict[str, Tool] = {}
        for tool in tools:
            name = tool.spec.name
            if not name:
                raise RegistryError(f"Tool without a name: {tool!r}")
            if name in items:
                raise RegistryError(f"Tool already registered: {name}")
            items[name] = tool
        return cls(items)

    def get(self, name: str) -> Tool:
        if name not in self._tools:
            raise KeyError(f"Unknown tool: {name}")
        return self._tools[name]

    def get_optional(self, name: str) -> Optional[Tool]:
        """Return a tool if registered, otherwise None.

        Use this in agent loops to avoid crashing when the model hallucinates
        an unknown tool name.
        """
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools.keys())

    def list_specs(self) -> list[ToolSpec]:
        return [t.spec for t in self._tools.values()]

    def describe(self) -> list[dict]:
        return [spec.describe() for spec in self.list_specs()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
