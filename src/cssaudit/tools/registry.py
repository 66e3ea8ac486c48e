# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool registry providing lookup by identifier."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from .base import ToolCategory, ToolDescriptor


class ToolRegistry(Mapping[str, ToolDescriptor]):
    """Central registry for tool descriptors.

    ``ToolRegistry`` behaves like a read-only mapping whose keys are tool ids
    and whose values are :class:`ToolDescriptor` instances. Iteration yields
    check tools before fix tools, each group in registration order.
    """

    def __init__(self, tools: Iterable[ToolDescriptor] = ()) -> None:
        """Initialise the registry, registering ``tools`` in order."""

        self._tools: dict[str, ToolDescriptor] = {}
        self._ordered: tuple[str, ...] = ()
        for tool in tools:
            self.register(tool)

    def register(self, tool: ToolDescriptor) -> None:
        """Register ``tool`` with the registry enforcing uniqueness by id.

        Args:
            tool: Tool descriptor to insert into the registry.

        Raises:
            ValueError: If a tool with the same id is already registered.
        """

        if tool.id in self._tools:
            raise ValueError(f"Tool '{tool.id}' already registered")
        self._tools[tool.id] = tool
        self._recompute_order()

    def try_get(self, tool_id: str) -> ToolDescriptor | None:
        """Return the tool registered as ``tool_id``, otherwise ``None``."""

        return self._tools.get(tool_id)

    def tools(self) -> tuple[ToolDescriptor, ...]:
        """Return all registered tools in execution order."""

        return tuple(self._tools[tool_id] for tool_id in self._ordered)

    def position(self, tool_id: str) -> int:
        """Return the execution-order index of ``tool_id``.

        Raises:
            KeyError: If ``tool_id`` is not registered.
        """

        try:
            return self._ordered.index(tool_id)
        except ValueError as exc:
            raise KeyError(tool_id) from exc

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ordered)

    def __getitem__(self, tool_id: str) -> ToolDescriptor:
        return self._tools[tool_id]

    def _recompute_order(self) -> None:
        """Rebuild the execution order: checks first, then fixes."""

        checks = [tool_id for tool_id, tool in self._tools.items() if tool.category is ToolCategory.CHECK]
        fixes = [tool_id for tool_id, tool in self._tools.items() if tool.category is ToolCategory.FIX]
        self._ordered = (*checks, *fixes)


__all__ = ["ToolRegistry"]
