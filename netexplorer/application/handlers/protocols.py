"""Protocols shared across application handlers."""
from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class WorkflowRunner(Protocol):
  """Represents a compiled LangGraph workflow that can be awaited."""

  async def run(self, state: Mapping[str, Any]) -> Mapping[str, Any]:
    ...
