"""Input port for formatting service results."""
from __future__ import annotations

from typing import Any, Protocol


class ResultPresenter(Protocol):
  def present(self, result: Any) -> Any:
    ...

  def present_error(self, error: Exception) -> Any:
    ...
