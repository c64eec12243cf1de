"""JSON presenter implementation."""
from __future__ import annotations

import json
from typing import Any, Mapping

from netexplorer.domain.entities.api_catalog import ApiCatalog
from netexplorer.ports.input.result_presenter import ResultPresenter

SECRET_FIELDS = ('password', 'token')
REDACTED = '********'


def _redact(payload: Mapping[str, Any]) -> dict:
  return {
    key: REDACTED if key in SECRET_FIELDS and value else value
    for key, value in payload.items()
  }


class JsonPresenter(ResultPresenter):
  """Turns service results into JSON-compatible payloads with secrets masked."""

  def payload(self, result: Any) -> Any:
    if isinstance(result, ApiCatalog):
      return result.as_dict()
    if hasattr(result, 'as_dict'):
      return _redact(result.as_dict())
    if isinstance(result, Mapping):
      return {key: self.payload(value) for key, value in result.items()}
    if isinstance(result, (list, tuple)):
      return [self.payload(item) for item in result]
    return result

  def present(self, result: Any) -> str:
    return json.dumps(self.payload(result), ensure_ascii=False, indent=2, default=str)

  def present_error(self, error: Exception) -> str:
    return json.dumps(
      {'status': 'error', 'type': type(error).__name__, 'error': str(error)},
      ensure_ascii=False,
      indent=2,
    )
