"""Application-level response of a dispatched request."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ExplorerResponse:
  status: int
  endpoint_id: str
  log_id: str
  headers: Dict[str, str] = field(default_factory=dict)
  json: Any = None
  text: str = ''
  elapsed_ms: int = 0
  error: Optional[str] = None

  @property
  def success(self) -> bool:
    return 200 <= self.status < 300 and not self.error

  def as_dict(self) -> Dict[str, Any]:
    return {
      'status': self.status,
      'success': self.success,
      'endpoint_id': self.endpoint_id,
      'log_id': self.log_id,
      'headers': self.headers,
      'json': self.json,
      'text': self.text,
      'elapsed_ms': self.elapsed_ms,
      'error': self.error,
    }
