"""Value objects exchanged between the dispatcher and protocol adapters."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ProtocolRequest:
  """Generic request handed to an adapter; ``timeout`` is in seconds."""

  method: str
  path: str
  body: Optional[Dict[str, Any]] = None
  timeout: float = 30.0

  def __post_init__(self) -> None:
    if self.timeout <= 0:
      raise ValueError('timeout must be positive')


@dataclass(frozen=True)
class ProtocolResponse:
  """Result of exactly one network round trip."""

  status: int
  headers: Dict[str, str] = field(default_factory=dict)
  json: Any = None
  text: str = ''
  elapsed_ms: int = 0
  error: Optional[str] = None

  @property
  def success(self) -> bool:
    return 200 <= self.status < 300 and not self.error

  @staticmethod
  def failure(message: str, elapsed_ms: int = 0) -> 'ProtocolResponse':
    return ProtocolResponse(status=0, elapsed_ms=elapsed_ms, error=message)


@dataclass(frozen=True)
class ConnectionTestResult:
  success: bool
  message: str
  status_code: Optional[int] = None
  elapsed_ms: int = 0
  details: Any = None

  def as_dict(self) -> Dict[str, Any]:
    return {
      'success': self.success,
      'message': self.message,
      'status_code': self.status_code,
      'elapsed_ms': self.elapsed_ms,
      'details': self.details,
    }
