"""Command object representing an ad-hoc request against an endpoint."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

ALLOWED_METHODS = ('GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'RUNCMDS')


@dataclass(frozen=True)
class ExplorerRequestCommand:
  """Generic request; eAPI endpoints ignore ``path`` and read ``body['cmds']``."""

  endpoint_id: str
  method: str
  path: str = ''
  body: Optional[Dict[str, Any]] = None
  timeout_ms: Optional[int] = None

  def __post_init__(self) -> None:
    if not self.endpoint_id:
      raise ValueError('endpoint_id is required')
    if not self.method:
      raise ValueError('method is required')
    if self.method.upper() not in ALLOWED_METHODS:
      raise ValueError(f'method must be one of {", ".join(ALLOWED_METHODS)}')
    if self.path and not self.path.startswith('/'):
      raise ValueError('path must start with /')
