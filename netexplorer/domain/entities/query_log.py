"""Append-only record of executed explorer requests."""
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional


def new_record_id() -> str:
  return f'req_{uuid.uuid4().hex}'


@dataclass(frozen=True)
class QueryLogRecord:
  id: str
  endpoint_id: str
  method: str
  path: str
  body: Optional[Dict[str, Any]] = None
  status: int = 0
  response: Dict[str, Any] = field(default_factory=dict)
  timestamp_ns: int = field(default_factory=time.time_ns)
  elapsed_ms: int = 0
  error: Optional[str] = None

  @property
  def timestamp(self) -> datetime:
    return datetime.fromtimestamp(self.timestamp_ns / 1_000_000_000, tz=timezone.utc)

  def storage_key(self) -> str:
    # Zero padding keeps lexical key order equal to chronological order.
    return f'{self.timestamp_ns:020d}_{self.id}'

  def as_dict(self) -> Dict[str, Any]:
    return {
      'id': self.id,
      'endpoint_id': self.endpoint_id,
      'method': self.method,
      'path': self.path,
      'body': self.body,
      'status': self.status,
      'response': self.response,
      'timestamp_ns': self.timestamp_ns,
      'timestamp': self.timestamp.isoformat(),
      'elapsed_ms': self.elapsed_ms,
      'error': self.error,
    }

  @staticmethod
  def from_dict(data: Mapping[str, Any]) -> 'QueryLogRecord':
    return QueryLogRecord(
      id=data['id'],
      endpoint_id=data.get('endpoint_id', ''),
      method=data.get('method', ''),
      path=data.get('path', ''),
      body=data.get('body'),
      status=int(data.get('status', 0)),
      response=dict(data.get('response') or {}),
      timestamp_ns=int(data['timestamp_ns']),
      elapsed_ms=int(data.get('elapsed_ms', 0)),
      error=data.get('error'),
    )
