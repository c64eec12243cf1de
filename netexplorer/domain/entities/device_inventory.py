"""Device inventory mirror of registered endpoints."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from netexplorer.domain.entities.endpoint import Endpoint


class DeviceStatus(str, Enum):
  DISCONNECTED = 'disconnected'
  CONNECTED = 'connected'
  FAILED = 'failed'


@dataclass(frozen=True)
class DeviceInventoryRecord:
  """Best-effort copy of an endpoint plus connection statistics.

  The record is created once at endpoint registration and is never
  cascaded on endpoint edits or deletes.
  """

  id: str
  name: str
  device_type: str
  url: str
  kind: str
  username: Optional[str] = None
  password: Optional[str] = None
  status: DeviceStatus = DeviceStatus.DISCONNECTED
  added_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
  last_tested: Optional[datetime] = None
  test_count: int = 0
  success_count: int = 0
  notes: str = ''

  @staticmethod
  def mirror(endpoint: Endpoint) -> 'DeviceInventoryRecord':
    return DeviceInventoryRecord(
      id=endpoint.id,
      name=endpoint.name,
      device_type=endpoint.kind.value,
      url=endpoint.url,
      kind=endpoint.kind.value,
      username=endpoint.username,
      password=endpoint.password,
      notes=f'Added via Endpoint Manager - {endpoint.kind.value}',
    )

  def record_test(self, success: bool, tested_at: Optional[datetime] = None) -> 'DeviceInventoryRecord':
    """Return a copy updated with the outcome of one connection test."""
    return replace(
      self,
      status=DeviceStatus.CONNECTED if success else DeviceStatus.FAILED,
      last_tested=tested_at or datetime.now(timezone.utc),
      test_count=self.test_count + 1,
      success_count=self.success_count + (1 if success else 0),
    )

  def as_dict(self) -> Dict[str, Any]:
    return {
      'id': self.id,
      'name': self.name,
      'device_type': self.device_type,
      'url': self.url,
      'kind': self.kind,
      'username': self.username,
      'password': self.password,
      'status': self.status.value,
      'added_at': self.added_at.isoformat(),
      'last_tested': self.last_tested.isoformat() if self.last_tested else None,
      'test_count': self.test_count,
      'success_count': self.success_count,
      'notes': self.notes,
    }

  @staticmethod
  def from_dict(data: Mapping[str, Any]) -> 'DeviceInventoryRecord':
    last_tested = data.get('last_tested')
    return DeviceInventoryRecord(
      id=data['id'],
      name=data.get('name', ''),
      device_type=data.get('device_type', ''),
      url=data.get('url', ''),
      kind=data.get('kind', ''),
      username=data.get('username'),
      password=data.get('password'),
      status=DeviceStatus(data.get('status') or DeviceStatus.DISCONNECTED.value),
      added_at=datetime.fromisoformat(data['added_at']),
      last_tested=datetime.fromisoformat(last_tested) if last_tested else None,
      test_count=int(data.get('test_count', 0)),
      success_count=int(data.get('success_count', 0)),
      notes=data.get('notes', ''),
    )
