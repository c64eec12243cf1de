"""Domain entities for registered remote endpoints."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class EndpointKind(str, Enum):
  EAPI = 'eapi'
  CLOUDVISION = 'cloudvision'
  EOS_REST = 'eos_rest'
  TELEMETRY = 'telemetry'


class EndpointStatus(str, Enum):
  UNSET = ''
  CONNECTED = 'connected'
  FAILED = 'failed'


@dataclass(frozen=True)
class Endpoint:
  """A registered remote target: an EOS device or a CloudVision controller."""

  id: str
  name: str
  kind: EndpointKind
  url: str
  username: Optional[str] = None
  password: Optional[str] = None
  token: Optional[str] = None
  tls_verify: bool = True
  created: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
  tags: List[str] = field(default_factory=list)
  status: EndpointStatus = EndpointStatus.UNSET

  def as_dict(self) -> Dict[str, Any]:
    return {
      'id': self.id,
      'name': self.name,
      'kind': self.kind.value,
      'url': self.url,
      'username': self.username,
      'password': self.password,
      'token': self.token,
      'tls_verify': self.tls_verify,
      'created': self.created.isoformat(),
      'tags': list(self.tags),
      'status': self.status.value,
    }

  @staticmethod
  def from_dict(data: Mapping[str, Any]) -> 'Endpoint':
    return Endpoint(
      id=data['id'],
      name=data.get('name', ''),
      kind=EndpointKind(data['kind']),
      url=data.get('url', ''),
      username=data.get('username'),
      password=data.get('password'),
      token=data.get('token'),
      tls_verify=bool(data.get('tls_verify', True)),
      created=datetime.fromisoformat(data['created']),
      tags=list(data.get('tags') or []),
      status=EndpointStatus(data.get('status') or ''),
    )
