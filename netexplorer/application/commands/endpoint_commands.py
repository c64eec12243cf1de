"""Commands for registering and editing endpoints."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from netexplorer.domain.entities.endpoint import EndpointKind


def _check_url(url: str) -> None:
  if not url.startswith(('http://', 'https://')):
    raise ValueError('url must start with http:// or https://')


@dataclass(frozen=True)
class RegisterEndpointCommand:
  name: str
  kind: EndpointKind
  url: str
  username: Optional[str] = None
  password: Optional[str] = None
  token: Optional[str] = None
  tls_verify: bool = True
  tags: List[str] = field(default_factory=list)

  def __post_init__(self) -> None:
    if not self.name:
      raise ValueError('name is required')
    if not isinstance(self.kind, EndpointKind):
      raise ValueError('kind must be an EndpointKind')
    if not self.url:
      raise ValueError('url is required')
    _check_url(self.url)


@dataclass(frozen=True)
class UpdateEndpointCommand:
  """Edit of an existing endpoint; ``None`` fields are left unchanged."""

  endpoint_id: str
  name: Optional[str] = None
  kind: Optional[EndpointKind] = None
  url: Optional[str] = None
  username: Optional[str] = None
  password: Optional[str] = None
  token: Optional[str] = None
  tls_verify: Optional[bool] = None
  tags: Optional[List[str]] = None

  def __post_init__(self) -> None:
    if not self.endpoint_id:
      raise ValueError('endpoint_id is required')
    if self.name is not None and not self.name:
      raise ValueError('name cannot be empty')
    if self.url is not None:
      _check_url(self.url)
