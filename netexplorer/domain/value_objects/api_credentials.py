"""Value objects for endpoint authentication."""
from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from netexplorer.domain.entities.endpoint import Endpoint, EndpointKind
from netexplorer.domain.errors import ConfigurationError


class AuthType(str, Enum):
  NONE = 'none'
  BEARER = 'bearer'
  BASIC = 'basic'


@dataclass(frozen=True)
class ApiCredentials:
  """Represents the credentials an endpoint kind authenticates with."""

  auth_type: AuthType
  token: Optional[str] = None
  username: Optional[str] = None
  password: Optional[str] = None

  @staticmethod
  def for_endpoint(endpoint: Endpoint) -> 'ApiCredentials':
    """Pick the credentials the endpoint kind expects.

    Raises:
      ConfigurationError: If a credential required by the kind is missing.
    """
    if endpoint.kind == EndpointKind.EAPI:
      if not endpoint.username or not endpoint.password:
        raise ConfigurationError('Username and password are required for eAPI')
      return ApiCredentials(
        auth_type=AuthType.BASIC,
        username=endpoint.username,
        password=endpoint.password,
      )
    if endpoint.kind == EndpointKind.CLOUDVISION:
      if not endpoint.token:
        raise ConfigurationError('API token is required for CloudVision')
      return ApiCredentials(auth_type=AuthType.BEARER, token=endpoint.token)
    return ApiCredentials(auth_type=AuthType.NONE)

  def as_headers(self) -> Dict[str, str]:
    """Return HTTP headers representing the credentials."""
    headers: Dict[str, str] = {}
    if self.auth_type == AuthType.BEARER and self.token:
      headers['Authorization'] = f'Bearer {self.token}'
    elif self.auth_type == AuthType.BASIC and self.username:
      creds = f'{self.username}:{self.password or ""}'.encode('utf-8')
      headers['Authorization'] = f'Basic {base64.b64encode(creds).decode("utf-8")}'
    return headers
