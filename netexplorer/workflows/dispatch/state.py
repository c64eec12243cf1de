"""State definition for the request dispatch workflow."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, TypedDict

from netexplorer.domain.entities.endpoint import Endpoint
from netexplorer.domain.value_objects.protocol_call import ProtocolResponse


class DispatchFailure(str, Enum):
  ENDPOINT_NOT_FOUND = 'endpoint_not_found'
  UNSUPPORTED_KIND = 'unsupported_kind'
  CONFIGURATION = 'configuration'


class DispatchState(TypedDict, total=False):
  # Input fields
  endpoint_id: str
  method: str
  path: str
  body: Optional[Dict[str, Any]]
  timeout_ms: Optional[int]

  # Resolution results
  endpoint: Endpoint
  timeout: float

  # Dispatch results
  response: ProtocolResponse
  log_id: str

  # Status tracking
  failure: Optional[str]
  error: Optional[str]
  step: str
