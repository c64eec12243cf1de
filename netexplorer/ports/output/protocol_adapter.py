"""Output port for endpoint protocol adapters."""
from __future__ import annotations

from typing import Protocol

from netexplorer.domain.entities.endpoint import Endpoint
from netexplorer.domain.value_objects.protocol_call import (
  ConnectionTestResult,
  ProtocolRequest,
  ProtocolResponse,
)


class ProtocolAdapter(Protocol):
  """Translates generic requests into one endpoint kind's wire protocol.

  Implementations must be safe to call from several threads at once.
  """

  def validate(self, endpoint: Endpoint) -> None:
    """Check the endpoint carries the credentials this protocol needs.

    Raises:
      ConfigurationError: If a required credential is missing.
    """
    ...

  def execute(self, endpoint: Endpoint, request: ProtocolRequest) -> ProtocolResponse:
    """Perform exactly one network round trip.

    Raises:
      TransportError: If no response was received.
      InvalidRequestError: If the request cannot be expressed in this protocol.
    """
    ...

  def test_connection(self, endpoint: Endpoint, timeout: float) -> ConnectionTestResult:
    """Issue the protocol's diagnostic call. Never raises."""
    ...

  def close(self) -> None:
    ...
