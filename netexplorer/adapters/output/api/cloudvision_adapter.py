"""REST adapter for CloudVision controllers."""
from __future__ import annotations

import logging
import time
from typing import Optional

from netexplorer.adapters.output.api.requests_adapter import RequestsProtocolAdapter, elapsed_ms
from netexplorer.domain.entities.endpoint import Endpoint
from netexplorer.domain.errors import ConfigurationError, DecodeError, TransportError
from netexplorer.domain.value_objects.api_credentials import ApiCredentials
from netexplorer.domain.value_objects.protocol_call import (
  ConnectionTestResult,
  ProtocolRequest,
  ProtocolResponse,
)
from netexplorer.ports.output.protocol_adapter import ProtocolAdapter

logger = logging.getLogger(__name__)

DIAGNOSTIC_PATH = '/api/resources/inventory/v1/Devices?limit=1'


class CloudVisionAdapter(RequestsProtocolAdapter, ProtocolAdapter):
  """Issues the caller's method and path directly with a bearer token."""

  def validate(self, endpoint: Endpoint) -> None:
    ApiCredentials.for_endpoint(endpoint)

  def execute(self, endpoint: Endpoint, request: ProtocolRequest) -> ProtocolResponse:
    headers = ApiCredentials.for_endpoint(endpoint).as_headers()
    if request.body is not None:
      headers['Content-Type'] = 'application/json'

    response, elapsed = self._send(
      endpoint,
      request.method.upper(),
      self._base_url(endpoint) + request.path,
      request.timeout,
      headers=headers,
      json_payload=request.body,
    )

    try:
      parsed = self._decode_json(response)
    except DecodeError as exc:
      logger.debug('CloudVision response from %s is not JSON: %s', endpoint.url, exc)
      return ProtocolResponse(
        status=response.status_code,
        headers=dict(response.headers),
        text=exc.text,
        elapsed_ms=elapsed,
      )

    return ProtocolResponse(
      status=response.status_code,
      headers=dict(response.headers),
      json=parsed,
      elapsed_ms=elapsed,
    )

  def test_connection(self, endpoint: Endpoint, timeout: float) -> ConnectionTestResult:
    start = time.perf_counter()
    status_code: Optional[int] = None
    try:
      headers = ApiCredentials.for_endpoint(endpoint).as_headers()
      response, _ = self._send(
        endpoint,
        'GET',
        self._base_url(endpoint) + DIAGNOSTIC_PATH,
        timeout,
        headers=headers,
      )
      status_code = response.status_code
    except (ConfigurationError, TransportError) as exc:
      return ConnectionTestResult(
        success=False,
        message=str(exc),
        elapsed_ms=elapsed_ms(start),
      )

    success = status_code == 200
    return ConnectionTestResult(
      success=success,
      message='Connection successful' if success else f'Connection failed: HTTP {status_code}',
      status_code=status_code,
      elapsed_ms=elapsed_ms(start),
      details=f'Connected to CloudVision Portal at {endpoint.url}' if success else None,
    )
