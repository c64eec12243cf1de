"""JSON-RPC adapter for the EOS command API (eAPI)."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from netexplorer.adapters.output.api.requests_adapter import RequestsProtocolAdapter, elapsed_ms
from netexplorer.domain.entities.endpoint import Endpoint
from netexplorer.domain.errors import (
  ConfigurationError,
  DecodeError,
  InvalidRequestError,
  RemoteError,
  TransportError,
)
from netexplorer.domain.value_objects.api_credentials import ApiCredentials
from netexplorer.domain.value_objects.protocol_call import (
  ConnectionTestResult,
  ProtocolRequest,
  ProtocolResponse,
)
from netexplorer.ports.output.protocol_adapter import ProtocolAdapter

logger = logging.getLogger(__name__)

COMMAND_API_PATH = '/command-api'
DIAGNOSTIC_COMMAND = 'show version'


@dataclass(frozen=True)
class RunCmdsParams:
  """Parameters of one ``runCmds`` batch."""

  cmds: List[str]
  version: int = 1
  format: str = 'json'
  auto_complete: bool = True
  expand_aliases: bool = True

  @staticmethod
  def from_body(body: Optional[Mapping[str, Any]]) -> 'RunCmdsParams':
    """Build parameters from a request body; ``cmds`` is mandatory."""
    body = body or {}
    cmds = body.get('cmds')
    if not isinstance(cmds, list):
      raise InvalidRequestError('cmds field is required and must be an array of strings')

    params: Dict[str, Any] = {'cmds': [cmd for cmd in cmds if isinstance(cmd, str)]}
    version = body.get('version')
    if isinstance(version, (int, float)) and not isinstance(version, bool):
      params['version'] = int(version)
    if isinstance(body.get('format'), str):
      params['format'] = body['format']
    if isinstance(body.get('autoComplete'), bool):
      params['auto_complete'] = body['autoComplete']
    if isinstance(body.get('expandAliases'), bool):
      params['expand_aliases'] = body['expandAliases']
    return RunCmdsParams(**params)

  def envelope(self) -> Dict[str, Any]:
    return {
      'jsonrpc': '2.0',
      'method': 'runCmds',
      'params': {
        'version': self.version,
        'cmds': list(self.cmds),
        'format': self.format,
        'autoComplete': self.auto_complete,
        'expandAliases': self.expand_aliases,
      },
      'id': '1',
    }


class EapiAdapter(RequestsProtocolAdapter, ProtocolAdapter):
  """Sends every request as a single ``runCmds`` batch.

  The device executes the command list as one batch, so per-command
  failures come back inside the envelope rather than as transport errors.
  """

  def validate(self, endpoint: Endpoint) -> None:
    ApiCredentials.for_endpoint(endpoint)

  def execute(self, endpoint: Endpoint, request: ProtocolRequest) -> ProtocolResponse:
    params = RunCmdsParams.from_body(request.body)
    response, elapsed = self._post(endpoint, params, request.timeout)
    headers = dict(response.headers)

    try:
      envelope = self._decode_json(response)
    except DecodeError as exc:
      logger.debug('eAPI response from %s is not JSON: %s', endpoint.url, exc)
      return ProtocolResponse(
        status=response.status_code,
        headers=headers,
        text=exc.text,
        elapsed_ms=elapsed,
      )

    try:
      result = self._unwrap(envelope, response.status_code)
    except RemoteError as exc:
      return ProtocolResponse(
        status=response.status_code,
        headers=headers,
        json={'error': exc.payload},
        elapsed_ms=elapsed,
        error=str(exc),
      )

    return ProtocolResponse(
      status=response.status_code,
      headers=headers,
      json={'result': result},
      elapsed_ms=elapsed,
    )

  def test_connection(self, endpoint: Endpoint, timeout: float) -> ConnectionTestResult:
    params = RunCmdsParams(cmds=[DIAGNOSTIC_COMMAND], expand_aliases=False)
    start = time.perf_counter()
    status_code: Optional[int] = None
    try:
      response, _ = self._post(endpoint, params, timeout)
      status_code = response.status_code
      self._unwrap(self._decode_json(response), status_code)
    except (ConfigurationError, TransportError, DecodeError, RemoteError) as exc:
      return ConnectionTestResult(
        success=False,
        message=str(exc),
        status_code=status_code,
        elapsed_ms=elapsed_ms(start),
      )

    success = status_code == 200
    return ConnectionTestResult(
      success=success,
      message='Connection successful' if success else f'Connection failed: HTTP {status_code}',
      status_code=status_code,
      elapsed_ms=elapsed_ms(start),
      details=f'Connected to EOS eAPI at {endpoint.url}' if success else None,
    )

  def _post(self, endpoint: Endpoint, params: RunCmdsParams, timeout: float):
    credentials = ApiCredentials.for_endpoint(endpoint)
    headers = {'Content-Type': 'application/json', **credentials.as_headers()}
    return self._send(
      endpoint,
      'POST',
      self._base_url(endpoint) + COMMAND_API_PATH,
      timeout,
      headers=headers,
      json_payload=params.envelope(),
    )

  @staticmethod
  def _unwrap(envelope: Any, status_code: int) -> Any:
    """Return the ``result`` member or raise the envelope's ``error``."""
    if not isinstance(envelope, dict):
      return envelope
    error = envelope.get('error')
    if error:
      message = error.get('message') if isinstance(error, dict) else str(error)
      raise RemoteError(message or 'eAPI error', status_code=status_code, payload=error)
    return envelope.get('result', [])
