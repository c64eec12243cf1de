"""Node implementations for the request dispatch workflow."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, Mapping

from netexplorer.domain.entities.endpoint import EndpointKind
from netexplorer.domain.entities.query_log import QueryLogRecord, new_record_id
from netexplorer.domain.errors import (
  ConfigurationError,
  EndpointNotFound,
  ExplorerError,
  RequestTimeout,
)
from netexplorer.domain.value_objects.protocol_call import ProtocolRequest, ProtocolResponse
from netexplorer.ports.output.protocol_adapter import ProtocolAdapter
from netexplorer.ports.output.record_store import RecordStore
from netexplorer.workflows.dispatch.state import DispatchFailure

logger = logging.getLogger(__name__)

CONTINUE = 'continue'
STOP = 'stop'


class DispatchActions:
  def __init__(
    self,
    store: RecordStore,
    adapters: Mapping[EndpointKind, ProtocolAdapter],
    default_timeout: float,
  ) -> None:
    self._store = store
    self._adapters = dict(adapters)
    self._default_timeout = default_timeout

  def resolve(self, state: Dict[str, Any]) -> Dict[str, Any]:
    """Load the target endpoint from the record store."""
    try:
      state['endpoint'] = self._store.get_endpoint(state['endpoint_id'])
      state['step'] = 'resolved'
    except EndpointNotFound as e:
      state['failure'] = DispatchFailure.ENDPOINT_NOT_FOUND.value
      state['error'] = str(e)
      state['step'] = 'error'
    return state

  def select_adapter(self, state: Dict[str, Any]) -> Dict[str, Any]:
    """Pick the adapter for the endpoint kind and fix the request deadline."""
    timeout_ms = state.get('timeout_ms')
    state['timeout'] = timeout_ms / 1000 if timeout_ms and timeout_ms > 0 else self._default_timeout

    endpoint = state['endpoint']
    adapter = self._adapters.get(endpoint.kind)
    if adapter is None:
      state['failure'] = DispatchFailure.UNSUPPORTED_KIND.value
      state['error'] = f'Unsupported endpoint type: {endpoint.kind.value}'
      state['step'] = 'error'
      return state

    try:
      adapter.validate(endpoint)
    except ConfigurationError as e:
      state['failure'] = DispatchFailure.CONFIGURATION.value
      state['error'] = str(e)
      state['step'] = 'error'
      return state

    state['step'] = 'adapter_selected'
    return state

  async def dispatch(self, state: Dict[str, Any]) -> Dict[str, Any]:
    """Run the adapter call in a worker thread under the request deadline."""
    endpoint = state['endpoint']
    adapter = self._adapters[endpoint.kind]
    request = ProtocolRequest(
      method=state['method'],
      path=state.get('path') or '',
      body=state.get('body'),
      timeout=state['timeout'],
    )

    start = time.perf_counter()
    try:
      response = await asyncio.wait_for(
        asyncio.to_thread(adapter.execute, endpoint, request),
        timeout=request.timeout,
      )
    except asyncio.TimeoutError:
      response = ProtocolResponse.failure(str(RequestTimeout(request.timeout)), _elapsed_ms(start))
    except ExplorerError as e:
      response = ProtocolResponse.failure(str(e), _elapsed_ms(start))

    state['response'] = response
    state['step'] = 'failed' if response.error else 'completed'
    return state

  async def record(self, state: Dict[str, Any]) -> Dict[str, Any]:
    """Append the outcome to the query log; write failures are only logged."""
    response: ProtocolResponse = state['response']
    record = QueryLogRecord(
      id=new_record_id(),
      endpoint_id=state['endpoint_id'],
      method=state['method'],
      path=state.get('path') or '',
      body=state.get('body'),
      status=response.status,
      response={'json': response.json, 'text': response.text},
      elapsed_ms=response.elapsed_ms,
      error=response.error,
    )
    try:
      await asyncio.to_thread(self._store.append_query_record, record)
    except Exception:
      logger.exception('Failed to save query record %s', record.id)

    state['log_id'] = record.id
    return state

  @staticmethod
  def route(state: Mapping[str, Any]) -> str:
    return STOP if state.get('failure') else CONTINUE


def _elapsed_ms(start: float) -> int:
  return int((time.perf_counter() - start) * 1000)
