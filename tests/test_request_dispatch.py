from __future__ import annotations

import time
from unittest.mock import MagicMock

import pytest

from netexplorer.application.commands.explorer_request_command import ExplorerRequestCommand
from netexplorer.application.handlers.request_dispatch_handler import RequestDispatchHandler
from netexplorer.domain.entities.endpoint import EndpointKind, EndpointStatus
from netexplorer.domain.errors import (
  ConfigurationError,
  EndpointNotFound,
  TransportError,
  UnsupportedEndpointKind,
)
from netexplorer.domain.value_objects.protocol_call import ProtocolResponse
from netexplorer.ports.output.protocol_adapter import ProtocolAdapter
from netexplorer.workflows.dispatch.graph import DispatchWorkflowRunner


@pytest.fixture
def eapi_adapter():
  adapter = MagicMock(spec=ProtocolAdapter)
  adapter.execute.return_value = ProtocolResponse(
    status=200,
    headers={'Content-Type': 'application/json'},
    json={'result': [{'version': '4.31.1F'}]},
    elapsed_ms=12,
  )
  return adapter


@pytest.fixture
def adapters(eapi_adapter):
  return {EndpointKind.EAPI: eapi_adapter, EndpointKind.CLOUDVISION: MagicMock(spec=ProtocolAdapter)}


def _handler(store, adapters, default_timeout: float = 5.0) -> RequestDispatchHandler:
  return RequestDispatchHandler(DispatchWorkflowRunner(store, adapters, default_timeout))


def _command(endpoint_id: str = 'ep_switch1', **overrides) -> ExplorerRequestCommand:
  values = {'method': 'RUNCMDS', 'body': {'cmds': ['show version']}}
  values.update(overrides)
  return ExplorerRequestCommand(endpoint_id=endpoint_id, **values)


@pytest.mark.asyncio
async def test_successful_request_is_returned_and_logged(store, adapters, eapi_adapter, make_endpoint):
  store.save_endpoint(make_endpoint())

  response = await _handler(store, adapters).handle(_command())

  assert response.status == 200
  assert response.success
  assert response.json == {'result': [{'version': '4.31.1F'}]}
  assert response.endpoint_id == 'ep_switch1'
  assert response.log_id.startswith('req_')

  (record,) = store.list_query_log()
  assert record.id == response.log_id
  assert record.status == 200
  assert record.method == 'RUNCMDS'
  assert record.body == {'cmds': ['show version']}
  assert record.response['json'] == {'result': [{'version': '4.31.1F'}]}
  assert record.error is None

  _, request = eapi_adapter.execute.call_args.args
  assert request.timeout == 5.0


@pytest.mark.asyncio
async def test_request_timeout_overrides_default(store, adapters, eapi_adapter, make_endpoint):
  store.save_endpoint(make_endpoint())

  await _handler(store, adapters).handle(_command(timeout_ms=1500))

  _, request = eapi_adapter.execute.call_args.args
  assert request.timeout == 1.5


@pytest.mark.asyncio
async def test_telemetry_endpoint_is_rejected_without_adapter_call(store, adapters, make_endpoint):
  store.save_endpoint(make_endpoint(id='ep_tel', kind=EndpointKind.TELEMETRY))

  with pytest.raises(UnsupportedEndpointKind):
    await _handler(store, adapters).handle(_command('ep_tel', method='GET', body=None))

  for adapter in adapters.values():
    adapter.execute.assert_not_called()
  assert store.list_query_log() == []


@pytest.mark.asyncio
async def test_missing_endpoint_raises_without_log(store, adapters):
  with pytest.raises(EndpointNotFound):
    await _handler(store, adapters).handle(_command('ep_missing'))

  assert store.list_query_log() == []


@pytest.mark.asyncio
async def test_missing_credentials_raise_without_log(store, adapters, eapi_adapter, make_endpoint):
  store.save_endpoint(make_endpoint(password=None))
  eapi_adapter.validate.side_effect = ConfigurationError('Username and password are required for eAPI')

  with pytest.raises(ConfigurationError):
    await _handler(store, adapters).handle(_command())

  eapi_adapter.execute.assert_not_called()
  assert store.list_query_log() == []


@pytest.mark.asyncio
async def test_transport_error_becomes_logged_error_response(store, adapters, eapi_adapter, make_endpoint):
  store.save_endpoint(make_endpoint())
  eapi_adapter.execute.side_effect = TransportError('connection refused')

  response = await _handler(store, adapters).handle(_command())

  assert response.status == 0
  assert response.error == 'connection refused'
  assert not response.success
  (record,) = store.list_query_log()
  assert record.error == 'connection refused'
  assert record.id == response.log_id


@pytest.mark.asyncio
async def test_slow_adapter_times_out(store, adapters, eapi_adapter, make_endpoint):
  store.save_endpoint(make_endpoint())
  eapi_adapter.execute.side_effect = lambda endpoint, request: time.sleep(0.5)

  response = await _handler(store, adapters).handle(_command(timeout_ms=50))

  assert response.status == 0
  assert response.error == 'Request timed out after 0.05s'
  assert store.list_query_log()[0].error == response.error


@pytest.mark.asyncio
async def test_log_write_failure_does_not_fail_the_request(adapters, make_endpoint):
  store = MagicMock()
  store.get_endpoint.return_value = make_endpoint()
  store.append_query_record.side_effect = RuntimeError('disk full')

  response = await _handler(store, adapters).handle(_command())

  assert response.status == 200
  assert response.log_id.startswith('req_')
  store.append_query_record.assert_called_once()


@pytest.mark.asyncio
async def test_requests_do_not_change_endpoint_status(store, adapters, make_endpoint):
  store.save_endpoint(make_endpoint())

  await _handler(store, adapters).handle(_command())

  assert store.get_endpoint('ep_switch1').status == EndpointStatus.UNSET
