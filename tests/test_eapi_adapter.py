from __future__ import annotations

import base64
from unittest.mock import MagicMock

import pytest
import requests
from urllib3.exceptions import ProtocolError

from netexplorer.adapters.output.api.eapi_adapter import EapiAdapter, RunCmdsParams
from netexplorer.domain.errors import (
  ConfigurationError,
  InvalidRequestError,
  RequestTimeout,
  TransportError,
)
from netexplorer.domain.value_objects.protocol_call import ProtocolRequest


@pytest.fixture
def session():
  return MagicMock(spec=requests.Session)


@pytest.fixture
def adapter(session):
  return EapiAdapter(session=session)


def _runcmds(cmds, **extra):
  return ProtocolRequest(method='RUNCMDS', path='', body={'cmds': cmds, **extra}, timeout=5.0)


def test_execute_posts_runcmds_envelope(adapter, session, make_endpoint, make_response):
  session.request.return_value = make_response(
    json_data={'jsonrpc': '2.0', 'id': '1', 'result': [{'version': '4.31.1F'}]},
  )

  response = adapter.execute(make_endpoint(url='https://switch1/'), _runcmds(['show version']))

  args, kwargs = session.request.call_args
  assert args == ('POST', 'https://switch1/command-api')
  assert kwargs['json'] == {
    'jsonrpc': '2.0',
    'method': 'runCmds',
    'params': {
      'version': 1,
      'cmds': ['show version'],
      'format': 'json',
      'autoComplete': True,
      'expandAliases': True,
    },
    'id': '1',
  }
  expected_auth = base64.b64encode(b'admin:secret').decode()
  assert kwargs['headers']['Authorization'] == f'Basic {expected_auth}'
  assert kwargs['timeout'] == 5.0
  assert kwargs['verify'] is True
  assert kwargs['stream'] is True
  session.request.return_value.close.assert_called_once()
  assert response.status == 200
  assert response.json == {'result': [{'version': '4.31.1F'}]}
  assert response.success


def test_body_overrides_runcmds_defaults():
  params = RunCmdsParams.from_body({
    'cmds': ['show interfaces'],
    'version': 2,
    'format': 'text',
    'autoComplete': False,
    'expandAliases': False,
  })

  assert params.envelope()['params'] == {
    'version': 2,
    'cmds': ['show interfaces'],
    'format': 'text',
    'autoComplete': False,
    'expandAliases': False,
  }


@pytest.mark.parametrize('body', [None, {}, {'cmds': 'show version'}])
def test_missing_cmds_is_an_invalid_request(adapter, session, make_endpoint, body):
  with pytest.raises(InvalidRequestError):
    adapter.execute(make_endpoint(), ProtocolRequest(method='RUNCMDS', path='', body=body))

  session.request.assert_not_called()


@pytest.mark.parametrize('adapter_verify, endpoint_verify, expected', [
  (True, True, True),
  (True, False, False),
  (False, True, False),
])
def test_tls_verification_needs_both_flags(
  session, make_endpoint, make_response, adapter_verify, endpoint_verify, expected,
):
  session.request.return_value = make_response(json_data={'result': []})
  adapter = EapiAdapter(tls_verify=adapter_verify, session=session)

  adapter.execute(make_endpoint(tls_verify=endpoint_verify), _runcmds(['show clock']))

  assert session.request.call_args.kwargs['verify'] is expected


def test_envelope_error_is_reported_on_the_response(adapter, session, make_endpoint, make_response):
  error = {'code': 1002, 'message': "CLI command 1 of 1 'show bogus' failed: invalid command"}
  session.request.return_value = make_response(json_data={'jsonrpc': '2.0', 'id': '1', 'error': error})

  response = adapter.execute(make_endpoint(), _runcmds(['show bogus']))

  assert response.status == 200
  assert response.error == error['message']
  assert response.json == {'error': error}
  assert not response.success


def test_non_json_body_degrades_to_text(adapter, session, make_endpoint, make_response):
  session.request.return_value = make_response(status=502, text='<html>Bad Gateway</html>')

  response = adapter.execute(make_endpoint(), _runcmds(['show version']))

  assert response.status == 502
  assert response.json is None
  assert response.text == '<html>Bad Gateway</html>'
  assert response.error is None
  assert not response.success


def test_timeout_maps_to_request_timeout(adapter, session, make_endpoint):
  session.request.side_effect = requests.Timeout('read timed out')

  with pytest.raises(RequestTimeout):
    adapter.execute(make_endpoint(), _runcmds(['show version']))


def test_connection_failure_maps_to_transport_error(adapter, session, make_endpoint):
  session.request.side_effect = requests.ConnectionError('connection refused')

  with pytest.raises(TransportError, match='connection refused'):
    adapter.execute(make_endpoint(), _runcmds(['show version']))


def test_broken_body_maps_to_transport_error(adapter, session, make_endpoint, make_response):
  response = make_response()
  response.raw = MagicMock()
  response.raw.read1.side_effect = ProtocolError('Connection broken: IncompleteRead')
  session.request.return_value = response

  with pytest.raises(TransportError, match='IncompleteRead'):
    adapter.execute(make_endpoint(), _runcmds(['show version']))

  response.close.assert_called_once()


def test_validate_requires_username_and_password(adapter, make_endpoint):
  with pytest.raises(ConfigurationError, match='Username and password'):
    adapter.validate(make_endpoint(password=None))


def test_connection_test_runs_show_version(adapter, session, make_endpoint, make_response):
  session.request.return_value = make_response(json_data={'result': [{'modelName': 'DCS-7050'}]})

  result = adapter.test_connection(make_endpoint(), timeout=10.0)

  params = session.request.call_args.kwargs['json']['params']
  assert params['cmds'] == ['show version']
  assert params['autoComplete'] is True
  assert session.request.call_args.kwargs['timeout'] == 10.0
  assert result.success
  assert result.status_code == 200


def test_connection_test_reports_http_failure(adapter, session, make_endpoint, make_response):
  session.request.return_value = make_response(status=500, json_data={'result': []})

  result = adapter.test_connection(make_endpoint(), timeout=10.0)

  assert not result.success
  assert result.message == 'Connection failed: HTTP 500'


def test_connection_test_never_raises(adapter, session, make_endpoint):
  session.request.side_effect = requests.ConnectionError('no route to host')

  result = adapter.test_connection(make_endpoint(), timeout=10.0)

  assert not result.success
  assert 'no route to host' in result.message


def test_connection_test_without_credentials(adapter, session, make_endpoint):
  result = adapter.test_connection(make_endpoint(username=None), timeout=10.0)

  assert not result.success
  session.request.assert_not_called()
