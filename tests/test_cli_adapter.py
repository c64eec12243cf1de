from __future__ import annotations

import pytest
import requests
from click.testing import CliRunner

from netexplorer.adapters.input.cli.cli_adapter import CLIAdapter
from netexplorer.adapters.presentation.text_presenter import TextPresenter


@pytest.fixture
def cli(explorer_service):
  return CLIAdapter(explorer_service, TextPresenter()).build_cli()


@pytest.fixture
def runner():
  return CliRunner()


def _add(runner, cli, *extra):
  return runner.invoke(cli, [
    'endpoints', 'add',
    '--name', 'leaf1',
    '--kind', 'eapi',
    '--url', 'https://leaf1.example.net',
    '--username', 'admin',
    '--password', 'secret',
    *extra,
  ])


def test_add_and_list_endpoints(runner, cli, explorer_service):
  added = _add(runner, cli, '--tag', 'lab')

  assert added.exit_code == 0, added.output
  (endpoint,) = explorer_service.list_endpoints()
  assert f'- id: {endpoint.id}' in added.output
  assert endpoint.tags == ['lab']

  listed = runner.invoke(cli, ['endpoints', 'list'])
  assert listed.exit_code == 0
  assert endpoint.id in listed.output
  assert '(untested)' in listed.output


def test_add_rejects_bad_url(runner, cli):
  result = runner.invoke(cli, ['endpoints', 'add', '--name', 'x', '--kind', 'eapi', '--url', 'leaf1'])

  assert result.exit_code == 2
  assert 'url must start with http://' in result.output


def test_show_missing_endpoint(runner, cli):
  result = runner.invoke(cli, ['endpoints', 'show', 'ep_missing'])

  assert result.exit_code == 1
  assert 'Endpoint not found: ep_missing' in result.output


def test_update_and_delete(runner, cli, explorer_service):
  _add(runner, cli)
  endpoint_id = explorer_service.list_endpoints()[0].id

  updated = runner.invoke(cli, ['endpoints', 'update', endpoint_id, '--name', 'leaf1-new', '--no-tls-verify'])
  kind_change = runner.invoke(cli, ['endpoints', 'update', endpoint_id, '--kind', 'cloudvision'])
  deleted = runner.invoke(cli, ['endpoints', 'delete', endpoint_id])

  assert updated.exit_code == 0
  assert '- tls_verify: False' in updated.output
  assert kind_change.exit_code == 1
  assert 'kind cannot change' in kind_change.output
  assert deleted.exit_code == 0
  assert explorer_service.list_endpoints() == []


def test_catalog_commands(runner, cli):
  summary = runner.invoke(cli, ['catalog', 'list'])
  by_service = runner.invoke(cli, ['catalog', 'list', '--service', 'telemetry'])
  search = runner.invoke(cli, ['catalog', 'search', 'interfaces'])
  reparse = runner.invoke(cli, ['catalog', 'reparse'])

  assert 'cloudvision: 2' in summary.output
  assert '/telemetry/streaming/stats' in by_service.output
  assert '/api/v1/interfaces/{name}/config' in search.output
  assert reparse.exit_code == 0


def test_request_run_against_eapi(runner, cli, explorer_service, monkeypatch, make_response):
  _add(runner, cli)
  endpoint_id = explorer_service.list_endpoints()[0].id
  calls = []

  def fake_request(session, method, url, **kwargs):
    calls.append((method, url, kwargs['json']['params']['cmds']))
    return make_response(json_data={'jsonrpc': '2.0', 'id': '1', 'result': [{'version': '4.31.1F'}]})

  monkeypatch.setattr(requests.Session, 'request', fake_request)

  result = runner.invoke(cli, ['request', 'run', endpoint_id, '--method', 'runcmds', '--cmd', 'show version'])

  assert result.exit_code == 0, result.output
  assert 'Status: 200' in result.output
  assert '4.31.1F' in result.output
  assert calls == [('POST', 'https://leaf1.example.net/command-api', ['show version'])]

  log = runner.invoke(cli, ['log', 'list', '--endpoint-id', endpoint_id])
  assert 'RUNCMDS' in log.output


def test_request_run_errors(runner, cli, explorer_service):
  runner.invoke(cli, ['endpoints', 'add', '--name', 'tel', '--kind', 'telemetry', '--url', 'https://tel'])
  endpoint_id = explorer_service.list_endpoints()[0].id

  missing = runner.invoke(cli, ['request', 'run', 'ep_missing'])
  bad_body = runner.invoke(cli, ['request', 'run', endpoint_id, '--body', '{not json'])
  telemetry = runner.invoke(cli, ['request', 'run', endpoint_id, '--path', '/streaming'])

  assert missing.exit_code == 1
  assert 'Endpoint not found' in missing.output
  assert bad_body.exit_code == 2
  assert 'not valid JSON' in bad_body.output
  assert telemetry.exit_code == 1
  assert 'Unsupported endpoint type: telemetry' in telemetry.output
  assert explorer_service.list_query_log() == []


def test_connection_test_of_missing_endpoint(runner, cli):
  result = runner.invoke(cli, ['endpoints', 'test', 'ep_missing'])

  assert result.exit_code == 1
  assert result.output.startswith('FAILED')


def test_inventory_list(runner, cli):
  _add(runner, cli)

  result = runner.invoke(cli, ['inventory', 'list'])

  assert 'disconnected' in result.output
  assert 'tests=0 ok=0' in result.output


def test_lookup_without_database(runner, cli):
  result = runner.invoke(cli, ['lookup', 'tables'])

  assert result.exit_code == 1
  assert 'Lookup database is not available' in result.output
