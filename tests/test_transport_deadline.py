from __future__ import annotations

import asyncio
import socket
import threading
import time

import pytest
import requests

from netexplorer.adapters.output.api.eapi_adapter import EapiAdapter
from netexplorer.application.commands.explorer_request_command import ExplorerRequestCommand
from netexplorer.application.handlers.request_dispatch_handler import RequestDispatchHandler
from netexplorer.domain.entities.endpoint import EndpointKind
from netexplorer.domain.errors import RequestTimeout
from netexplorer.domain.value_objects.protocol_call import ProtocolRequest
from netexplorer.workflows.dispatch.graph import DispatchWorkflowRunner

SLOW_BODY = b'{"jsonrpc": "2.0", "id": "1", "result": [{"version": "4.31.1F"}]}'
BYTE_INTERVAL = 0.2


@pytest.fixture
def slow_server():
  """Serve one response whose body trickles out a byte at a time."""
  listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
  listener.bind(('127.0.0.1', 0))
  listener.listen(1)

  def serve():
    try:
      conn, _ = listener.accept()
    except OSError:
      return
    with conn:
      conn.recv(65536)
      conn.sendall(
        b'HTTP/1.1 200 OK\r\n'
        b'Content-Type: application/json\r\n'
        b'Content-Length: %d\r\n\r\n' % len(SLOW_BODY)
      )
      for byte in SLOW_BODY:
        time.sleep(BYTE_INTERVAL)
        try:
          conn.sendall(bytes([byte]))
        except OSError:
          return

  thread = threading.Thread(target=serve, daemon=True)
  thread.start()
  yield 'http://127.0.0.1:%d' % listener.getsockname()[1]
  listener.close()


@pytest.fixture
def adapter():
  session = requests.Session()
  session.trust_env = False
  eapi = EapiAdapter(session=session)
  yield eapi
  eapi.close()


def test_deadline_stops_a_slow_body(adapter, slow_server, make_endpoint):
  request = ProtocolRequest(method='RUNCMDS', path='', body={'cmds': ['show version']}, timeout=0.5)

  start = time.perf_counter()
  with pytest.raises(RequestTimeout, match='0.5s'):
    adapter.execute(make_endpoint(url=slow_server), request)

  assert time.perf_counter() - start < 1.5


def test_connection_test_stops_at_deadline(adapter, slow_server, make_endpoint):
  start = time.perf_counter()
  result = adapter.test_connection(make_endpoint(url=slow_server), timeout=0.5)

  assert not result.success
  assert result.message == 'Request timed out after 0.5s'
  assert time.perf_counter() - start < 1.5


def test_dispatch_returns_once_the_deadline_passes(store, adapter, slow_server, make_endpoint):
  store.save_endpoint(make_endpoint(url=slow_server))
  handler = RequestDispatchHandler(DispatchWorkflowRunner(store, {EndpointKind.EAPI: adapter}, 5.0))
  command = ExplorerRequestCommand(
    endpoint_id='ep_switch1', method='RUNCMDS', body={'cmds': ['show version']}, timeout_ms=500,
  )

  start = time.perf_counter()
  response = asyncio.run(handler.handle(command))

  # asyncio.run only returns after the worker thread has finished
  assert time.perf_counter() - start < 2.0
  assert response.error == 'Request timed out after 0.5s'
  (record,) = store.list_query_log()
  assert record.error == response.error
