"""Application handler for ad-hoc requests against registered endpoints."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from netexplorer.application.commands.explorer_request_command import ExplorerRequestCommand
from netexplorer.application.handlers.protocols import WorkflowRunner
from netexplorer.application.queries.explorer_response import ExplorerResponse
from netexplorer.domain.errors import ConfigurationError, EndpointNotFound, UnsupportedEndpointKind
from netexplorer.domain.value_objects.protocol_call import ProtocolResponse
from netexplorer.workflows.dispatch.state import DispatchFailure

logger = logging.getLogger(__name__)


class RequestDispatchHandler:
  """Runs the dispatch workflow and turns its final state into a response.

  Resolution and adapter selection failures are raised to the caller and
  leave no log record. Once an adapter has been called the outcome is
  always logged and returned, including transport failures.
  """

  def __init__(self, workflow_runner: WorkflowRunner):
    self._workflow_runner = workflow_runner

  async def handle(self, command: ExplorerRequestCommand) -> ExplorerResponse:
    state: Mapping[str, Any] = await self._workflow_runner.run({
      'endpoint_id': command.endpoint_id,
      'method': command.method,
      'path': command.path,
      'body': command.body,
      'timeout_ms': command.timeout_ms,
    })

    failure = state.get('failure')
    if failure == DispatchFailure.ENDPOINT_NOT_FOUND.value:
      raise EndpointNotFound(command.endpoint_id)
    if failure == DispatchFailure.UNSUPPORTED_KIND.value:
      raise UnsupportedEndpointKind(state['endpoint'].kind.value)
    if failure == DispatchFailure.CONFIGURATION.value:
      raise ConfigurationError(str(state.get('error')))

    response: ProtocolResponse = state['response']
    if response.error:
      logger.warning(
        'Request %s %s on %s failed: %s',
        command.method, command.path, command.endpoint_id, response.error,
      )
    else:
      logger.info(
        'Request %s %s on %s returned %d in %dms',
        command.method, command.path, command.endpoint_id, response.status, response.elapsed_ms,
      )

    return ExplorerResponse(
      status=response.status,
      endpoint_id=command.endpoint_id,
      log_id=str(state['log_id']),
      headers=dict(response.headers),
      json=response.json,
      text=response.text,
      elapsed_ms=response.elapsed_ms,
      error=response.error,
    )
