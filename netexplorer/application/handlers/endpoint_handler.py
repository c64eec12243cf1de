"""Application handler for endpoint registration and connection tests."""
from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Mapping

from netexplorer.application.commands.endpoint_commands import (
  RegisterEndpointCommand,
  UpdateEndpointCommand,
)
from netexplorer.domain.entities.device_inventory import DeviceInventoryRecord
from netexplorer.domain.entities.endpoint import Endpoint, EndpointKind, EndpointStatus
from netexplorer.domain.errors import (
  ConfigurationError,
  EndpointNotFound,
  InvalidRequestError,
  RecordNotFound,
)
from netexplorer.domain.value_objects.protocol_call import ConnectionTestResult
from netexplorer.ports.output.protocol_adapter import ProtocolAdapter
from netexplorer.ports.output.record_store import RecordStore

logger = logging.getLogger(__name__)


def new_endpoint_id() -> str:
  return f'ep_{uuid.uuid4().hex}'


class EndpointHandler:
  def __init__(
    self,
    store: RecordStore,
    adapters: Mapping[EndpointKind, ProtocolAdapter],
    connection_test_timeout: float = 10.0,
  ) -> None:
    self._store = store
    self._adapters = dict(adapters)
    self._connection_test_timeout = connection_test_timeout

  def list(self) -> List[Endpoint]:
    return self._store.list_endpoints()

  def get(self, endpoint_id: str) -> Endpoint:
    return self._store.get_endpoint(endpoint_id)

  def register(self, command: RegisterEndpointCommand) -> Endpoint:
    endpoint = Endpoint(
      id=new_endpoint_id(),
      name=command.name,
      kind=command.kind,
      url=command.url,
      username=command.username,
      password=command.password,
      token=command.token,
      tls_verify=command.tls_verify,
      tags=list(command.tags),
    )
    self._store.save_endpoint(endpoint)

    try:
      self._store.save_device(DeviceInventoryRecord.mirror(endpoint))
    except Exception:
      logger.exception('Failed to add device %s to inventory', endpoint.id)

    logger.info('Endpoint added: %s (%s)', endpoint.id, endpoint.name)
    return endpoint

  def update(self, command: UpdateEndpointCommand) -> Endpoint:
    current = self._store.get_endpoint(command.endpoint_id)
    if command.kind is not None and command.kind != current.kind:
      raise InvalidRequestError(
        f'Endpoint kind cannot change from {current.kind.value} to {command.kind.value}'
      )

    changes = {
      name: value
      for name, value in (
        ('name', command.name),
        ('url', command.url),
        ('username', command.username),
        ('password', command.password),
        ('token', command.token),
        ('tls_verify', command.tls_verify),
        ('tags', list(command.tags) if command.tags is not None else None),
      )
      if value is not None
    }
    updated = replace(current, **changes)
    self._store.save_endpoint(updated)
    logger.info('Endpoint updated: %s (%s)', updated.id, updated.name)
    return updated

  def delete(self, endpoint_id: str) -> None:
    self._store.delete_endpoint(endpoint_id)
    logger.info('Endpoint deleted: %s', endpoint_id)

  async def test_connection(self, endpoint_id: str) -> ConnectionTestResult:
    """Probe an endpoint and record the outcome. Never raises."""
    try:
      endpoint = await asyncio.to_thread(self._store.get_endpoint, endpoint_id)
    except EndpointNotFound as exc:
      return ConnectionTestResult(success=False, message=str(exc))

    adapter = self._adapters.get(endpoint.kind)
    if adapter is None:
      return ConnectionTestResult(
        success=False,
        message='Unknown API type',
        details=f"API type '{endpoint.kind.value}' is not supported",
      )

    try:
      adapter.validate(endpoint)
    except ConfigurationError as exc:
      return ConnectionTestResult(success=False, message='Authentication required', details=str(exc))

    timeout = self._connection_test_timeout
    start = time.perf_counter()
    try:
      result = await asyncio.wait_for(
        asyncio.to_thread(adapter.test_connection, endpoint, timeout),
        timeout=timeout,
      )
    except asyncio.TimeoutError:
      result = ConnectionTestResult(
        success=False,
        message=f'Connection test timed out after {timeout:g}s',
        elapsed_ms=int((time.perf_counter() - start) * 1000),
      )

    await asyncio.to_thread(self._record_outcome, endpoint.id, result.success)
    logger.info(
      'Connection test for %s: %s (%dms)',
      endpoint.id, 'ok' if result.success else result.message, result.elapsed_ms,
    )
    return result

  def _record_outcome(self, endpoint_id: str, success: bool) -> None:
    # Only status changes; every other field comes from the stored copy.
    status = EndpointStatus.CONNECTED if success else EndpointStatus.FAILED
    try:
      current = self._store.get_endpoint(endpoint_id)
      self._store.save_endpoint(replace(current, status=status))
    except EndpointNotFound:
      logger.info('Endpoint %s was deleted during its connection test', endpoint_id)
    except Exception:
      logger.exception('Failed to update status of endpoint %s', endpoint_id)

    try:
      device = self._store.get_device(endpoint_id)
      self._store.save_device(device.record_test(success, datetime.now(timezone.utc)))
    except RecordNotFound:
      logger.warning('No inventory record for endpoint %s', endpoint_id)
    except Exception:
      logger.exception('Failed to update inventory for endpoint %s', endpoint_id)
