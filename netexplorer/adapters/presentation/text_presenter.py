"""Plain text presenter for terminal output."""
from __future__ import annotations

import json
from typing import Any, List

from netexplorer.application.queries.explorer_response import ExplorerResponse
from netexplorer.domain.entities.api_catalog import ApiCatalog, ApiDefinition
from netexplorer.domain.entities.device_inventory import DeviceInventoryRecord
from netexplorer.domain.entities.endpoint import Endpoint
from netexplorer.domain.entities.lookup_api import LookupApiDefinition
from netexplorer.domain.entities.query_log import QueryLogRecord
from netexplorer.domain.value_objects.protocol_call import ConnectionTestResult
from netexplorer.ports.input.result_presenter import ResultPresenter


class TextPresenter(ResultPresenter):
  def present(self, result: Any) -> str:
    if isinstance(result, dict):
      result = list(result.values())
    if isinstance(result, (list, tuple)):
      if not result:
        return '(no results)'
      return '\n'.join(self._line(item) for item in result)
    if isinstance(result, ExplorerResponse):
      return self._response(result)
    if isinstance(result, ConnectionTestResult):
      return self._connection_test(result)
    if isinstance(result, ApiCatalog):
      return self._catalog_summary(result)
    if isinstance(result, Endpoint):
      return self._endpoint_details(result)
    return str(result)

  def present_error(self, error: Exception) -> str:
    return f'ERROR: {error}'

  def _line(self, item: Any) -> str:
    if isinstance(item, Endpoint):
      status = item.status.value or 'untested'
      return f'{item.id}  {item.name}  [{item.kind.value}]  {item.url}  ({status})'
    if isinstance(item, ApiDefinition):
      return f'{item.method:<7} {item.path}  [{item.service}/{item.category}]'
    if isinstance(item, LookupApiDefinition):
      return f'{item.method or "-":<7} {item.path}  [{item.service or "-"}] {item.description}'
    if isinstance(item, QueryLogRecord):
      outcome = item.error or str(item.status)
      return (
        f'{item.timestamp.isoformat()}  {item.id}  {item.endpoint_id}  '
        f'{item.method} {item.path or "-"}  {outcome}  {item.elapsed_ms}ms'
      )
    if isinstance(item, DeviceInventoryRecord):
      return (
        f'{item.id}  {item.name}  [{item.device_type}]  {item.status.value}  '
        f'tests={item.test_count} ok={item.success_count}'
      )
    return str(item)

  @staticmethod
  def _response(response: ExplorerResponse) -> str:
    lines: List[str] = [
      f'Status: {response.status}  ({response.elapsed_ms}ms, log {response.log_id})',
    ]
    if response.error:
      lines.append(f'ERROR: {response.error}')
    if response.json is not None:
      lines.append(json.dumps(response.json, ensure_ascii=False, indent=2, default=str))
    elif response.text:
      lines.append(response.text)
    return '\n'.join(lines)

  @staticmethod
  def _connection_test(result: ConnectionTestResult) -> str:
    line = f'{"OK" if result.success else "FAILED"}: {result.message}'
    if result.status_code is not None:
      line += f' (HTTP {result.status_code}, {result.elapsed_ms}ms)'
    if result.details:
      line += f'\n{result.details}'
    return line

  @staticmethod
  def _catalog_summary(catalog: ApiCatalog) -> str:
    lines = [f'{service}: {len(partition)}' for service, partition in catalog.services.items()]
    lines.append(f'Last updated: {catalog.last_updated.isoformat()}')
    return '\n'.join(lines)

  @staticmethod
  def _endpoint_details(endpoint: Endpoint) -> str:
    return '\n'.join([
      f'- id: {endpoint.id}',
      f'- name: {endpoint.name}',
      f'- kind: {endpoint.kind.value}',
      f'- url: {endpoint.url}',
      f'- tls_verify: {endpoint.tls_verify}',
      f'- tags: {", ".join(endpoint.tags) or "-"}',
      f'- status: {endpoint.status.value or "untested"}',
      f'- created: {endpoint.created.isoformat()}',
    ])
