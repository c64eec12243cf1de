"""Implementation of the explorer service port."""
from __future__ import annotations

from typing import Dict, List, Optional

from netexplorer.application.commands.endpoint_commands import (
  RegisterEndpointCommand,
  UpdateEndpointCommand,
)
from netexplorer.application.commands.explorer_request_command import ExplorerRequestCommand
from netexplorer.application.handlers.catalog_handler import CatalogHandler
from netexplorer.application.handlers.endpoint_handler import EndpointHandler
from netexplorer.application.handlers.request_dispatch_handler import RequestDispatchHandler
from netexplorer.application.queries.explorer_response import ExplorerResponse
from netexplorer.domain.entities.api_catalog import ApiCatalog, ApiDefinition
from netexplorer.domain.entities.device_inventory import DeviceInventoryRecord
from netexplorer.domain.entities.endpoint import Endpoint
from netexplorer.domain.entities.lookup_api import LookupApiDefinition
from netexplorer.domain.entities.query_log import QueryLogRecord
from netexplorer.domain.errors import LookupUnavailableError
from netexplorer.domain.value_objects.protocol_call import ConnectionTestResult
from netexplorer.ports.input.explorer_service import ExplorerService
from netexplorer.ports.output.lookup_repository import LookupRepository
from netexplorer.ports.output.record_store import RecordStore


class ExplorerServiceImpl(ExplorerService):
  """Concrete implementation that delegates to the appropriate handler."""

  def __init__(
    self,
    endpoint_handler: EndpointHandler,
    catalog_handler: CatalogHandler,
    dispatch_handler: RequestDispatchHandler,
    store: RecordStore,
    lookup_repository: Optional[LookupRepository] = None,
  ) -> None:
    self._endpoint_handler = endpoint_handler
    self._catalog_handler = catalog_handler
    self._dispatch_handler = dispatch_handler
    self._store = store
    self._lookup_repository = lookup_repository

  def list_endpoints(self) -> List[Endpoint]:
    return self._endpoint_handler.list()

  def get_endpoint(self, endpoint_id: str) -> Endpoint:
    return self._endpoint_handler.get(endpoint_id)

  def register_endpoint(self, command: RegisterEndpointCommand) -> Endpoint:
    return self._endpoint_handler.register(command)

  def update_endpoint(self, command: UpdateEndpointCommand) -> Endpoint:
    return self._endpoint_handler.update(command)

  def delete_endpoint(self, endpoint_id: str) -> None:
    self._endpoint_handler.delete(endpoint_id)

  async def test_connection(self, endpoint_id: str) -> ConnectionTestResult:
    return await self._endpoint_handler.test_connection(endpoint_id)

  def get_catalog(self) -> ApiCatalog:
    return self._catalog_handler.catalog()

  def list_catalog_by_service(self, service: str) -> Dict[str, ApiDefinition]:
    return self._catalog_handler.by_service(service)

  def list_catalog_by_category(self, category: str) -> List[ApiDefinition]:
    return self._catalog_handler.by_category(category)

  def search_catalog(self, query: str) -> List[ApiDefinition]:
    return self._catalog_handler.search(query)

  def reparse_catalog(self) -> ApiCatalog:
    return self._catalog_handler.reparse()

  async def run_request(self, command: ExplorerRequestCommand) -> ExplorerResponse:
    return await self._dispatch_handler.handle(command)

  def list_query_log(self, endpoint_id: Optional[str] = None) -> List[QueryLogRecord]:
    return self._store.list_query_log(endpoint_id)

  def list_device_inventory(self) -> List[DeviceInventoryRecord]:
    return self._store.list_devices()

  def list_lookup_tables(self) -> List[str]:
    return self._lookup().list_tables()

  def list_lookup_apis(self, service: Optional[str] = None) -> List[LookupApiDefinition]:
    if service:
      return self._lookup().list_apis_by_service(service)
    return self._lookup().list_apis()

  def search_lookup_apis(self, keyword: str) -> List[LookupApiDefinition]:
    return self._lookup().search_apis(keyword)

  def _lookup(self) -> LookupRepository:
    if self._lookup_repository is None:
      raise LookupUnavailableError('Lookup database is not available')
    return self._lookup_repository
