"""Input port defining the explorer service contract."""
from __future__ import annotations

from typing import Dict, List, Optional, Protocol

from netexplorer.application.commands.endpoint_commands import (
  RegisterEndpointCommand,
  UpdateEndpointCommand,
)
from netexplorer.application.commands.explorer_request_command import ExplorerRequestCommand
from netexplorer.application.queries.explorer_response import ExplorerResponse
from netexplorer.domain.entities.api_catalog import ApiCatalog, ApiDefinition
from netexplorer.domain.entities.device_inventory import DeviceInventoryRecord
from netexplorer.domain.entities.endpoint import Endpoint
from netexplorer.domain.entities.lookup_api import LookupApiDefinition
from netexplorer.domain.entities.query_log import QueryLogRecord
from netexplorer.domain.value_objects.protocol_call import ConnectionTestResult


class ExplorerService(Protocol):
  def list_endpoints(self) -> List[Endpoint]:
    ...

  def get_endpoint(self, endpoint_id: str) -> Endpoint:
    ...

  def register_endpoint(self, command: RegisterEndpointCommand) -> Endpoint:
    ...

  def update_endpoint(self, command: UpdateEndpointCommand) -> Endpoint:
    ...

  def delete_endpoint(self, endpoint_id: str) -> None:
    ...

  async def test_connection(self, endpoint_id: str) -> ConnectionTestResult:
    ...

  def get_catalog(self) -> ApiCatalog:
    ...

  def list_catalog_by_service(self, service: str) -> Dict[str, ApiDefinition]:
    ...

  def list_catalog_by_category(self, category: str) -> List[ApiDefinition]:
    ...

  def search_catalog(self, query: str) -> List[ApiDefinition]:
    ...

  def reparse_catalog(self) -> ApiCatalog:
    ...

  async def run_request(self, command: ExplorerRequestCommand) -> ExplorerResponse:
    ...

  def list_query_log(self, endpoint_id: Optional[str] = None) -> List[QueryLogRecord]:
    ...

  def list_device_inventory(self) -> List[DeviceInventoryRecord]:
    ...

  def list_lookup_tables(self) -> List[str]:
    ...

  def list_lookup_apis(self, service: Optional[str] = None) -> List[LookupApiDefinition]:
    ...

  def search_lookup_apis(self, keyword: str) -> List[LookupApiDefinition]:
    ...
