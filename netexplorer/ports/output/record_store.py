"""Output port for the persistent record store."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol

from netexplorer.domain.entities.api_catalog import ApiCatalog
from netexplorer.domain.entities.device_inventory import DeviceInventoryRecord
from netexplorer.domain.entities.endpoint import Endpoint
from netexplorer.domain.entities.query_log import QueryLogRecord

ENDPOINTS = 'endpoints'
QUERY_LOG = 'query_log'
API_CATALOG = 'api_catalog'
DEVICE_INVENTORY = 'device_inventory'
NAMESPACES = (ENDPOINTS, QUERY_LOG, API_CATALOG, DEVICE_INVENTORY)


class RecordStore(Protocol):
  """Durable key-value store organized into independent namespaces.

  Every write is its own transaction. Missing keys raise ``RecordNotFound``
  and unknown namespaces raise ``NamespaceMissing``.
  """

  def put(self, namespace: str, key: str, value: Mapping[str, Any]) -> None:
    ...

  def get(self, namespace: str, key: str) -> Dict[str, Any]:
    ...

  def delete(self, namespace: str, key: str) -> None:
    ...

  def list_all(self, namespace: str) -> List[Dict[str, Any]]:
    ...

  def save_endpoint(self, endpoint: Endpoint) -> None:
    ...

  def get_endpoint(self, endpoint_id: str) -> Endpoint:
    ...

  def list_endpoints(self) -> List[Endpoint]:
    ...

  def delete_endpoint(self, endpoint_id: str) -> None:
    ...

  def append_query_record(self, record: QueryLogRecord) -> None:
    ...

  def list_query_log(self, endpoint_id: Optional[str] = None) -> List[QueryLogRecord]:
    ...

  def save_catalog(self, catalog: ApiCatalog) -> None:
    ...

  def get_catalog(self) -> ApiCatalog:
    ...

  def save_device(self, device: DeviceInventoryRecord) -> None:
    ...

  def get_device(self, device_id: str) -> DeviceInventoryRecord:
    ...

  def list_devices(self) -> List[DeviceInventoryRecord]:
    ...

  def delete_device(self, device_id: str) -> None:
    ...

  def close(self) -> None:
    ...
