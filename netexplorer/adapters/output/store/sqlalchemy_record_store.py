"""SQLAlchemy-powered record store on a single SQLite file."""
from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from netexplorer.domain.entities.api_catalog import ApiCatalog
from netexplorer.domain.entities.device_inventory import DeviceInventoryRecord
from netexplorer.domain.entities.endpoint import Endpoint
from netexplorer.domain.entities.query_log import QueryLogRecord
from netexplorer.domain.errors import EndpointNotFound, NamespaceMissing, RecordNotFound
from netexplorer.ports.output.record_store import (
  API_CATALOG,
  DEVICE_INVENTORY,
  ENDPOINTS,
  NAMESPACES,
  QUERY_LOG,
  RecordStore,
)

logger = logging.getLogger(__name__)

CATALOG_KEY = 'catalog'


class SqlAlchemyRecordStore(RecordStore):
  """Key-value namespaces stored as ``(record_key, record_value)`` tables.

  Values are JSON documents. Each write runs in its own transaction and
  SQLite serializes writers, so no locking is added here.
  """

  def __init__(self, database_path: Path | str, busy_timeout: float = 5.0) -> None:
    path = Path(database_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    created = not path.exists()

    self._engine: Engine = create_engine(
      f'sqlite:///{path}',
      connect_args={'check_same_thread': False, 'timeout': busy_timeout},
    )
    self._metadata = MetaData()
    self._tables: Dict[str, Table] = {
      namespace: Table(
        namespace,
        self._metadata,
        Column('record_key', String, primary_key=True),
        Column('record_value', Text, nullable=False),
      )
      for namespace in NAMESPACES
    }
    self._metadata.create_all(self._engine)

    if created:
      logger.info('Created new database at: %s', path)

  def __enter__(self) -> 'SqlAlchemyRecordStore':
    return self

  def __exit__(self, *exc_info: object) -> None:
    self.close()

  def close(self) -> None:
    self._engine.dispose()

  # Generic namespace operations

  def put(self, namespace: str, key: str, value: Mapping[str, Any]) -> None:
    table = self._table(namespace)
    statement = sqlite_insert(table).values(
      record_key=key,
      record_value=json.dumps(dict(value), ensure_ascii=False),
    )
    statement = statement.on_conflict_do_update(
      index_elements=[table.c.record_key],
      set_={'record_value': statement.excluded.record_value},
    )
    with self._transaction(namespace) as connection:
      connection.execute(statement)

  def get(self, namespace: str, key: str) -> Dict[str, Any]:
    table = self._table(namespace)
    with self._connection(namespace) as connection:
      row = connection.execute(
        select(table.c.record_value).where(table.c.record_key == key)
      ).first()
    if row is None:
      raise RecordNotFound(namespace, key)
    return json.loads(row[0])

  def delete(self, namespace: str, key: str) -> None:
    table = self._table(namespace)
    with self._transaction(namespace) as connection:
      connection.execute(delete(table).where(table.c.record_key == key))

  def list_all(self, namespace: str) -> List[Dict[str, Any]]:
    table = self._table(namespace)
    with self._connection(namespace) as connection:
      rows = connection.execute(
        select(table.c.record_value).order_by(table.c.record_key)
      ).fetchall()
    return [json.loads(row[0]) for row in rows]

  # Endpoints

  def save_endpoint(self, endpoint: Endpoint) -> None:
    self.put(ENDPOINTS, endpoint.id, endpoint.as_dict())

  def get_endpoint(self, endpoint_id: str) -> Endpoint:
    try:
      return Endpoint.from_dict(self.get(ENDPOINTS, endpoint_id))
    except RecordNotFound as exc:
      raise EndpointNotFound(endpoint_id) from exc

  def list_endpoints(self) -> List[Endpoint]:
    return [Endpoint.from_dict(data) for data in self.list_all(ENDPOINTS)]

  def delete_endpoint(self, endpoint_id: str) -> None:
    self.delete(ENDPOINTS, endpoint_id)

  # Query log

  def append_query_record(self, record: QueryLogRecord) -> None:
    self.put(QUERY_LOG, record.storage_key(), record.as_dict())

  def list_query_log(self, endpoint_id: Optional[str] = None) -> List[QueryLogRecord]:
    records = [QueryLogRecord.from_dict(data) for data in self.list_all(QUERY_LOG)]
    if endpoint_id is None:
      return records
    return [record for record in records if record.endpoint_id == endpoint_id]

  # Catalog

  def save_catalog(self, catalog: ApiCatalog) -> None:
    self.put(API_CATALOG, CATALOG_KEY, catalog.as_dict())

  def get_catalog(self) -> ApiCatalog:
    return ApiCatalog.from_dict(self.get(API_CATALOG, CATALOG_KEY))

  # Device inventory

  def save_device(self, device: DeviceInventoryRecord) -> None:
    self.put(DEVICE_INVENTORY, device.id, device.as_dict())

  def get_device(self, device_id: str) -> DeviceInventoryRecord:
    return DeviceInventoryRecord.from_dict(self.get(DEVICE_INVENTORY, device_id))

  def list_devices(self) -> List[DeviceInventoryRecord]:
    return [DeviceInventoryRecord.from_dict(data) for data in self.list_all(DEVICE_INVENTORY)]

  def delete_device(self, device_id: str) -> None:
    self.delete(DEVICE_INVENTORY, device_id)

  # Helpers

  def _table(self, namespace: str) -> Table:
    table = self._tables.get(namespace)
    if table is None:
      raise NamespaceMissing(namespace)
    return table

  @contextmanager
  def _transaction(self, namespace: str) -> Iterator[Any]:
    try:
      with self._engine.begin() as connection:
        yield connection
    except OperationalError as exc:
      if 'no such table' in str(exc):
        raise NamespaceMissing(namespace) from exc
      raise

  @contextmanager
  def _connection(self, namespace: str) -> Iterator[Any]:
    try:
      with self._engine.connect() as connection:
        yield connection
    except OperationalError as exc:
      if 'no such table' in str(exc):
        raise NamespaceMissing(namespace) from exc
      raise
