"""Simple dependency wiring helpers."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from netexplorer.adapters.output.api.cloudvision_adapter import CloudVisionAdapter
from netexplorer.adapters.output.api.eapi_adapter import EapiAdapter
from netexplorer.adapters.output.catalog.json_catalog_repository import JsonCatalogSnapshotRepository
from netexplorer.adapters.output.lookup.sqlalchemy_lookup_repository import SqlAlchemyLookupRepository
from netexplorer.adapters.output.store.sqlalchemy_record_store import SqlAlchemyRecordStore
from netexplorer.application.handlers.catalog_handler import CatalogHandler
from netexplorer.application.handlers.endpoint_handler import EndpointHandler
from netexplorer.application.handlers.request_dispatch_handler import RequestDispatchHandler
from netexplorer.application.services.explorer_service_impl import ExplorerServiceImpl
from netexplorer.common.config import Settings, get_settings
from netexplorer.domain.entities.endpoint import EndpointKind
from netexplorer.domain.errors import LookupUnavailableError
from netexplorer.domain.services.catalog_parser import ApiCatalogParser
from netexplorer.ports.output.lookup_repository import LookupRepository
from netexplorer.ports.output.protocol_adapter import ProtocolAdapter
from netexplorer.workflows.dispatch.graph import DispatchWorkflowRunner

logger = logging.getLogger(__name__)


def build_adapters(settings: Settings) -> Dict[EndpointKind, ProtocolAdapter]:
  """Adapters by endpoint kind; kinds without an entry cannot be dispatched."""
  return {
    EndpointKind.EAPI: EapiAdapter(tls_verify=settings.tls_verify),
    EndpointKind.CLOUDVISION: CloudVisionAdapter(tls_verify=settings.tls_verify),
  }


def open_lookup_repository(settings: Settings) -> Optional[LookupRepository]:
  try:
    return SqlAlchemyLookupRepository(settings.lookup_database_path)
  except LookupUnavailableError as exc:
    logger.warning('Lookup database disabled: %s', exc)
    return None


@contextmanager
def open_application(settings: Optional[Settings] = None) -> Iterator[ExplorerServiceImpl]:
  """Open the store and adapters, yield the service, close everything on exit."""
  settings = settings or get_settings()
  store = SqlAlchemyRecordStore(settings.database_path)
  adapters = build_adapters(settings)
  lookup_repository = open_lookup_repository(settings)

  try:
    catalog_handler = CatalogHandler(
      parser=ApiCatalogParser(),
      snapshot_repository=JsonCatalogSnapshotRepository(settings.catalog_path),
      store=store,
      source_path=settings.catalog_source_path,
    )
    catalog_handler.load_or_parse()

    dispatch_runner = DispatchWorkflowRunner(
      store=store,
      adapters=adapters,
      default_timeout=settings.default_timeout,
    )
    endpoint_handler = EndpointHandler(
      store=store,
      adapters=adapters,
      connection_test_timeout=settings.connection_test_timeout,
    )

    yield ExplorerServiceImpl(
      endpoint_handler=endpoint_handler,
      catalog_handler=catalog_handler,
      dispatch_handler=RequestDispatchHandler(dispatch_runner),
      store=store,
      lookup_repository=lookup_repository,
    )
  finally:
    for adapter in adapters.values():
      adapter.close()
    if lookup_repository is not None:
      lookup_repository.close()
    store.close()
