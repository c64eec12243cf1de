"""Application handler owning the published API catalog."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from netexplorer.domain.entities.api_catalog import ApiCatalog, ApiDefinition
from netexplorer.domain.errors import CatalogReadError
from netexplorer.domain.services.catalog_parser import ApiCatalogParser
from netexplorer.ports.output.catalog_repository import CatalogSnapshotRepository
from netexplorer.ports.output.record_store import RecordStore

logger = logging.getLogger(__name__)


class CatalogHandler:
  """Keeps one catalog snapshot in memory and publishes replacements whole.

  Readers always see either the previous or the new snapshot, never a
  partially parsed one.
  """

  def __init__(
    self,
    parser: ApiCatalogParser,
    snapshot_repository: CatalogSnapshotRepository,
    store: Optional[RecordStore],
    source_path: Path | str,
  ) -> None:
    self._parser = parser
    self._snapshot_repository = snapshot_repository
    self._store = store
    self._source_path = Path(source_path)
    self._catalog = ApiCatalog()

  def load_or_parse(self) -> ApiCatalog:
    """Startup path: reuse the snapshot when present, else parse the source."""
    try:
      snapshot = self._snapshot_repository.load()
    except (OSError, ValueError) as exc:
      logger.warning('Ignoring unreadable catalog snapshot: %s', exc)
      snapshot = None

    if snapshot is not None:
      logger.info('Loaded API catalog with %d definitions', snapshot.size())
      self._publish(snapshot, persist_snapshot=False)
      return snapshot

    try:
      return self.reparse()
    except CatalogReadError as exc:
      logger.error('API catalog unavailable: %s', exc)
      return self._catalog

  def reparse(self) -> ApiCatalog:
    catalog = self._parser.parse_file(self._source_path)
    self._publish(catalog, persist_snapshot=True)
    return catalog

  def catalog(self) -> ApiCatalog:
    return self._catalog

  def by_service(self, service: str) -> Dict[str, ApiDefinition]:
    return self._catalog.for_service(service)

  def by_category(self, category: str) -> List[ApiDefinition]:
    return self._catalog.by_category(category)

  def search(self, query: str) -> List[ApiDefinition]:
    return self._catalog.search(query)

  def _publish(self, catalog: ApiCatalog, persist_snapshot: bool) -> None:
    self._catalog = catalog
    if persist_snapshot:
      try:
        self._snapshot_repository.save(catalog)
      except OSError:
        logger.exception('Failed to save API catalog snapshot')
    if self._store is not None:
      try:
        self._store.save_catalog(catalog)
      except Exception:
        logger.exception('Failed to store API catalog')
