"""JSON file persistence for catalog snapshots."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from netexplorer.domain.entities.api_catalog import ApiCatalog
from netexplorer.ports.output.catalog_repository import CatalogSnapshotRepository

logger = logging.getLogger(__name__)


class JsonCatalogSnapshotRepository(CatalogSnapshotRepository):
  def __init__(self, path: Path | str) -> None:
    self._path = Path(path)

  @property
  def path(self) -> Path:
    return self._path

  def exists(self) -> bool:
    return self._path.is_file()

  def load(self) -> Optional[ApiCatalog]:
    if not self.exists():
      return None
    with self._path.open('r', encoding='utf-8') as handle:
      return ApiCatalog.from_dict(json.load(handle))

  def save(self, catalog: ApiCatalog) -> None:
    self._path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = self._path.with_name(self._path.name + '.tmp')
    with temp_path.open('w', encoding='utf-8') as handle:
      json.dump(catalog.as_dict(), handle, ensure_ascii=False, indent=2)
    os.replace(temp_path, self._path)
    logger.info('API catalog saved to %s', self._path)
