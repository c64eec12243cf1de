"""Output port for catalog snapshot persistence."""
from __future__ import annotations

from typing import Optional, Protocol

from netexplorer.domain.entities.api_catalog import ApiCatalog


class CatalogSnapshotRepository(Protocol):
  def exists(self) -> bool:
    ...

  def load(self) -> Optional[ApiCatalog]:
    """Return the stored snapshot, or None when there is none yet."""
    ...

  def save(self, catalog: ApiCatalog) -> None:
    ...
