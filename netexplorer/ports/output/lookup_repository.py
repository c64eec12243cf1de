"""Output port for the secondary read-only lookup database."""
from __future__ import annotations

from typing import List, Optional, Protocol

from netexplorer.domain.entities.lookup_api import LookupApiDefinition


class LookupRepository(Protocol):
  """Read-only listing and keyword search over an external definition set."""

  def list_tables(self) -> List[str]:
    ...

  def list_apis(self) -> List[LookupApiDefinition]:
    ...

  def list_apis_by_service(self, service: Optional[str]) -> List[LookupApiDefinition]:
    ...

  def search_apis(self, keyword: str) -> List[LookupApiDefinition]:
    ...

  def close(self) -> None:
    ...
