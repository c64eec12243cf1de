"""Domain entities for the enumerated API catalog."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from netexplorer.domain.entities.endpoint import EndpointKind

CATALOG_SERVICES = tuple(kind.value for kind in EndpointKind)


@dataclass(frozen=True)
class ApiDefinition:
  """One documented API operation."""

  id: str
  service: str
  method: str
  path: str
  description: str
  params: List[str] = field(default_factory=list)
  category: str = ''
  tags: List[str] = field(default_factory=list)

  def composite_key(self) -> str:
    return f'{self.service}_{self.category}_{self.method}'

  def search_text(self) -> str:
    return ' '.join([
      self.description,
      self.path,
      self.category,
      self.method,
      ' '.join(self.tags),
    ]).lower()

  def as_dict(self) -> Dict[str, Any]:
    return {
      'id': self.id,
      'service': self.service,
      'method': self.method,
      'path': self.path,
      'description': self.description,
      'params': list(self.params),
      'category': self.category,
      'tags': list(self.tags),
    }

  @staticmethod
  def from_dict(data: Mapping[str, Any]) -> 'ApiDefinition':
    return ApiDefinition(
      id=data.get('id', ''),
      service=data.get('service', ''),
      method=data.get('method', ''),
      path=data.get('path', ''),
      description=data.get('description', ''),
      params=list(data.get('params') or []),
      category=data.get('category', ''),
      tags=list(data.get('tags') or []),
    )


@dataclass
class ApiCatalog:
  """Snapshot of parsed definitions, partitioned by service.

  Each partition maps the composite key ``service_category_method`` to a
  definition. A later definition with the same key replaces the earlier one.
  """

  services: Dict[str, Dict[str, ApiDefinition]] = field(
    default_factory=lambda: {service: {} for service in CATALOG_SERVICES}
  )
  last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

  def put(self, definition: ApiDefinition) -> None:
    if definition.service not in self.services:
      raise ValueError(f'Unknown catalog service: {definition.service}')
    self.services[definition.service][definition.composite_key()] = definition

  def for_service(self, service: str) -> Dict[str, ApiDefinition]:
    """Return a copy of one partition; unknown services yield an empty mapping."""
    return dict(self.services.get(service, {}))

  def definitions(self) -> List[ApiDefinition]:
    return [
      definition
      for service in CATALOG_SERVICES
      for definition in self.services[service].values()
    ]

  def by_category(self, category: str) -> List[ApiDefinition]:
    return [definition for definition in self.definitions() if definition.category == category]

  def search(self, query: str) -> List[ApiDefinition]:
    """Case-insensitive substring search over every partition."""
    needle = query.lower()
    return [definition for definition in self.definitions() if needle in definition.search_text()]

  def size(self) -> int:
    return sum(len(partition) for partition in self.services.values())

  def same_definitions(self, other: 'ApiCatalog') -> bool:
    """Compare two catalogs ignoring their timestamps."""
    return self.services == other.services

  def as_dict(self) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
      service: {key: definition.as_dict() for key, definition in self.services[service].items()}
      for service in CATALOG_SERVICES
    }
    payload['lastUpdated'] = self.last_updated.isoformat()
    return payload

  @staticmethod
  def from_dict(data: Mapping[str, Any]) -> 'ApiCatalog':
    last_updated: Optional[str] = data.get('lastUpdated')
    catalog = ApiCatalog(
      last_updated=datetime.fromisoformat(last_updated) if last_updated else datetime.now(timezone.utc),
    )
    for service in CATALOG_SERVICES:
      for key, raw in (data.get(service) or {}).items():
        catalog.services[service][key] = ApiDefinition.from_dict(raw)
    return catalog
