"""Domain service mapping external lookup rows onto definitions."""
from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from netexplorer.domain.entities.lookup_api import LookupApiDefinition

# Lower-cased column name -> LookupApiDefinition attribute.
LOOKUP_COLUMN_MAP: Mapping[str, str] = {
  'id': 'id',
  'service': 'service',
  'method': 'method',
  'path': 'path',
  'description': 'description',
  'category': 'category',
  'tags': 'tags',
  'parameters': 'parameters',
  'example': 'example',
}


class LookupRowMapper:
  """Builds lookup definitions from rows whose schema is not ours.

  Columns are matched by name against a declarative table; anything
  unmapped is ignored and NULL values are skipped.
  """

  def __init__(self, column_map: Optional[Mapping[str, str]] = None) -> None:
    self._column_map = dict(column_map or LOOKUP_COLUMN_MAP)

  def map_rows(self, rows: Iterable[Mapping[str, object]]) -> List[LookupApiDefinition]:
    definitions: List[LookupApiDefinition] = []
    for row in rows:
      definition = self.map_row(row)
      if not definition.id:
        definition.id = f'lookup_{len(definitions) + 1}'
      definitions.append(definition)
    return definitions

  def map_row(self, row: Mapping[str, object]) -> LookupApiDefinition:
    definition = LookupApiDefinition()
    for column, value in row.items():
      attribute = self._column_map.get(str(column).lower())
      if attribute is None or value is None:
        continue
      setattr(definition, attribute, str(value))
    return definition
