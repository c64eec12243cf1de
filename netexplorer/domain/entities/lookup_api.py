"""Entity for definitions read from the secondary lookup database."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass
class LookupApiDefinition:
  """Row from the external lookup database; every field is free text."""

  id: str = ''
  service: str = ''
  method: str = ''
  path: str = ''
  description: str = ''
  category: str = ''
  tags: str = ''
  parameters: str = ''
  example: str = ''

  def matches(self, keyword: str) -> bool:
    needle = keyword.lower()
    return any(
      needle in value.lower()
      for value in (self.description, self.path, self.category, self.tags)
    )

  def as_dict(self) -> Dict[str, str]:
    return {
      'id': self.id,
      'service': self.service,
      'method': self.method,
      'path': self.path,
      'description': self.description,
      'category': self.category,
      'tags': self.tags,
      'parameters': self.parameters,
      'example': self.example,
    }
