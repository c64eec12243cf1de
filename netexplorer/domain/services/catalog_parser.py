"""Domain service turning the enumerated API document into a catalog."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from netexplorer.domain.entities.api_catalog import ApiCatalog, ApiDefinition
from netexplorer.domain.entities.endpoint import EndpointKind
from netexplorer.domain.errors import CatalogReadError

logger = logging.getLogger(__name__)

ENDPOINT_PATTERN = re.compile(r'\b(get|post|put|delete)\s+(/\S+)', re.IGNORECASE)
PLACEHOLDER_PATTERN = re.compile(r'\{([^}]+)\}')


@dataclass(frozen=True)
class CatalogParserRules:
  """Thresholds and trigger words used by the line classifier."""

  heading_marker: str = '#'
  document_title_prefix: str = 'Arista Networks'
  max_header_length: int = 50
  max_spaced_header_length: int = 30
  progress_every: int = 1000
  service_patterns: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (EndpointKind.CLOUDVISION.value, ('/api/', '/resources/')),
    (EndpointKind.TELEMETRY.value, ('/telemetry/', '/streaming/')),
    (EndpointKind.EAPI.value, ('/command-api',)),
  )
  default_service: str = EndpointKind.EOS_REST.value
  tag_triggers: Tuple[Tuple[str, str], ...] = (
    ('stats', 'statistics'),
    ('config', 'configuration'),
    ('status', 'status'),
    ('clear', 'maintenance'),
  )


class ApiCatalogParser:
  """Classifies document lines into category headers and endpoint lines.

  Classification is heuristic. Lines that are neither a header nor a
  ``<method> <path>`` line are dropped and parsing continues.
  """

  def __init__(self, rules: Optional[CatalogParserRules] = None) -> None:
    self._rules = rules or CatalogParserRules()

  @property
  def rules(self) -> CatalogParserRules:
    return self._rules

  def parse_file(self, path: Path | str) -> ApiCatalog:
    try:
      content = Path(path).read_text(encoding='utf-8')
    except OSError as exc:
      raise CatalogReadError(f'Failed to read API file {path}: {exc}') from exc
    return self.parse_text(content)

  def parse_text(self, content: str) -> ApiCatalog:
    return self.parse_lines(content.split('\n'))

  def parse_lines(self, lines: Iterable[str]) -> ApiCatalog:
    catalog = ApiCatalog()
    current_category = ''

    for index, raw_line in enumerate(lines):
      if index and index % self._rules.progress_every == 0:
        logger.debug('Parsed %d lines...', index)

      line = raw_line.strip()
      if self._is_skipped(line):
        continue

      if self.is_category_header(line):
        current_category = line
        continue

      definition = self.parse_endpoint(line, current_category)
      if definition is not None:
        catalog.put(definition)

    logger.info('Parsed API catalog with %d definitions', catalog.size())
    return catalog

  def is_category_header(self, line: str) -> bool:
    if ' /' in line or ENDPOINT_PATTERN.search(line):
      return False
    if len(line) > self._rules.max_header_length:
      return False
    if ' ' in line and len(line) > self._rules.max_spaced_header_length:
      return False
    return True

  def parse_endpoint(self, line: str, category: str) -> Optional[ApiDefinition]:
    match = ENDPOINT_PATTERN.search(line)
    if not match:
      return None

    method = match.group(1).upper()
    path = match.group(2)
    return ApiDefinition(
      id=f'{category}_{method}_{path.replace("/", "_")}',
      service=self.determine_service(path),
      method=method,
      path=path,
      description=self.describe(category, path, method),
      params=PLACEHOLDER_PATTERN.findall(path),
      category=category,
      tags=self.generate_tags(category, path, method),
    )

  def determine_service(self, path: str) -> str:
    for service, fragments in self._rules.service_patterns:
      if any(fragment in path for fragment in fragments):
        return service
    return self._rules.default_service

  @staticmethod
  def describe(category: str, path: str, method: str) -> str:
    category_words = category.replace('-', ' ').replace('_', ' ')
    path_words = path.replace('/', ' ').replace('-', ' ').replace('_', ' ').strip()
    return f'{method} {path_words} for {category_words}'

  def generate_tags(self, category: str, path: str, method: str) -> List[str]:
    tags = [method, category.lower()]
    for trigger, tag in self._rules.tag_triggers:
      if trigger in path:
        tags.append(tag)
    return tags

  def _is_skipped(self, line: str) -> bool:
    return (
      not line
      or line.startswith(self._rules.heading_marker)
      or line.startswith(self._rules.document_title_prefix)
    )
