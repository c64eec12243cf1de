"""SQLAlchemy-powered reader for the external lookup database."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from netexplorer.domain.entities.lookup_api import LookupApiDefinition
from netexplorer.domain.errors import LookupUnavailableError
from netexplorer.domain.services.lookup_row_mapper import LookupRowMapper
from netexplorer.ports.output.lookup_repository import LookupRepository

logger = logging.getLogger(__name__)

PREFERRED_TABLES = ('apis', 'api_definitions', 'endpoints', 'api_catalog', 'netvisor_apis')
ROW_LIMIT = 100


class SqlAlchemyLookupRepository(LookupRepository):
  """Reads definitions from a SQLite file whose schema we do not control."""

  def __init__(self, database_path: Path | str, mapper: Optional[LookupRowMapper] = None) -> None:
    path = Path(database_path)
    if not path.is_file():
      raise LookupUnavailableError(f'Lookup database not found: {path}')

    self._engine: Engine = create_engine(
      f'sqlite:///file:{path}?mode=ro&uri=true',
      connect_args={'check_same_thread': False},
    )
    self._mapper = mapper or LookupRowMapper()
    try:
      with self._engine.connect() as connection:
        connection.execute(text('SELECT 1'))
    except SQLAlchemyError as exc:
      self._engine.dispose()
      raise LookupUnavailableError(f'Failed to open lookup database: {exc}') from exc

  def close(self) -> None:
    self._engine.dispose()

  def list_tables(self) -> List[str]:
    return sorted(inspect(self._engine).get_table_names())

  def list_apis(self) -> List[LookupApiDefinition]:
    table_name = self._api_table()
    with self._engine.connect() as connection:
      result = connection.execute(
        text(f'SELECT * FROM "{table_name}" LIMIT :limit'),
        {'limit': ROW_LIMIT},
      )
      columns = list(result.keys())
      rows = [dict(zip(columns, row)) for row in result.fetchall()]
    return self._mapper.map_rows(rows)

  def list_apis_by_service(self, service: Optional[str]) -> List[LookupApiDefinition]:
    apis = self.list_apis()
    if not service:
      return apis
    return [api for api in apis if api.service == service]

  def search_apis(self, keyword: str) -> List[LookupApiDefinition]:
    return [api for api in self.list_apis() if api.matches(keyword)]

  def _api_table(self) -> str:
    tables = self.list_tables()
    for table in tables:
      if table in PREFERRED_TABLES:
        return table
    if not tables:
      raise LookupUnavailableError('No tables found in lookup database')
    return tables[0]
