from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from netexplorer.adapters.output.catalog.json_catalog_repository import JsonCatalogSnapshotRepository
from netexplorer.application.handlers.catalog_handler import CatalogHandler
from netexplorer.domain.errors import CatalogReadError
from netexplorer.domain.services.catalog_parser import ApiCatalogParser


def test_snapshot_save_then_load(tmp_path, sample_document):
  catalog = ApiCatalogParser().parse_text(sample_document)
  repository = JsonCatalogSnapshotRepository(tmp_path / 'out' / 'api_catalog.json')

  repository.save(catalog)

  assert repository.exists()
  assert repository.load().same_definitions(catalog)
  assert not (tmp_path / 'out' / 'api_catalog.json.tmp').exists()


def test_missing_snapshot_loads_as_none(tmp_path):
  repository = JsonCatalogSnapshotRepository(tmp_path / 'api_catalog.json')

  assert repository.exists() is False
  assert repository.load() is None


def test_startup_parses_source_and_writes_snapshot(tmp_path, catalog_source, store):
  repository = JsonCatalogSnapshotRepository(tmp_path / 'api_catalog.json')
  handler = CatalogHandler(ApiCatalogParser(), repository, store, catalog_source)

  catalog = handler.load_or_parse()

  assert catalog.size() == 5
  assert repository.exists()
  assert store.get_catalog().same_definitions(catalog)


def test_startup_prefers_existing_snapshot(tmp_path, sample_document, store):
  repository = JsonCatalogSnapshotRepository(tmp_path / 'api_catalog.json')
  repository.save(ApiCatalogParser().parse_text(sample_document))
  parser = MagicMock(spec=ApiCatalogParser)
  handler = CatalogHandler(parser, repository, store, tmp_path / 'missing.md')

  catalog = handler.load_or_parse()

  parser.parse_file.assert_not_called()
  assert catalog.size() == 5
  assert handler.catalog() is catalog


def test_startup_without_source_leaves_empty_catalog(tmp_path, store):
  handler = CatalogHandler(
    ApiCatalogParser(),
    JsonCatalogSnapshotRepository(tmp_path / 'api_catalog.json'),
    store,
    tmp_path / 'missing.md',
  )

  catalog = handler.load_or_parse()

  assert catalog.size() == 0
  assert handler.search('interfaces') == []


def test_reparse_raises_when_source_is_unreadable(tmp_path, store):
  handler = CatalogHandler(
    ApiCatalogParser(),
    JsonCatalogSnapshotRepository(tmp_path / 'api_catalog.json'),
    store,
    tmp_path / 'missing.md',
  )

  with pytest.raises(CatalogReadError):
    handler.reparse()


def test_reparse_replaces_the_published_catalog(tmp_path, catalog_source, store):
  handler = CatalogHandler(
    ApiCatalogParser(),
    JsonCatalogSnapshotRepository(tmp_path / 'api_catalog.json'),
    store,
    catalog_source,
  )
  handler.load_or_parse()
  catalog_source.write_text('Fabric\nGET /api/fabric\n', encoding='utf-8')

  handler.reparse()

  assert [d.path for d in handler.by_category('Fabric')] == ['/api/fabric']
  assert handler.by_service('eapi') == {}
  assert handler.search('interfaces') == []
