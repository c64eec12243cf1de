"""Shared fixtures for the explorer test suite."""
from __future__ import annotations

import json
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest

from netexplorer.adapters.output.store.sqlalchemy_record_store import SqlAlchemyRecordStore
from netexplorer.common.config import Settings
from netexplorer.common.container import open_application
from netexplorer.domain.entities.endpoint import Endpoint, EndpointKind

SAMPLE_DOCUMENT = '''# Arista API Reference
Arista Networks EOS and CloudVision API enumeration

Interfaces
GET /api/v1/interfaces
POST /api/v1/interfaces/{name}/config

Telemetry
GET /telemetry/streaming/stats

eAPI
POST /command-api

System
GET /eos/v1/system/status
This paragraph describes the system endpoints above in some detail.
'''


@pytest.fixture
def sample_document() -> str:
  return SAMPLE_DOCUMENT


@pytest.fixture
def catalog_source(tmp_path):
  path = tmp_path / 'Enumerated_API.md'
  path.write_text(SAMPLE_DOCUMENT, encoding='utf-8')
  return path


@pytest.fixture
def make_endpoint():
  def factory(**overrides: Any) -> Endpoint:
    values: Dict[str, Any] = {
      'id': 'ep_switch1',
      'name': 'switch1',
      'kind': EndpointKind.EAPI,
      'url': 'https://switch1.example.net',
      'username': 'admin',
      'password': 'secret',
    }
    values.update(overrides)
    return Endpoint(**values)

  return factory


class StreamedBody:
  """Stand-in for the urllib3 response behind a streamed ``requests.Response``."""

  def __init__(self, content: bytes) -> None:
    self._chunks = [content] if content else []

  def read1(self, amt: Optional[int] = None, decode_content: Optional[bool] = None) -> bytes:
    return self._chunks.pop(0) if self._chunks else b''


@pytest.fixture
def make_response():
  """Build a stand-in for a streamed ``requests.Response``."""

  def factory(
    status: int = 200,
    json_data: Any = None,
    text: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
  ) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.headers = headers or {'Content-Type': 'application/json'}
    response.encoding = 'utf-8'
    body = text if text is not None else json.dumps(json_data)
    response.raw = StreamedBody(body.encode('utf-8'))
    return response

  return factory


@pytest.fixture
def store(tmp_path):
  with SqlAlchemyRecordStore(tmp_path / 'data.db') as record_store:
    yield record_store


@pytest.fixture
def settings(tmp_path, catalog_source) -> Settings:
  return Settings(
    database_path=tmp_path / 'data.db',
    catalog_path=tmp_path / 'api_catalog.json',
    catalog_source_path=catalog_source,
    lookup_database_path=tmp_path / 'missing_lookup.db',
    default_timeout_ms=5000,
    connection_test_timeout_ms=2000,
  )


@pytest.fixture
def explorer_service(settings):
  with open_application(settings) as service:
    yield service
