"""Application-level configuration utilities."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from os import getenv
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'off'}


@dataclass(frozen=True)
class Settings:
  """Immutable application settings loaded from environment variables."""

  database_path: Path = Path('data.db')
  catalog_path: Path = Path('api_catalog.json')
  catalog_source_path: Path = Path('Enumerated_API.md')
  lookup_database_path: Path = Path('netvisor_api_v711.db')
  default_timeout_ms: int = 30_000
  connection_test_timeout_ms: int = 10_000
  tls_verify: bool = True
  log_level: str = 'INFO'

  @property
  def default_timeout(self) -> float:
    return self.default_timeout_ms / 1000

  @property
  def connection_test_timeout(self) -> float:
    return self.connection_test_timeout_ms / 1000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings from environment variables once per process."""
  env_path = Path(__file__).resolve().parents[2] / '.env'
  if env_path.exists():
    load_dotenv(env_path)
  else:
    load_dotenv()

  defaults = Settings()
  return Settings(
    database_path=Path(getenv('NETEXPLORER_DATABASE_PATH') or defaults.database_path),
    catalog_path=Path(getenv('NETEXPLORER_CATALOG_PATH') or defaults.catalog_path),
    catalog_source_path=Path(getenv('NETEXPLORER_CATALOG_SOURCE_PATH') or defaults.catalog_source_path),
    lookup_database_path=Path(getenv('NETEXPLORER_LOOKUP_DATABASE_PATH') or defaults.lookup_database_path),
    default_timeout_ms=_positive_int('NETEXPLORER_DEFAULT_TIMEOUT_MS', defaults.default_timeout_ms),
    connection_test_timeout_ms=_positive_int(
      'NETEXPLORER_CONNECTION_TEST_TIMEOUT_MS', defaults.connection_test_timeout_ms
    ),
    tls_verify=_flag('NETEXPLORER_TLS_VERIFY', defaults.tls_verify),
    log_level=(getenv('NETEXPLORER_LOG_LEVEL') or defaults.log_level).upper(),
  )


def _positive_int(name: str, default: int) -> int:
  raw: Optional[str] = getenv(name)
  if not raw:
    return default
  try:
    value = int(raw)
  except ValueError as exc:
    raise ValueError(f'{name} must be an integer, got {raw!r}') from exc
  if value <= 0:
    raise ValueError(f'{name} must be positive')
  return value


def _flag(name: str, default: bool) -> bool:
  raw = getenv(name)
  if raw is None or raw == '':
    return default
  value = raw.strip().lower()
  if value in _TRUE_VALUES:
    return True
  if value in _FALSE_VALUES:
    return False
  raise ValueError(f'{name} must be a boolean flag, got {raw!r}')
