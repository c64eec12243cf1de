"""Logging setup shared by the entrypoints."""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%dT%H:%M:%S%z'


def configure_logging(level: str = 'INFO') -> None:
  """Send records from every module to stderr with ISO timestamps."""
  logging.basicConfig(
    level=getattr(logging, level.upper(), logging.INFO),
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
    stream=sys.stderr,
    force=True,
  )
  # urllib3 logs every connection at DEBUG.
  logging.getLogger('urllib3').setLevel(logging.WARNING)
