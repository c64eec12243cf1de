"""API server entrypoint."""
from __future__ import annotations

import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import uvicorn

from netexplorer.adapters.input.api.fastapi_adapter import FastAPIAdapter
from netexplorer.adapters.presentation.json_presenter import JsonPresenter
from netexplorer.common.config import get_settings
from netexplorer.common.container import open_application
from netexplorer.common.logging_setup import configure_logging


def main() -> None:
  settings = get_settings()
  configure_logging(settings.log_level)
  with open_application(settings) as explorer_service:
    adapter = FastAPIAdapter(explorer_service, JsonPresenter())
    uvicorn.run(adapter.app, host='0.0.0.0', port=8000, log_config=None)


if __name__ == '__main__':
  main()
