"""CLI entrypoint for the network explorer."""
from __future__ import annotations

import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from netexplorer.adapters.input.cli.cli_adapter import CLIAdapter
from netexplorer.adapters.presentation.text_presenter import TextPresenter
from netexplorer.common.config import get_settings
from netexplorer.common.container import open_application
from netexplorer.common.logging_setup import configure_logging


def main() -> None:
  settings = get_settings()
  configure_logging(settings.log_level)
  with open_application(settings) as explorer_service:
    CLIAdapter(explorer_service, TextPresenter()).run()


if __name__ == '__main__':
  main()
