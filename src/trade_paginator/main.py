"""Trade Paginator - walk a trades endpoint and print every page."""

import asyncio
import logging
import os
import signal
import sys
from typing import Optional

from rich.console import Console

from .clients.transport import HTTPTransport
from .config.settings import AppConfig, load_config
from .display import render_page
from .exceptions import PaginationCancelledError, PaginationError
from .paginator import Paginator
from .utils.logging import setup_logging


logger = logging.getLogger(__name__)


class PaginationService:
    """Runs one pagination sequence to exhaustion and prints the pages."""

    def __init__(self, config: AppConfig, out=None):
        self.config = config
        self.out = out or sys.stdout
        self.console = Console(file=self.out)
        self.paginator: Optional[Paginator] = None
        self.pages_printed = 0

    async def run(self, base_url: Optional[str] = None, start_cursor: Optional[int] = None) -> int:
        """Consume the sequence; return the process exit code."""
        base_url = base_url or self.config.transport.base_url
        start_cursor = self.config.transport.start_cursor if start_cursor is None else start_cursor

        async with HTTPTransport(self.config.transport) as transport:
            self.paginator = Paginator(transport, self.config.pagination)
            self._setup_signal_handlers()

            try:
                async for page in self.paginator.paginate(base_url, start_cursor):
                    self.console.print(render_page(page, title=f"page {self.pages_printed + 1}"))
                    self.pages_printed += 1
            except PaginationCancelledError:
                logger.info(f"Pagination cancelled after {self.pages_printed} pages")
                return 0
            except PaginationError as e:
                logger.error(f"Pagination failed: {e}", exc_info=True)
                return 1
            finally:
                self._remove_signal_handlers()

        logger.info(f"Done: {self.pages_printed} pages, stats={self.paginator.get_stats()}")
        return 0

    def _setup_signal_handlers(self):
        """Cancel pagination on SIGINT/SIGTERM."""
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self._handle_signal, signum)
            except (NotImplementedError, RuntimeError):
                # not supported on this platform / thread
                pass

    def _remove_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(signum)
            except (NotImplementedError, RuntimeError):
                pass

    def _handle_signal(self, signum):
        logger.info(f"Received signal {signum}, cancelling pagination")
        if self.paginator:
            self.paginator.cancel()


def build_config() -> AppConfig:
    """Load the config file named by CONFIG_FILE and apply env overrides."""
    config_file = os.getenv("CONFIG_FILE", "config/local.yaml")
    config = load_config(config_file if os.path.exists(config_file) else None)

    base_url = os.getenv("BASE_URL")
    if base_url:
        config.transport.base_url = base_url

    start_cursor = os.getenv("START_CURSOR")
    if start_cursor:
        config.transport.start_cursor = int(start_cursor)

    return config


async def main() -> int:
    """Main entry point."""
    config = build_config()
    setup_logging(config.logging)

    service = PaginationService(config)
    return await service.run()


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
