"""Main application entry point for the Solr status collectd exporter."""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Awaitable, Callable, Optional

from .collectors.solr_collector import SolrStatusCollector
from .config.loader import ConfigLoader
from .config.models import SolrStatusConfig
from .services.http_fetcher import HTTPFetcher
from .services.retry_policy import CappedBackoffPolicy, FixedIntervalPolicy, WaitPolicy
from .utils.errors import PollError, StartupConfigError
from .utils.logger import setup_logger
from .utils.putval import PutvalEmitter


class SolrStatusApp:
    """
    Poll loop: collect, emit, wait, forever.

    A failed poll is logged and swallowed; only startup errors end the
    process.
    """

    def __init__(
        self,
        config: SolrStatusConfig,
        logger: Optional[logging.Logger] = None,
        collector: Optional[SolrStatusCollector] = None,
        emitter: Optional[PutvalEmitter] = None,
        wait_policy: Optional[WaitPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize application.

        Args:
            config: Resolved configuration
            logger: Logger (default: JSON logger on stderr)
            collector: Status collector (default: built from config)
            emitter: PUTVAL emitter (default: stdout for config.hostname)
            wait_policy: Idle-time policy (default: from config)
            sleep: Awaitable sleep, replaceable in tests
        """
        self.config = config
        self.logger = logger or setup_logger("solr_status", config.log_level)
        self.collector = collector or SolrStatusCollector(
            config, self.logger, HTTPFetcher(logger=self.logger)
        )
        self.emitter = emitter or PutvalEmitter(config.hostname)
        self.wait_policy = wait_policy or self._build_wait_policy(config)
        self._sleep = sleep

    @staticmethod
    def _build_wait_policy(config: SolrStatusConfig) -> WaitPolicy:
        if config.max_backoff > 0:
            return CappedBackoffPolicy(config.interval, config.max_backoff)
        return FixedIntervalPolicy(config.interval)

    async def poll_once(self) -> bool:
        """
        Run one collect-and-emit cycle.

        Returns:
            bool: True if five lines were emitted, False if the poll failed
        """
        try:
            record = await self.collector.collect()
        except PollError as e:
            self.logger.error(
                f"Poll failed: {e}",
                extra={
                    "error_type": type(e).__name__,
                    "cause": repr(e.__cause__) if e.__cause__ is not None else None,
                    "core": self.config.core
                }
            )
            return False
        except Exception as e:
            self.logger.error(
                f"Poll failed with unexpected error: {e}",
                exc_info=True,
                extra={"error_type": type(e).__name__, "core": self.config.core}
            )
            return False

        self.emitter.emit(record)
        return True

    async def run(self, max_polls: Optional[int] = None) -> None:
        """
        Poll until the process is killed (or max_polls polls have run).

        The first poll fires immediately.
        """
        self.logger.info(
            f"Polling core '{self.config.core}' on {self.config.base_url} "
            f"every {self.config.interval}s"
        )
        polls = 0
        while True:
            succeeded = await self.poll_once()
            polls += 1
            if max_polls is not None and polls >= max_polls:
                return

            delay = self.wait_policy.next_delay(succeeded)
            self.logger.debug(f"Next poll in {delay:.1f}s")
            await self._sleep(delay)

    def _signal_handler(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, shutting down")
        sys.exit(0)

    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='collectd exec plugin reporting Apache Solr core status',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Poll a core forever (collectd exec plugin)
  solr-status --server localhost:8983 --core products

  # Single poll, exit status reports success
  solr-status --server solr.internal:8983 --core products --https --run-once

Environment:
  COLLECTD_HOSTNAME   reporting hostname (default: localhost)
  COLLECTD_INTERVAL   poll interval in seconds (default: 20)
        """
    )

    parser.add_argument('--server', help='the solr server we need to poll (host[:port])')
    parser.add_argument('--core', help='the core name we want to get data from')
    parser.add_argument(
        '--https',
        action='store_true',
        default=None,
        help='use HTTPS while connecting to the solr server'
    )
    parser.add_argument('--config', help='Optional YAML configuration file')
    parser.add_argument(
        '--run-once',
        action='store_true',
        help='Poll once and exit (status 1 if the poll failed)'
    )
    parser.add_argument(
        '--max-backoff',
        type=int,
        default=None,
        help='Back off exponentially on failures up to this many seconds (default: off)'
    )
    parser.add_argument(
        '--log-level',
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO or LOG_LEVEL env var)'
    )
    return parser


def main(argv=None):
    """
    CLI entry point.

    Parses command-line arguments and starts the poll loop.
    """
    args = build_parser().parse_args(argv)

    try:
        config = ConfigLoader.load(
            server=args.server,
            core=args.core,
            use_https=args.https,
            config_path=args.config,
            max_backoff=args.max_backoff,
            log_level=args.log_level
        )
    except StartupConfigError as e:
        print(e)
        sys.exit(1)

    app = SolrStatusApp(config)

    if args.run_once:
        succeeded = asyncio.run(app.poll_once())
        sys.exit(0 if succeeded else 1)

    app.install_signal_handlers()
    asyncio.run(app.run())


if __name__ == '__main__':
    main()
