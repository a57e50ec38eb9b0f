"""Base collector abstract class for Solr admin API collectors."""

from abc import ABC, abstractmethod
from typing import Any, Optional
import logging

from ..services.http_fetcher import HTTPFetcher
from ..utils.json_tree import JSONTree


class BaseCollector(ABC):
    """Abstract base class for all collectors."""

    def __init__(
        self,
        config: Any,
        logger: logging.Logger,
        fetcher: Optional[HTTPFetcher] = None
    ):
        """
        Initialize base collector.

        Args:
            config: Collector configuration
            logger: Logger instance
            fetcher: HTTP fetcher (default: HTTPFetcher with 5s timeout)
        """
        self.config = config
        self.logger = logger.getChild(self.__class__.__name__)
        self.fetcher = fetcher or HTTPFetcher(logger=self.logger)

    @abstractmethod
    async def collect(self) -> Any:
        """
        Collect metrics.

        Raises:
            PollError: Any collection error; the poll loop logs and retries
        """
        pass

    async def _fetch_json(self, url: str) -> JSONTree:
        """
        Fetch a URL and parse its body as JSON.

        Raises:
            FetchError: HTTP layer failure
            ParseError: Body is not JSON
        """
        body = await self.fetcher.fetch(url)
        return JSONTree.parse(body)
