"""Solr core status and merge activity collector."""

import json
import logging
from typing import Optional

from ..config.models import SolrStatusConfig
from ..services.http_fetcher import HTTPFetcher
from ..utils.errors import CoreNotFoundError
from ..utils.json_tree import JSONTree
from ..utils.metrics import MetricsRecord
from .base import BaseCollector


MERGE_THREAD_PREFIX = "Lucene Merge Thread"


class SolrStatusCollector(BaseCollector):
    """
    Collect index statistics for one core plus the server's merge thread count.

    Two sequential requests per poll: core admin STATUS, then the thread
    dump. The thread dump is skipped only when the core does not exist.
    """

    def __init__(
        self,
        config: SolrStatusConfig,
        logger: logging.Logger,
        fetcher: Optional[HTTPFetcher] = None
    ):
        super().__init__(config, logger, fetcher)

    async def collect(self) -> MetricsRecord:
        """Collect metrics for the configured core."""
        return await self.fetch_status(self.config.core)

    async def fetch_status(self, core: str) -> MetricsRecord:
        """
        Query the Solr server and extract the relevant stats.

        Args:
            core: Core name

        Returns:
            MetricsRecord: Fresh record for this poll

        Raises:
            FetchError: Either request failed
            ParseError: Either response is not JSON
            CoreNotFoundError: The core is not served by this Solr instance
        """
        status = await self._fetch_json(self.config.core_status_url_for(core))

        # Solr replies 200 with an empty status for unknown cores
        if status.raw("status", core, "name") != json.dumps(core):
            raise CoreNotFoundError(core)

        record = MetricsRecord(
            num_docs=self._index_field(status, core, "numDocs"),
            deleted_docs=self._index_field(status, core, "deletedDocs"),
            segment_count=self._index_field(status, core, "segmentCount"),
            size_in_bytes=self._index_field(status, core, "sizeInBytes"),
        )

        threads = await self._fetch_json(self.config.thread_dump_url)
        record.merge_thread_count = self.count_merge_threads(threads)

        self.logger.debug(f"Collected {record} for core '{core}'")
        return record

    @staticmethod
    def _index_field(status: JSONTree, core: str, key: str) -> int:
        return status.as_int("status", core, "index", key)

    @staticmethod
    def count_merge_threads(threads: JSONTree) -> int:
        """Count thread dump entries whose name starts with the Lucene merge prefix."""
        count = 0
        for thread in threads.children("system", "threadDump"):
            name = thread.raw("name").strip('"')
            if name.startswith(MERGE_THREAD_PREFIX):
                count += 1
        return count
