"""collectd exec plugin output (PUTVAL lines)."""

import sys
import time
from typing import List, Optional, TextIO

from .metrics import MetricsRecord


PLUGIN_NAME = "solr_status"


class PutvalEmitter:
    """Write MetricsRecord values as collectd PUTVAL gauge lines."""

    def __init__(
        self,
        hostname: str,
        stream: Optional[TextIO] = None,
        plugin: str = PLUGIN_NAME
    ):
        """
        Initialize emitter.

        Args:
            hostname: Host part of the collectd identifier
            stream: Output stream (default: sys.stdout at emit time)
            plugin: Plugin part of the collectd identifier
        """
        self.hostname = hostname
        self.plugin = plugin
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def format_lines(self, record: MetricsRecord, timestamp: int) -> List[str]:
        """
        Render a record as five PUTVAL lines sharing one timestamp.

        Args:
            record: Metrics to render
            timestamp: Unix time in whole seconds

        Returns:
            List[str]: Lines without trailing newline
        """
        return [
            f"PUTVAL {self.hostname}/{self.plugin}/gauge-{name} {timestamp}:{value}"
            for name, value in record.gauges().items()
        ]

    def emit(self, record: MetricsRecord, timestamp: Optional[int] = None) -> List[str]:
        """Write the record, flushing after every line so collectd sees it at once."""
        if timestamp is None:
            timestamp = int(time.time())

        lines = self.format_lines(record, timestamp)
        for line in lines:
            self.stream.write(line + "\n")
            self.stream.flush()
        return lines
