"""Metric data structures for the Solr status collector."""

from dataclasses import dataclass, fields
from typing import Dict


@dataclass
class MetricsRecord:
    """One poll's worth of Solr gauges. Absent source fields stay at 0."""

    num_docs: int = 0
    deleted_docs: int = 0
    segment_count: int = 0
    size_in_bytes: int = 0
    merge_thread_count: int = 0

    def __post_init__(self):
        """Clamp negative values, all gauges are counts or sizes."""
        for field in fields(self):
            if getattr(self, field.name) < 0:
                setattr(self, field.name, 0)

    def gauges(self) -> Dict[str, int]:
        """
        Map PUTVAL type instances to values, in emission order.

        Returns:
            Dict[str, int]: e.g. {"numdocs": 42, ...}
        """
        return {
            "numdocs": self.num_docs,
            "deleteddocs": self.deleted_docs,
            "segmentcount": self.segment_count,
            "sizeinbytes": self.size_in_bytes,
            "mergethreadcount": self.merge_thread_count,
        }
