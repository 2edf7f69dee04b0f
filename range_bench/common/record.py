"""
Result record emitted once per benchmark run.
"""

import json
from typing import Any, Dict


class BenchmarkResult:
    """Summary of one benchmark run.

    ``fields`` holds the pattern's descriptive parameters (``num_blocks`` and
    ``block_size``, or ``num_groups`` and ``page_sizes``) and is emitted first,
    in insertion order, followed by the measurements.
    """

    def __init__(self, fields: Dict[str, Any], parallel_downloads: int, elapsed_us: int,
                 total_bytes: int, mbps: float, fetch_count: int, latency_stats: Dict[str, float]):
        self.fields = dict(fields)
        self.parallel_downloads = parallel_downloads
        self.elapsed_us = elapsed_us
        self.total_bytes = total_bytes
        self.mbps = mbps
        self.fetch_count = fetch_count
        self.latency_stats = latency_stats

    def to_dict(self) -> Dict[str, Any]:
        record = dict(self.fields)
        record.update({
            'parallel_downloads': self.parallel_downloads,
            'elapsed_us': self.elapsed_us,
            'mbps': self.mbps,
            'total_bytes': self.total_bytes,
            'fetch_count': self.fetch_count,
            'avg_latency_ms': self.latency_stats['avg'],
            'p50_latency_ms': self.latency_stats['p50'],
            'p95_latency_ms': self.latency_stats['p95'],
            'p99_latency_ms': self.latency_stats['p99'],
        })
        return record

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
