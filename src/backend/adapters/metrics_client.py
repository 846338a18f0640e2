# Author: Bradley R. Kinnard — counting everything

"""Prometheus metrics. Import and use from anywhere."""

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest

# one source unit, parse + walk + merge
analyze_latency = Histogram(
    "analyze_latency_seconds",
    "Time spent analyzing one source unit",
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)

# cache hits vs misses
cache_hit_total = Counter(
    "cache_hit_total",
    "Cache hits on source analysis"
)
cache_miss_total = Counter(
    "cache_miss_total",
    "Cache misses on source analysis"
)

# findings by rule
diagnostics_total = Counter(
    "diagnostics_total",
    "Diagnostics reported",
    ["rule"]  # waterfall-chain, prefer-parallel-combinator
)

# code that wouldn't parse
parse_error_total = Counter(
    "parse_error_total",
    "Source units rejected by the parser"
)

# batch files that timed out or crashed
batch_file_error_total = Counter(
    "batch_file_error_total",
    "Batch files that produced no result",
    ["reason"]  # timeout, crash
)


def get_metrics() -> bytes:
    """dump all metrics in prometheus format"""
    return generate_latest(REGISTRY)
