from dataclasses import dataclass


@dataclass
class CrawlMetrics:
    """Core crawling metrics"""
    pages_fetched: int = 0
    pages_per_second: float = 0.0
    queue_depth: int = 0
    fetch_success_rate: float = 0.0
    avg_response_time: float = 0.0
    fetch_errors: int = 0
    requests_dropped: int = 0
    candidates_seen: int = 0
    candidates_rejected: int = 0
    duplicates_skipped: int = 0
    tools_accepted: int = 0
    write_errors: int = 0
