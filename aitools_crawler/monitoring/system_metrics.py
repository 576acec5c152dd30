from dataclasses import dataclass


@dataclass
class SystemMetrics:
    """Host and crawler-process resource usage"""
    cpu_percent: float = 0.0
    memory_percent: float = 0.0
    process_rss_mb: float = 0.0
    process_threads: int = 0
    # Chromium renderers run as children of the crawler process
    browser_processes: int = 0
    open_files: int = 0
