import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class LogManager:
    """
    Log setup for one scraper run

    Console output stays at INFO. Everything goes to a dated crawler log,
    warnings and errors also to a dated error log, and per-page performance
    events go as JSON lines to a separate, non-propagating logger.
    """

    def __init__(self, log_dir: str = "crawl_data/logs", log_level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.day = datetime.now().strftime('%Y%m%d')
        self._installed: List[Tuple[logging.Logger, logging.Handler]] = []

        self.perf_logger = logging.getLogger('performance')
        self.setup_logging(log_level)

    def setup_logging(self, log_level: str):
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, log_level.upper()))
        root_logger.handlers.clear()

        console = logging.StreamHandler()
        console.setLevel(logging.INFO)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        self._install(root_logger, console)

        self._install(root_logger, self._file_handler('crawler', logging.DEBUG, DETAILED_FORMAT))
        self._install(root_logger, self._file_handler('errors', logging.WARNING, DETAILED_FORMAT))

        # Raw JSON lines, no formatter prefix
        self.perf_logger.setLevel(logging.INFO)
        self.perf_logger.propagate = False
        self._install(self.perf_logger, self._file_handler('performance', logging.INFO))

    def _file_handler(self, prefix: str, level: int, fmt: Optional[str] = None) -> logging.FileHandler:
        handler = logging.FileHandler(self.log_dir / f"{prefix}_{self.day}.log", encoding='utf-8')
        handler.setLevel(level)
        if fmt:
            handler.setFormatter(logging.Formatter(fmt))
        return handler

    def _install(self, target: logging.Logger, handler: logging.Handler):
        target.addHandler(handler)
        self._installed.append((target, handler))

    def log_performance_event(self, event_type: str, **fields):
        """Write one event as a JSON object on its own line"""
        self.perf_logger.info(json.dumps({
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            **fields
        }, default=str))

    def export_metrics_json(self, metrics_data: Dict[str, Any], filename: str = None) -> Path:
        """Write the final crawl report next to the logs"""
        filename = filename or f"metrics_export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
        export_path = self.log_dir / filename
        export_path.write_text(json.dumps(metrics_data, indent=2, default=str), encoding='utf-8')

        logging.getLogger(__name__).info(f"Metrics exported to {export_path}")
        return export_path

    def close(self):
        """Detach and close every handler this manager installed"""
        while self._installed:
            target, handler = self._installed.pop()
            target.removeHandler(handler)
            handler.close()
