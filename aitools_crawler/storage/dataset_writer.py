import json
import asyncio
import logging
from pathlib import Path

import aiofiles

from ..models import NormalizedTool

logger = logging.getLogger(__name__)


class DatasetWriter:
    """Append-only JSON Lines dataset; one line per accepted tool"""

    def __init__(self, path='crawl_data/dataset.jsonl', overwrite=True):
        self.path = Path(path)
        self.records_written = 0
        self._lock = asyncio.Lock()
        self.setup_directories(overwrite)

    def setup_directories(self, overwrite: bool):
        """Create the parent directory; start from an empty file unless appending to a previous run"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if overwrite and self.path.exists():
            logger.info(f"Replacing previous dataset {self.path}")
            self.path.unlink()

    async def append(self, tool: NormalizedTool) -> None:
        """Append one validated record"""
        line = json.dumps(tool.to_dict(), ensure_ascii=False)
        async with self._lock:
            async with aiofiles.open(self.path, 'a', encoding='utf-8') as f:
                await f.write(line + '\n')
            self.records_written += 1

