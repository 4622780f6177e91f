from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from venues.config import get_settings
from venues.data import Source, build_context, empty_context, load_dataset

logger = logging.getLogger(__name__)


class DatasetStore:
    """Owns the loaded dataset context for a long-running process.

    Loads run in a worker thread and are serialized: a reload queued behind
    another one always publishes last, so an older response can never
    replace a newer one. A failed load keeps the previous context.
    """

    def __init__(self, source: Optional[Source] = None):
        self.source = str(get_settings().data_source if source is None else source)
        self._context: Dict[str, object] = empty_context(self.source)
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def context(self) -> Dict[str, object]:
        return self._context

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def load(self) -> Dict[str, object]:
        async with self._lock:
            records, dropped = await asyncio.to_thread(load_dataset, self.source)
            self._context = build_context(records, source=self.source, dropped_rows=dropped)
            self._loaded = True
            logger.info("Dataset ready: %d records from %s", len(records), self.source)
            return self._context

    async def reload(self) -> Dict[str, object]:
        return await self.load()
