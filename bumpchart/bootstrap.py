"""Async resolution of the CSV row source.

Loading the parser is a host bootstrapping step: concurrent callers share a
single in-flight load, and a failed load is retried on the next request.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
from typing import Callable, Optional

from bumpchart.errors import SourceUnavailableError
from bumpchart.ports import RowSource

logger = logging.getLogger(__name__)


def load_pandas_source() -> RowSource:
    module = importlib.import_module("bumpchart.csv_source")
    return module.PandasCsvSource()


class SourceLoader:
    def __init__(self, factory: Callable[[], RowSource] = load_pandas_source) -> None:
        self._factory = factory
        self._source: Optional[RowSource] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def loaded(self) -> bool:
        return self._source is not None

    async def get(self) -> RowSource:
        if self._source is not None:
            return self._source
        if self._task is None:
            self._task = asyncio.ensure_future(asyncio.to_thread(self._factory))
        task = self._task
        try:
            source = await asyncio.shield(task)
        except Exception as e:
            if self._task is task:
                self._task = None
            logger.warning("CSV source failed to load: %s", e)
            raise SourceUnavailableError(str(e)) from e
        self._source = source
        return source
