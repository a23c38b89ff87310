"""Pluggable storage for a user's LearningData."""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from gutsafe.models import LearningData, coerce_model

logger = logging.getLogger(__name__)


class LearningDataSource(ABC):
    """
    Abstract learning data source.

    The engine only needs load/save, so hosts can back it with whatever
    storage they already have (device storage, a database, a file).
    """

    @abstractmethod
    async def load(self) -> LearningData:
        """
        Load the user's history and profile.

        Returns an empty LearningData when nothing has been stored yet.
        """
        pass

    @abstractmethod
    async def save(self, data: LearningData) -> None:
        """Persist the given LearningData."""
        pass


class InMemoryLearningDataSource(LearningDataSource):
    """Keeps a copy of the data in memory. Useful for tests and demos."""

    def __init__(self, data: Optional[LearningData] = None):
        self._data = data.model_copy(deep=True) if data else LearningData()

    async def load(self) -> LearningData:
        return self._data.model_copy(deep=True)

    async def save(self, data: LearningData) -> None:
        self._data = data.model_copy(deep=True)


class JsonFileLearningDataSource(LearningDataSource):
    """Stores LearningData as a JSON document on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def load(self) -> LearningData:
        """
        Read and validate the JSON file.

        Raises:
            ValidationError: If the file content is not valid LearningData
        """
        if not self.path.exists():
            logger.info("No learning data at %s, starting empty", self.path)
            return LearningData()

        raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        data = coerce_model(LearningData, raw)
        logger.info(
            "Loaded %d data points from %s", data.data_point_count(), self.path
        )
        return data

    async def save(self, data: LearningData) -> None:
        payload = data.model_dump_json(indent=2)
        await asyncio.to_thread(self._write, payload)
        logger.debug("Saved learning data to %s", self.path)

    def _write(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(payload, encoding="utf-8")
