# hlacontact/io/cache.py
"""
Read-through cache with a fixed time-to-live for parsed datasets.
"""
import logging
import time
from typing import Callable, Generic, Optional, TypeVar

from hlacontact.exceptions import DataUnavailableError

T = TypeVar('T')


class DatasetCache(Generic[T]):
    """Holds the last good snapshot of a dataset and when it was loaded

    * hit (snapshot younger than the TTL): the snapshot is returned unchanged
    * miss: the loader runs and its result replaces the snapshot
    * failed reload: the previous snapshot is returned if there is one,
      otherwise DataUnavailableError is raised
    """

    DEFAULT_TTL = 3600.0

    def __init__(self, ttl_seconds: float = DEFAULT_TTL,
                 clock: Callable[[], float] = time.monotonic,
                 name: str = "dataset"):
        self.ttl_seconds = float(ttl_seconds)
        self.clock = clock
        self.name = name
        self.snapshot: Optional[T] = None
        self.last_loaded_at: Optional[float] = None
        self.logger = logging.getLogger(f"hlacontact.io.cache.{name}")

    def is_fresh(self) -> bool:
        """True when a snapshot exists and is younger than the TTL"""
        if self.snapshot is None or self.last_loaded_at is None:
            return False
        return (self.clock() - self.last_loaded_at) < self.ttl_seconds

    def get_or_load(self, loader: Callable[[], T]) -> T:
        """Return the cached snapshot, reloading it when stale

        Args:
            loader: Zero-argument callable producing a fresh snapshot

        Returns:
            Fresh or cached snapshot

        Raises:
            DataUnavailableError: If loading fails and nothing is cached
        """
        if self.is_fresh():
            self.logger.debug(f"Using cached {self.name}")
            return self.snapshot

        try:
            value = loader()
        except Exception as e:
            if self.snapshot is not None:
                self.logger.warning(f"Reloading {self.name} failed ({e}); using last good snapshot")
                return self.snapshot
            self.logger.error(f"Loading {self.name} failed and no cached snapshot exists: {e}")
            if isinstance(e, DataUnavailableError):
                raise
            raise DataUnavailableError(f"Failed to load {self.name}: {e}", {'dataset': self.name}) from e

        self.snapshot = value
        self.last_loaded_at = self.clock()
        self.logger.info(f"Loaded {self.name}")
        return value

    def invalidate(self) -> None:
        """Force the next get_or_load to reload (the snapshot is kept as fallback)"""
        self.last_loaded_at = None
