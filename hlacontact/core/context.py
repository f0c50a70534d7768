"""
context.py -- Provide application context for the HLA contact pipeline
"""
import logging
from typing import Optional

from hlacontact.config import ConfigManager
from hlacontact.io.cache import DatasetCache
from hlacontact.io.loaders import DatasetLoader


class ApplicationContext:
    """Application context: configuration plus the dataset caches.

    Unlike a process-wide singleton, each context owns its caches; callers that
    want to share cached datasets pass the same context around.
    """

    def __init__(self, config_path: Optional[str] = None,
                 config_manager: Optional[ConfigManager] = None):
        """Initialize application context

        Args:
            config_path: Path to configuration file
            config_manager: Pre-built configuration manager (takes precedence)
        """
        self.logger = logging.getLogger("hlacontact.context")

        self.config_manager = config_manager or ConfigManager(config_path)
        self.logger.info("Configuration initialized")

        ttl = float(self.config_manager.get('cache.ttl_seconds', DatasetCache.DEFAULT_TTL))
        self.dataset_cache = DatasetCache(ttl_seconds=ttl, name="datasets")
        self.entropy_cache = DatasetCache(ttl_seconds=ttl, name="entropy")
        self.loader = DatasetLoader(self.config_manager)

    @property
    def config(self):
        """Raw configuration dictionary"""
        return self.config_manager.config

    def get_datasets(self):
        """Contact and sequence tables, served through the TTL cache"""
        return self.dataset_cache.get_or_load(self.loader.load_datasets)

    def get_entropy(self):
        """Entropy table, served through its own TTL cache"""
        return self.entropy_cache.get_or_load(self.loader.load_entropy)
