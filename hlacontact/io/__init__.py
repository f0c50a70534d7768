"""
Dataset loading and caching collaborators.
"""
from hlacontact.io.cache import DatasetCache
from hlacontact.io.loaders import DatasetLoader, read_pairs, read_table, write_table

__all__ = ['DatasetCache', 'DatasetLoader', 'read_pairs', 'read_table', 'write_table']
