"""
Object storage systems.
"""

from .base import ObjectMeta, ObjectStorageSystem
from .local import LocalFileSystem
from .memory import InMemorySystem

__all__ = ['ObjectMeta', 'ObjectStorageSystem', 'LocalFileSystem', 'InMemorySystem']
