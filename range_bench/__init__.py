"""
Parallel byte-range retrieval benchmark for object storage.
"""

__version__ = "0.1.0"
