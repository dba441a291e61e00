"""
Framework components shared by the storage pipeline.

Currently provides typed, environment-backed configuration.
"""

from .config import StorageConfig, ObservabilityConfig

__all__ = [
    "StorageConfig",
    "ObservabilityConfig",
]
