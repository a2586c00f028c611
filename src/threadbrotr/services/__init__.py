"""Service layer.

Attributes:
    ThreadResolver: Reconstructs a thread from a NIP-19 reference.
"""

from .resolver import ResolvedThread, ResolverConfig, ThreadResolver


__all__ = ["ResolvedThread", "ResolverConfig", "ThreadResolver"]
