"""Application-layer contracts."""

from .interfaces import GroundOpsRegistry

__all__ = ["GroundOpsRegistry"]
