"""API utility modules."""

from .responses import failure, success

__all__ = ["failure", "success"]
