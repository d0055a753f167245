"""tabstash - save, restore and share named groups of open editor documents."""

from tabstash.registry import GroupRegistry

__all__ = ["GroupRegistry"]
