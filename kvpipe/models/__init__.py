"""
Value objects produced while streaming: immutable items and entry buffers.
"""

from .buffer import Buffer
from .item import Item

__all__ = [
  "Buffer",
  "Item",
]
