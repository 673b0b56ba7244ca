"""Operators that need the whole upstream in memory before yielding.

WARNING: both operators load the entire upstream into memory.
"""

from collections.abc import Callable
from collections.abc import Iterator
from functools import cmp_to_key
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.helpers import iter_entries
from kvpipe.types import Entry


class Reverse[K, V](AbstractStream[K, V]):
  """Yields all upstream entries in reverse order."""

  def __init__(self, source: Any) -> None:
    super().__init__(source)
    self._source = source

  def iterate(self) -> Iterator[Entry[K, V]]:
    buffer = list(iter_entries(self._source))
    yield from reversed(buffer)


class Sort[K, V](AbstractStream[K, V]):
  """Yields all upstream entries sorted by value, or by key with `by_keys`.

  The sort is stable. `comparator(first, second)` must return a negative
  number, zero or a positive number; without it natural ordering is used.
  """

  def __init__(
    self,
    source: Any,
    comparator: Callable[[Any, Any], int] | None = None,
    by_keys: bool = False,
  ) -> None:
    super().__init__(source)
    self._source = source
    self._comparator = comparator
    self._by_keys = by_keys

  def iterate(self) -> Iterator[Entry[K, V]]:
    position = 0 if self._by_keys else 1
    buffer = list(iter_entries(self._source))

    if self._comparator is None:
      buffer.sort(key=lambda entry: entry[position])
    else:
      comparator = self._comparator
      buffer.sort(key=cmp_to_key(lambda first, second: comparator(first[position], second[position])))

    yield from buffer
