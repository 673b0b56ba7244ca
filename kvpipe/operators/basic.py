"""Stateless and counting operators that preserve the order of entries."""

from collections.abc import Callable
from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.errors import LogicError
from kvpipe.helpers import bind_arguments
from kvpipe.helpers import iter_entries
from kvpipe.types import Entry


class Filter[K, V](AbstractStream[K, V]):
  """Yields entries for which `predicate(value, key)` is truthy."""

  def __init__(self, source: Any, predicate: Callable[..., bool]) -> None:
    super().__init__(source)
    self._source = source
    self._predicate = bind_arguments(predicate, 2)

  def iterate(self) -> Iterator[Entry[K, V]]:
    for key, value in iter_entries(self._source):
      if self._predicate(value, key):
        yield key, value


class Map(AbstractStream[Any, Any]):
  """Transforms values and/or keys of every entry.

  The value transform is called as `value_transform(value, key)` and the key
  transform as `key_transform(key, value)`, both with the original entry.
  An omitted transform leaves its part of the entry unchanged.
  """

  def __init__(
    self,
    source: Any,
    value_transform: Callable[..., Any] | None = None,
    key_transform: Callable[..., Any] | None = None,
  ) -> None:
    """
    Raises:
        LogicError: If neither transform is provided.
    """
    if value_transform is None and key_transform is None:
      raise LogicError("At least one transformation function must be provided, either for keys or for values.")

    super().__init__(source)
    self._source = source
    self._value_transform = bind_arguments(value_transform, 2) if value_transform else (lambda value, key: value)
    self._key_transform = bind_arguments(key_transform, 2) if key_transform else (lambda key, value: key)

  def iterate(self) -> Iterator[Entry[Any, Any]]:
    for key, value in iter_entries(self._source):
      yield self._key_transform(key, value), self._value_transform(value, key)


class Tap[K, V](AbstractStream[K, V]):
  """Calls `callback(value, key)` for every entry before yielding it unchanged."""

  def __init__(self, source: Any, callback: Callable[..., Any]) -> None:
    super().__init__(source)
    self._source = source
    self._callback = bind_arguments(callback, 2)

  def iterate(self) -> Iterator[Entry[K, V]]:
    for key, value in iter_entries(self._source):
      self._callback(value, key)
      yield key, value


class Take[K, V](AbstractStream[K, V]):
  """Yields the first `count` entries.

  Upstream is never pulled for more than `count` entries.
  """

  def __init__(self, source: Any, count: int) -> None:
    if count < 0:
      raise ValueError(f"Count must not be negative, got {count}.")

    super().__init__(source)
    self._source = source
    self._count = count

  def iterate(self) -> Iterator[Entry[K, V]]:
    if self._count == 0:
      return

    for position, (key, value) in enumerate(iter_entries(self._source), start=1):
      yield key, value
      if position >= self._count:
        return


class Skip[K, V](AbstractStream[K, V]):
  """Discards the first `count` entries and yields the rest."""

  def __init__(self, source: Any, count: int) -> None:
    if count < 0:
      raise ValueError(f"Count must not be negative, got {count}.")

    super().__init__(source)
    self._source = source
    self._count = count

  def iterate(self) -> Iterator[Entry[K, V]]:
    for position, (key, value) in enumerate(iter_entries(self._source), start=1):
      if position <= self._count:
        continue
      yield key, value


class TakeUntil[K, V](AbstractStream[K, V]):
  """Yields entries until `predicate(value, key)` is truthy.

  The entry that satisfied the predicate is not yielded and nothing is
  pulled after it.
  """

  def __init__(self, source: Any, predicate: Callable[..., bool]) -> None:
    super().__init__(source)
    self._source = source
    self._predicate = bind_arguments(predicate, 2)

  def iterate(self) -> Iterator[Entry[K, V]]:
    for key, value in iter_entries(self._source):
      if self._predicate(value, key):
        return
      yield key, value
