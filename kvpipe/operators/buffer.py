"""Operators batching consecutive entries into buffers."""

from collections.abc import Callable
from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.helpers import bind_arguments
from kvpipe.helpers import iter_entries
from kvpipe.models import Buffer
from kvpipe.types import Entry

DEFAULT_BUFFER_SIZE = 1000


class BufferCount[K, V](AbstractStream[int, Buffer[K, V]]):
  """Batches entries into buffers of `count` entries.

  A buffer is yielded as soon as it holds `count` entries. A trailing
  partial buffer is yielded when upstream is exhausted; an empty upstream
  yields nothing. Buffers are keyed sequentially from 0.
  """

  def __init__(self, source: Any, count: int = DEFAULT_BUFFER_SIZE) -> None:
    if count < 1:
      raise ValueError(f"Buffer size must be at least 1, got {count}.")

    super().__init__(source)
    self._source = source
    self._count = count

  def iterate(self) -> Iterator[Entry[int, Buffer[K, V]]]:
    position = 0
    entries: list[Entry[K, V]] = []

    for key, value in iter_entries(self._source):
      entries.append((key, value))
      if len(entries) == self._count:
        yield position, Buffer(entries)
        position += 1
        entries = []

    if entries:
      yield position, Buffer(entries)


class BufferWhile[K, V](AbstractStream[int, Buffer[K, V]]):
  """Batches consecutive entries while `predicate(buffer, value, key)` holds.

  The first entry seeds a buffer. Every following entry is offered to the
  predicate together with the current buffer, before the entry is added,
  so the predicate can compare it with `buffer.last()`. If the predicate
  holds the entry joins the buffer; otherwise the buffer is yielded and a
  new one is seeded with the entry. The last buffer is yielded when
  upstream is exhausted. Buffers are keyed sequentially from 0.
  """

  def __init__(self, source: Any, predicate: Callable[..., bool]) -> None:
    super().__init__(source)
    self._source = source
    self._predicate = bind_arguments(predicate, 3)

  def iterate(self) -> Iterator[Entry[int, Buffer[K, V]]]:
    position = 0
    entries: list[Entry[K, V]] = []
    buffer = Buffer(entries)

    for key, value in iter_entries(self._source):
      if not entries or self._predicate(buffer, value, key):
        entries.append((key, value))
        continue

      yield position, buffer
      position += 1
      entries = [(key, value)]
      buffer = Buffer(entries)

    if entries:
      yield position, buffer
