from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.helpers import iter_entries
from kvpipe.types import Collector
from kvpipe.types import Entry
from kvpipe.types import KeyedIterable


class IterableCollector[K, V](Collector[Iterator[Entry[K, V]]], KeyedIterable[K, V]):
  """Lazily passes a source through, counting the entries yielded."""

  def __init__(self, source: Any) -> None:
    self._source = source
    self._closed = False
    self._count = 0

  @property
  def value(self) -> Iterator[Entry[K, V]]:
    return iter(self)

  @property
  def aggregated(self) -> dict[str, Any]:
    return self._source.aggregated if isinstance(self._source, AbstractStream) else {}

  @property
  def closed(self) -> bool:
    return self._closed

  @property
  def count(self) -> int:
    """Number of entries yielded so far."""
    return self._count

  def __iter__(self) -> Iterator[Entry[K, V]]:
    self._closed = True
    for key, value in iter_entries(self._source):
      yield key, value
      self._count += 1
