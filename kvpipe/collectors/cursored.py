from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.errors import LogicError
from kvpipe.helpers import iter_entries
from kvpipe.types import Collector
from kvpipe.types import Entry
from kvpipe.types import KeyedIterable


class CursoredCollector[K, V](Collector[Iterator[Entry[K, V]]], KeyedIterable[K, V]):
  """Lazily yields one page of a source and tells whether more follow.

  The source is expected to start at `offset` already (e.g. a paginated
  query); the collector yields at most `limit` entries and pulls one entry
  more to find out whether another page exists. `previous` and `next` are
  the offsets of the neighbouring pages.

  Aggregated values of a stream source are snapshotted after every yielded
  entry, so they cover exactly the entries of this page even though one
  extra entry is pulled.
  """

  def __init__(self, source: Any, offset: int = 0, limit: int | None = None) -> None:
    if offset < 0:
      raise ValueError(f"Offset must not be negative, got {offset}.")
    if limit is not None and limit < 1:
      raise ValueError(f"Limit must be at least 1, got {limit}.")

    self._source = source
    self._offset = offset
    self._limit = limit
    self._closed = False
    self._exhausted = False
    self._has_more = False
    self._aggregated: dict[str, Any] = {}

  @property
  def offset(self) -> int:
    return self._offset

  @property
  def limit(self) -> int | None:
    return self._limit

  @property
  def value(self) -> Iterator[Entry[K, V]]:
    return iter(self)

  @property
  def aggregated(self) -> dict[str, Any]:
    """
    Raises:
        LogicError: If the collector has not been iterated yet.
    """
    if not self._closed:
      raise LogicError("Collector must be iterated first.")
    return self._aggregated

  @property
  def closed(self) -> bool:
    return self._closed

  @property
  def previous(self) -> int | None:
    """Offset of the previous page, or None on the first page."""
    if self._offset <= 0:
      return None
    return 0 if self._limit is None else max(0, self._offset - self._limit)

  @property
  def next(self) -> int | None:
    """Offset of the next page, or None when this is the last page.

    Raises:
        LogicError: If the collector has not been fully iterated yet.
    """
    if not self.has_more or self._limit is None:
      return None
    return self._offset + self._limit

  @property
  def has_more(self) -> bool:
    """
    Raises:
        LogicError: If the collector has not been fully iterated yet.
    """
    if not self._exhausted:
      raise LogicError("Collector must be fully iterated first.")
    return self._has_more

  def __iter__(self) -> Iterator[Entry[K, V]]:
    if self._closed:
      raise LogicError(f"{type(self).__name__} is closed, it can be iterated only once.")

    self._closed = True
    for position, (key, value) in enumerate(iter_entries(self._source), start=1):
      if self._limit is not None and position > self._limit:
        self._has_more = True
        break
      yield key, value
      self._aggregated = self._snapshot()

    if not self._has_more:
      self._aggregated = self._snapshot()
    self._exhausted = True

  def _snapshot(self) -> dict[str, Any]:
    if not isinstance(self._source, AbstractStream):
      return {}
    return {name: aggregator.value for name, aggregator in self._source.aggregators.items()}
