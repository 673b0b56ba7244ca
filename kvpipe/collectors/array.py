from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.helpers import iter_entries
from kvpipe.types import Collector
from kvpipe.types import Entry
from kvpipe.types import KeyedIterable


class ArrayCollector[K, V](Collector[dict[K, V]], KeyedIterable[K, V]):
  """Eagerly collects a source into a dictionary.

  Later entries overwrite earlier entries sharing the same key.
  """

  def __init__(self, source: Any) -> None:
    self._source = source
    self._value: dict[K, V] = dict(iter_entries(source))

  @property
  def value(self) -> dict[K, V]:
    return self._value

  @property
  def aggregated(self) -> dict[str, Any]:
    return self._source.aggregated if isinstance(self._source, AbstractStream) else {}

  @property
  def closed(self) -> bool:
    return False

  def __iter__(self) -> Iterator[Entry[K, V]]:
    yield from self._value.items()

  def __len__(self) -> int:
    return len(self._value)
