from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.errors import LogicError
from kvpipe.errors import OutOfBoundsError
from kvpipe.helpers import iter_entries
from kvpipe.types import Collector
from kvpipe.types import Entry
from kvpipe.types import KeyedIterable


class ListCollector[V](Collector[list[V]], KeyedIterable[int, V]):
  """Eagerly collects the values of a source into a list, dropping keys.

  The collector is read-only: indexing a missing position raises
  `OutOfBoundsError` and any assignment raises `LogicError`.
  """

  def __init__(self, source: Any) -> None:
    self._source = source
    self._value: list[V] = [value for _, value in iter_entries(source)]

  @property
  def value(self) -> list[V]:
    return self._value

  @property
  def aggregated(self) -> dict[str, Any]:
    return self._source.aggregated if isinstance(self._source, AbstractStream) else {}

  @property
  def closed(self) -> bool:
    return False

  def __contains__(self, offset: object) -> bool:
    return isinstance(offset, int) and 0 <= offset < len(self._value)

  def __getitem__(self, offset: int) -> V:
    if offset not in self:
      raise OutOfBoundsError(offset)
    return self._value[offset]

  def __setitem__(self, offset: Any, value: Any) -> None:
    raise LogicError(f"Cannot set value for key {offset!r}. Collector {type(self).__name__} is read-only.")

  def __delitem__(self, offset: Any) -> None:
    raise LogicError(f"Cannot unset value for key {offset!r}. Collector {type(self).__name__} is read-only.")

  def __iter__(self) -> Iterator[Entry[int, V]]:
    yield from enumerate(self._value)

  def __len__(self) -> int:
    return len(self._value)
