from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.errors import LogicError
from kvpipe.helpers import iter_entries
from kvpipe.types import Entry
from kvpipe.types import Reducer


class Reduce[K, V, R](AbstractStream[K, V]):
  """Feeds every entry into a reducer while passing it through unchanged.

  The reducer's `next(value, key)` is called exactly once per entry, in
  stream order, right before the entry is yielded.
  """

  def __init__(self, source: Any, reducer: Reducer[K, V, R]) -> None:
    super().__init__(source)
    self._source = source
    self._reducer = reducer

  @property
  def reducer(self) -> Reducer[K, V, R]:
    return self._reducer

  @property
  def value(self) -> R:
    """The final reduced value.

    Raises:
        LogicError: If the stream has not been fully iterated.
    """
    if not self.exhausted:
      raise LogicError("Stream is not iterated.")
    return self._reducer.value

  def iterate(self) -> Iterator[Entry[K, V]]:
    for key, value in iter_entries(self._source):
      self._reducer.next(value, key)
      yield key, value
