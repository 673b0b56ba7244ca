from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.helpers import iter_entries
from kvpipe.types import Entry


class Merge(AbstractStream[Any, Any]):
  """Yields every entry of the first source, then every entry of the second.

  Keys are not deduplicated. The second source is not touched before the
  first one is exhausted.
  """

  def __init__(self, first: Any, second: Any) -> None:
    super().__init__(first, second)
    self._first = first
    self._second = second

  def iterate(self) -> Iterator[Entry[Any, Any]]:
    yield from iter_entries(self._first)
    yield from iter_entries(self._second)
