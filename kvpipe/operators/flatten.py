from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.helpers import iter_entries
from kvpipe.types import Entry


class Flatten(AbstractStream[Any, Any]):
  """Yields the entries of every nested source produced by upstream.

  Each upstream value must itself be a source (a stream, buffer, mapping or
  iterable). Inner entries are re-keyed sequentially from 0 unless
  `preserve_keys` is set, in which case inner keys are yielded as they are.
  Colliding inner keys are not deduplicated.
  """

  def __init__(self, source: Any, preserve_keys: bool = False) -> None:
    super().__init__(source)
    self._source = source
    self._preserve_keys = preserve_keys

  def iterate(self) -> Iterator[Entry[Any, Any]]:
    position = 0
    for _, inner in iter_entries(self._source):
      for key, value in iter_entries(inner):
        if self._preserve_keys:
          yield key, value
          continue
        yield position, value
        position += 1
