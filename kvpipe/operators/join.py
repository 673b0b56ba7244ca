"""Operators joining entries: consecutive run compression and left join."""

from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.collectors.indexed import IndexedCollector
from kvpipe.helpers import bind_arguments
from kvpipe.helpers import iter_entries
from kvpipe.types import Entry

type Run = list[Entry[Any, Any]]


class CompressJoin(AbstractStream[Any, Any]):
  """Compresses runs of consecutive related entries into joined entries.

  Every entry after the first of a run is compared with the previous one
  through `predicate((previous_value, value), (previous_key, key), run)`.
  While the predicate holds the entry extends the run. Otherwise the run,
  a list of `(key, value)` tuples, is handed to `join(run)` and the entries
  of the returned source are yielded; the entry that broke the run starts
  the next one. The last run is joined when upstream is exhausted.

  Only consecutive entries are grouped, so upstream is expected to be
  ordered by whatever the predicate compares.
  """

  def __init__(
    self,
    source: Any,
    predicate: Callable[..., bool],
    join: Callable[[Run], Iterable[Any]],
  ) -> None:
    super().__init__(source)
    self._source = source
    self._predicate = bind_arguments(predicate, 3)
    self._join = join

  def iterate(self) -> Iterator[Entry[Any, Any]]:
    run: Run = []

    for key, value in iter_entries(self._source):
      if not run:
        run.append((key, value))
        continue

      previous_key, previous_value = run[-1]
      if self._predicate((previous_value, value), (previous_key, key), run):
        run.append((key, value))
        continue

      yield from iter_entries(self._join(run))
      run = [(key, value)]

    if run:
      yield from iter_entries(self._join(run))


class LeftJoin(AbstractStream[Any, list[Any]]):
  """Joins every left entry with all right values sharing its key.

  Yields `(key, [value, matches])` for every left entry, where `matches` is
  the ordered list of right values under the same key, or an empty list.
  The right source is fully materialized into an index on the first pull,
  so memory grows with its size. Keys are matched by value for scalars and
  by identity for other objects, see `IndexedCollector`.
  """

  def __init__(self, left: Any, right: Any) -> None:
    super().__init__(left, right)
    self._left = left
    self._right = right

  def iterate(self) -> Iterator[Entry[Any, list[Any]]]:
    index = IndexedCollector(self._right)

    for key, value in iter_entries(self._left):
      yield key, [value, index[key] if key in index else []]
