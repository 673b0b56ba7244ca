from collections.abc import Callable
from collections.abc import Hashable
from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.helpers import bind_arguments
from kvpipe.helpers import iter_entries
from kvpipe.types import Entry


class Distinct[K, V](AbstractStream[K, V]):
  """Yields the first entry of every distinct value.

  Without an identity callable values are compared strictly: two values are
  the same only if they are of the same type and equal, so `1`, `1.0` and
  `True` are distinct. With `identity(value, key)` entries are compared by
  the returned identity instead.

  Memory grows with the number of distinct values seen.
  """

  def __init__(self, source: Any, identity: Callable[..., Hashable] | None = None) -> None:
    super().__init__(source)
    self._source = source
    self._identity = bind_arguments(identity, 2) if identity is not None else None

  def iterate(self) -> Iterator[Entry[K, V]]:
    if self._identity is None:
      yield from self._generic()
      return
    yield from self._identifiable(self._identity)

  def _identifiable(self, identify: Callable[..., Hashable]) -> Iterator[Entry[K, V]]:
    identities: set[Hashable] = set()

    for key, value in iter_entries(self._source):
      identity = identify(value, key)
      if identity in identities:
        continue
      identities.add(identity)
      yield key, value

  def _generic(self) -> Iterator[Entry[K, V]]:
    hashed: set[tuple[type, Hashable]] = set()
    # Unhashable values fall back to a linear scan.
    unhashed: list[Any] = []

    for key, value in iter_entries(self._source):
      try:
        marker = (type(value), value)
        if marker in hashed:
          continue
        hashed.add(marker)
      except TypeError:
        if any(type(seen) is type(value) and seen == value for seen in unhashed):
          continue
        unhashed.append(value)
      yield key, value
