from collections.abc import Iterator
from typing import Any
from typing import Literal

from kvpipe.base import AbstractStream
from kvpipe.errors import LogicError
from kvpipe.errors import OutOfBoundsError
from kvpipe.errors import UnsupportedKeyError
from kvpipe.helpers import iter_entries
from kvpipe.types import Collector
from kvpipe.types import Entry
from kvpipe.types import KeyedIterable

SCALAR_KEY_TYPES = (str, int, float, bytes, tuple)

type IndexKey = tuple[Literal["value"], Any] | tuple[Literal["identity"], int]


def _index_key(key: Any) -> IndexKey:
  """Tag a key as indexed by value (scalars) or by identity (other objects)."""
  match key:
    case None:
      raise UnsupportedKeyError(key)
    case str() | int() | float() | bytes() | tuple():
      try:
        hash(key)
      except TypeError as error:
        raise UnsupportedKeyError(key) from error
      return "value", key
    case _:
      return "identity", id(key)


class IndexedCollector[K, V](Collector[Iterator[Entry[K, V]]], KeyedIterable[K, V]):
  """Eagerly collects a source into a multi-valued index.

  Every value is kept, in order, under its key, so duplicate keys are not
  lost. Scalar keys (strings, numbers, bytes and hashable tuples) are
  matched by value; any other object is matched by identity. None keys are
  not supported. Iterating the collector replays the original entries.
  """

  def __init__(self, source: Any) -> None:
    self._source = source
    self._collected: list[Entry[K, V]] = []
    self._index: dict[IndexKey, list[V]] = {}
    # Identity-indexed keys are kept alive so their ids stay unique.
    self._objects: dict[int, K] = {}

    for key, value in iter_entries(source):
      self._collected.append((key, value))
      index_key = _index_key(key)
      self._index.setdefault(index_key, []).append(value)
      if index_key[0] == "identity":
        self._objects[id(key)] = key

  @property
  def value(self) -> Iterator[Entry[K, V]]:
    return iter(self)

  @property
  def aggregated(self) -> dict[str, Any]:
    return self._source.aggregated if isinstance(self._source, AbstractStream) else {}

  @property
  def closed(self) -> bool:
    return False

  def __contains__(self, key: object) -> bool:
    return _index_key(key) in self._index

  def __getitem__(self, key: K) -> list[V]:
    """Get every value collected under the key, in order.

    Raises:
        OutOfBoundsError: If nothing was collected under the key.
        UnsupportedKeyError: If the key can not be indexed.
    """
    index_key = _index_key(key)
    if index_key not in self._index:
      raise OutOfBoundsError(key)
    return list(self._index[index_key])

  def __setitem__(self, key: Any, value: Any) -> None:
    raise LogicError(f"Cannot set value for key {key!r}. Collector {type(self).__name__} is read-only.")

  def __delitem__(self, key: Any) -> None:
    raise LogicError(f"Cannot unset value for key {key!r}. Collector {type(self).__name__} is read-only.")

  def __iter__(self) -> Iterator[Entry[K, V]]:
    yield from self._collected

  def __len__(self) -> int:
    return len(self._collected)
