from abc import ABC
from abc import abstractmethod
from collections.abc import Iterator
from typing import Any
from typing import TypeVar

K = TypeVar("K")
V = TypeVar("V")
R = TypeVar("R")

type Entry[K, V] = tuple[K, V]


class KeyedIterable[K, V](ABC):
  """
  Abstract base class for iterables that carry their own keys.

  Iterating a keyed iterable yields `(key, value)` tuples. Streams, buffers,
  collectors and `Pairs` are keyed iterables, so they can be used as a
  source of any stream without their keys being replaced by positions.
  """

  @abstractmethod
  def __iter__(self) -> Iterator[Entry[K, V]]:
    raise NotImplementedError


class Reducer[K, V, R](ABC):
  """
  Abstract base class for stateful accumulators.

  A reducer receives every entry of a stream exactly once, in stream order,
  through `next()`. Its `value` may be read at any time and always reflects
  the entries seen so far. Reducers can not be rewound.
  """

  @property
  @abstractmethod
  def value(self) -> R:
    """The reduced value accumulated so far."""
    raise NotImplementedError

  @abstractmethod
  def next(self, value: V, key: K) -> None:
    """
    Accumulates the next entry.

    Args:
        value: Value of the current entry.
        key: Key of the current entry.
    """
    raise NotImplementedError


class Collector[R](ABC):
  """
  Abstract base class for terminal collectors.

  A collector is constructed from a source and materializes it into a
  concrete structure exposed as `value`. Aggregated values of the source
  are proxied through `aggregated` when the source is a stream.
  """

  @property
  @abstractmethod
  def value(self) -> R:
    raise NotImplementedError

  @property
  @abstractmethod
  def aggregated(self) -> dict[str, Any]:
    raise NotImplementedError

  @property
  @abstractmethod
  def closed(self) -> bool:
    """Whether the collector was iterated and can not be iterated again."""
    raise NotImplementedError
