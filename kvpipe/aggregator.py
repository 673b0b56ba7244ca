from collections.abc import Iterator
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.operators.reduce import Reduce
from kvpipe.types import Entry


class Aggregator[K, V, R](AbstractStream[K, V]):
  """Names a reduction computed while the stream is consumed.

  An aggregator is a pass-through stage around a `Reduce` stage. Because it
  is a stream itself, several aggregators can be chained on one pipeline
  and a single drain updates all of them, each seeing every entry once.

  Attached aggregators are reachable from every downstream stream through
  `aggregators`, and their values through `aggregated`.
  """

  def __init__(self, name: str, reduce: Reduce[K, V, R]) -> None:
    """
    Raises:
        ValueError: If the name is empty.
    """
    if not name:
      raise ValueError("Aggregator name must not be empty.")

    super().__init__(reduce)
    self._name = name
    self._reduce = reduce

  @property
  def name(self) -> str:
    return self._name

  @property
  def value(self) -> R:
    """The reducer's current value, final once the stream is exhausted."""
    return self._reduce.reducer.value

  @property
  def aggregators(self) -> dict[str, "Aggregator[Any, Any, Any]"]:
    return {**super().aggregators, self._name: self}

  def iterate(self) -> Iterator[Entry[K, V]]:
    yield from self._reduce
