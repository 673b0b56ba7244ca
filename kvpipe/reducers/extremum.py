from collections.abc import Callable
from typing import Any

from kvpipe.helpers import bind_arguments
from kvpipe.types import Reducer


def _natural(first: Any, second: Any) -> int:
  return (first > second) - (first < second)


class _Extremum(Reducer[Any, Any, Any]):
  # Sign of comparator(candidate, current) that replaces the current value.
  _replaces: int

  def __init__(
    self,
    initial: Any = None,
    extractor: Callable[..., Any] | None = None,
    comparator: Callable[[Any, Any], int] | None = None,
  ) -> None:
    self._value = initial
    self._extractor = bind_arguments(extractor, 2) if extractor else (lambda value, key: value)
    self._comparator = comparator or _natural

  @property
  def value(self) -> Any:
    return self._value

  def next(self, value: Any, key: Any) -> None:
    value = self._extractor(value, key)
    if value is None:
      return
    if self._value is None:
      self._value = value
      return
    result = self._comparator(value, self._value)
    if (result > 0 and self._replaces > 0) or (result < 0 and self._replaces < 0):
      self._value = value


class Max(_Extremum):
  """Keeps the greatest value, skipping None.

  `extractor(value, key)` selects what is compared and `comparator(first,
  second)` orders two candidates; natural ordering is used by default.
  """

  _replaces = 1


class Min(_Extremum):
  """Keeps the smallest value, skipping None."""

  _replaces = -1
