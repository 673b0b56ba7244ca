from collections.abc import Callable
from typing import Any

from kvpipe.helpers import bind_arguments
from kvpipe.types import Reducer


class Average(Reducer[Any, Any, float | None]):
  """Computes the arithmetic mean of values.

  None values are skipped, or counted as zero when `count_none` is set. An
  `initial` value is added to the total without being counted. The average
  is None while nothing has been counted.
  """

  def __init__(
    self,
    initial: int | float | None = None,
    extractor: Callable[..., Any] | None = None,
    count_none: bool = False,
  ) -> None:
    self._total: float | None = float(initial) if initial is not None else None
    self._count = 0
    self._extractor = bind_arguments(extractor, 2) if extractor else (lambda value, key: value)
    self._count_none = count_none

  @property
  def value(self) -> float | None:
    if self._count == 0 or self._total is None:
      return None
    return self._total / self._count

  def next(self, value: Any, key: Any) -> None:
    value = self._extractor(value, key)
    if value is not None or self._count_none:
      self._count += 1
    if value is None:
      return
    self._total = (self._total or 0.0) + float(value)
