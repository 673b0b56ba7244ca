from collections.abc import Callable
from typing import Any

from kvpipe.helpers import bind_arguments
from kvpipe.types import Reducer


class Sum(Reducer[Any, Any, Any]):
  """Sums values, skipping None.

  The sum is None until the first value that is not None, unless an
  initial value is given. An `extractor(value, key)` selects what is summed.
  """

  def __init__(self, initial: int | float | None = None, extractor: Callable[..., Any] | None = None) -> None:
    self._value = initial
    self._extractor = bind_arguments(extractor, 2) if extractor else (lambda value, key: value)

  @property
  def value(self) -> Any:
    return self._value

  def next(self, value: Any, key: Any) -> None:
    value = self._extractor(value, key)
    if value is None:
      return
    self._value = value if self._value is None else self._value + value
