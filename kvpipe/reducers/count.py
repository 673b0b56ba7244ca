from collections.abc import Callable
from typing import Any

from kvpipe.helpers import bind_arguments
from kvpipe.types import Reducer


class Count(Reducer[Any, Any, int]):
  """Counts entries, optionally only those where `filter(value, key)` is truthy."""

  def __init__(self, filter: Callable[..., bool] | None = None) -> None:
    self._value = 0
    self._filter = bind_arguments(filter, 2) if filter else None

  @property
  def value(self) -> int:
    return self._value

  def next(self, value: Any, key: Any) -> None:
    if self._filter is not None and not self._filter(value, key):
      return
    self._value += 1
