from collections.abc import Callable
from typing import Any

from kvpipe.helpers import bind_arguments
from kvpipe.types import Reducer


class Callback(Reducer[Any, Any, Any]):
  """Reduces with a user callable `callback(carry, value, key) -> carry`."""

  def __init__(self, callback: Callable[..., Any], initial: Any = None) -> None:
    self._callback = bind_arguments(callback, 3)
    self._value = initial

  @property
  def value(self) -> Any:
    return self._value

  def next(self, value: Any, key: Any) -> None:
    self._value = self._callback(self._value, value, key)
