from collections.abc import Callable
from typing import Any

from kvpipe.reducers.callback import Callback
from kvpipe.types import Reducer

type ReducerSpec = type[Reducer[Any, Any, Any]] | Reducer[Any, Any, Any] | Callable[..., Any]


def create_reducer(reducer: ReducerSpec, *args: Any, **kwargs: Any) -> Reducer[Any, Any, Any]:
  """Build a reducer from a class, an instance or a plain callable.

  Args:
      reducer: One of the following:
               - A `Reducer` subclass, instantiated with the arguments.
               - A `Reducer` instance, used as is.
               - A callable `(carry, value, key) -> carry`, wrapped in a
                 `Callback` reducer with the arguments (e.g. `initial`).
      *args: Positional arguments for the reducer.
      **kwargs: Keyword arguments for the reducer.

  Returns:
      A fresh or the given reducer instance.

  Raises:
      TypeError: If the argument is neither a reducer nor callable.

  Example:
      >>> create_reducer(Sum, initial=10)
      >>> create_reducer(lambda carry, value: carry + value, 0)
  """
  match reducer:
    case type() if issubclass(reducer, Reducer):
      return reducer(*args, **kwargs)
    case Reducer():
      return reducer
    case _ if callable(reducer):
      return Callback(reducer, *args, **kwargs)
    case _:
      raise TypeError(f"Reducer must be a Reducer class, instance or a callable, not {type(reducer).__name__}")
