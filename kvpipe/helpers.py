from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Mapping
import inspect
from typing import Any

from kvpipe.types import Entry
from kvpipe.types import KeyedIterable

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class Pairs[K, V](KeyedIterable[K, V]):
  """Keyed iterable over an iterable of `(key, value)` tuples.

  Plain iterables are keyed by position when used as a stream source. Wrap
  them in `Pairs` when their items already are entries, for example when
  the same key occurs more than once.
  """

  def __init__(self, entries: Iterable[tuple[K, V]]) -> None:
    self._entries = entries

  def __iter__(self) -> Iterator[Entry[K, V]]:
    for key, value in self._entries:
      yield key, value


def iter_entries(source: Any) -> Iterator[Entry[Any, Any]]:
  """Iterate any supported source as `(key, value)` entries.

  Args:
      source: A keyed iterable, a mapping, or any other iterable.

  Returns:
      An iterator of entries. Keyed iterables yield their own entries,
      mappings yield their items and any other iterable is keyed by
      position.

  Raises:
      TypeError: If the source is not iterable.
  """
  match source:
    case KeyedIterable():
      return iter(source)
    case Mapping():
      return iter(source.items())
    case _:
      return enumerate(source)


def positional_arity(func: Callable[..., Any]) -> int | None:
  """Count the positional parameters a callable accepts.

  Returns:
      The number of positional parameters, None if the callable accepts
      `*args`, or 1 if its signature can not be inspected.
  """
  try:
    parameters = inspect.signature(func).parameters.values()
  except (TypeError, ValueError):
    # Builtin types such as `str` or `bool` expose no signature.
    return 1

  if any(p.kind == inspect.Parameter.VAR_POSITIONAL for p in parameters):
    return None

  return len([p for p in parameters if p.kind in _POSITIONAL])


def bind_arguments(func: Callable[..., Any], offered: int) -> Callable[..., Any]:
  """Adapt a user callable to the number of arguments an operator offers.

  Operators call user callables with a fixed argument list, e.g. `(value,
  key)`. A callable declaring fewer positional parameters receives only the
  leading arguments, so `lambda value: ...` can be used wherever `(value,
  key)` is offered.

  Args:
      func: The user supplied callable.
      offered: How many positional arguments the operator passes.

  Returns:
      The callable itself, or a wrapper dropping the surplus arguments.
  """
  arity = positional_arity(func)

  if arity is None or arity >= offered:
    return func

  return lambda *args: func(*args[:arity])
