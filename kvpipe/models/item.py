from collections.abc import Iterator
from typing import Any

from kvpipe.errors import LogicError
from kvpipe.errors import OutOfBoundsError


class Item[K, V]:
  """Immutable `(key, value)` pair with tuple-style access.

  Position 0 is the key and position 1 is the value. The item also unpacks
  as `key, value = item`.
  """

  __slots__ = ("_key", "_value")

  def __init__(self, key: K, value: V) -> None:
    object.__setattr__(self, "_key", key)
    object.__setattr__(self, "_value", value)

  @property
  def key(self) -> K:
    return self._key

  @property
  def value(self) -> V:
    return self._value

  def __getitem__(self, offset: int) -> Any:
    match offset:
      case int() if offset == 0 and not isinstance(offset, bool):
        return self._key
      case int() if offset == 1 and not isinstance(offset, bool):
        return self._value
      case _:
        raise OutOfBoundsError(offset, f"Item tuple does not have offset {offset!r}.")

  def __setitem__(self, offset: Any, value: Any) -> None:
    raise LogicError("Item is immutable.")

  def __delitem__(self, offset: Any) -> None:
    raise LogicError("Item is immutable.")

  def __setattr__(self, name: str, value: Any) -> None:
    raise LogicError("Item is immutable.")

  def __delattr__(self, name: str) -> None:
    raise LogicError("Item is immutable.")

  def __iter__(self) -> Iterator[Any]:
    yield self._key
    yield self._value

  def __len__(self) -> int:
    return 2

  def __eq__(self, other: object) -> bool:
    if isinstance(other, Item):
      return (self._key, self._value) == (other._key, other._value)
    return NotImplemented

  def __hash__(self) -> int:
    return hash((self._key, self._value))

  def __repr__(self) -> str:
    return f"Item(key={self._key!r}, value={self._value!r})"
