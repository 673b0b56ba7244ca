from collections.abc import Iterator
from typing import TYPE_CHECKING

from kvpipe.errors import LogicError
from kvpipe.models.item import Item
from kvpipe.types import Entry
from kvpipe.types import KeyedIterable

if TYPE_CHECKING:
  from kvpipe.stream import Stream


class Buffer[K, V](KeyedIterable[K, V]):
  """A finite, ordered batch of entries produced by a buffering operator.

  The producing operator owns the underlying list until the buffer is
  yielded; from then on nothing appends to it and the buffer is read-only,
  so it can be shared freely.
  """

  __slots__ = ("_entries",)

  def __init__(self, entries: list[Entry[K, V]]) -> None:
    self._entries = entries

  def first(self) -> Item[K, V]:
    """Get the first entry of the buffer.

    Raises:
        LogicError: If the buffer is empty.
    """
    if not self._entries:
      raise LogicError("Buffer is empty.")
    return Item(*self._entries[0])

  def last(self) -> Item[K, V]:
    """Get the last entry of the buffer.

    Raises:
        LogicError: If the buffer is empty.
    """
    if not self._entries:
      raise LogicError("Buffer is empty.")
    return Item(*self._entries[-1])

  def keys(self) -> list[K]:
    return [key for key, _ in self._entries]

  def values(self) -> list[V]:
    return [value for _, value in self._entries]

  def stream(self) -> "Stream[K, V]":
    """Wrap the buffered entries into a new stream."""
    from kvpipe.stream import Stream

    return Stream(self)

  def __iter__(self) -> Iterator[Entry[K, V]]:
    yield from self._entries

  def __len__(self) -> int:
    return len(self._entries)

  def __repr__(self) -> str:
    return f"Buffer({self._entries!r})"
