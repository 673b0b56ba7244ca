"""Exception hierarchy raised by kvpipe streams, operators and collectors."""

from typing import Any


class DatasetError(Exception):
  """Base class for every error raised by the library itself."""

  pass


class LogicError(DatasetError, RuntimeError):
  """Raised when the API is misused.

  Examples are iterating a closed stream, reading a reduced value before
  the stream was iterated, or mutating a read-only structure.
  """

  pass


class OutOfBoundsError(DatasetError, LookupError):
  """Raised when an indexed structure has no entry under the requested offset."""

  def __init__(self, offset: Any, message: str | None = None) -> None:
    self.offset = offset
    super().__init__(message or f"Offset {offset!r} does not exist.")


class UnsupportedKeyError(DatasetError, TypeError):
  """Raised when a key can be indexed neither by value nor by identity."""

  def __init__(self, key: Any, message: str | None = None) -> None:
    self.key = key
    super().__init__(message or f"Key {key!r} is not supported, only scalar and object keys can be indexed.")


class ExpectationFailedError(DatasetError):
  """Base class for failed expectations about stream contents."""

  pass


class StreamEmptyError(ExpectationFailedError):
  """Raised by `IfEmpty` when the stream produced no entries and no fallback was given."""

  def __init__(self, message: str | None = None) -> None:
    super().__init__(message or "Stream is empty.")


class StreamOverflowError(ExpectationFailedError):
  """Raised by `Overflow` when the stream yields more entries than its capacity."""

  def __init__(self, capacity: int) -> None:
    self.capacity = capacity
    super().__init__(f"Defined capacity of {capacity} items exceeded.")
