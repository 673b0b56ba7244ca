"""Operators guarding a stream: emptiness, capacity and guaranteed cleanup."""

from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
import logging
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.errors import StreamEmptyError
from kvpipe.errors import StreamOverflowError
from kvpipe.helpers import iter_entries
from kvpipe.types import Entry

logger = logging.getLogger(__name__)

type Fallback = BaseException | Callable[[], Iterable[Any]] | Iterable[Any] | None
type OverflowFactory = BaseException | Callable[[int], BaseException] | None


class IfEmpty[K, V](AbstractStream[K, V]):
  """Yields upstream entries, or falls back when upstream yields none.

  The fallback is one of:
  - None: a `StreamEmptyError` is raised.
  - an exception instance: it is raised.
  - a callable: it is called without arguments and the source it returns is
    yielded instead.
  - any other source (a mapping, a sequence, a stream): its entries are
    yielded instead.
  """

  def __init__(self, source: Any, fallback: Fallback = None) -> None:
    super().__init__(source)
    self._source = source
    self._fallback = fallback

  def iterate(self) -> Iterator[Entry[K, V]]:
    empty = True
    for key, value in iter_entries(self._source):
      empty = False
      yield key, value

    if not empty:
      return

    logger.debug("Upstream of %s produced no entries", type(self).__name__)
    match self._fallback:
      case None:
        raise StreamEmptyError()
      case BaseException() as error:
        raise error
      case fallback if callable(fallback):
        yield from iter_entries(fallback())
      case fallback:
        yield from iter_entries(fallback)


class Overflow[K, V](AbstractStream[K, V]):
  """Yields upstream entries, failing once more than `capacity` are pulled.

  The entry beyond capacity is never yielded; pulling it raises instead. The
  raised error is `on_exceed` when it is an exception, the result of
  `on_exceed(capacity)` when it is a callable, and `StreamOverflowError`
  otherwise.
  """

  def __init__(self, source: Any, capacity: int, on_exceed: OverflowFactory = None) -> None:
    if capacity < 0:
      raise ValueError(f"Capacity must not be negative, got {capacity}.")

    super().__init__(source)
    self._source = source
    self._capacity = capacity
    self._on_exceed = on_exceed

  def iterate(self) -> Iterator[Entry[K, V]]:
    for position, (key, value) in enumerate(iter_entries(self._source), start=1):
      if position > self._capacity:
        logger.debug("Capacity of %d entries exceeded", self._capacity)
        raise self._error()
      yield key, value

  def _error(self) -> BaseException:
    match self._on_exceed:
      case None:
        return StreamOverflowError(self._capacity)
      case BaseException() as error:
        return error
      case factory:
        return factory(self._capacity)


class Finalize[K, V](AbstractStream[K, V]):
  """Yields upstream entries unchanged and runs `finalizer()` exactly once.

  The finalizer runs when iteration completes, when an error propagates
  through this stage, and when iteration is abandoned early: either
  deterministically through `close()` (or a `with` block) on this or any
  downstream stream, or when the abandoned iteration is garbage collected.
  It never runs twice, and it does not run if iteration never started.
  """

  def __init__(self, source: Any, finalizer: Callable[[], Any]) -> None:
    super().__init__(source)
    self._source = source
    self._finalizer = finalizer
    self._finalized = False

  @property
  def finalized(self) -> bool:
    return self._finalized

  def iterate(self) -> Iterator[Entry[K, V]]:
    try:
      yield from iter_entries(self._source)
    finally:
      self._finalize()

  def _finalize(self) -> None:
    if self._finalized:
      return
    self._finalized = True
    logger.debug("Running finalizer of %s", type(self).__name__)
    self._finalizer()
