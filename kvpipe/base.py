"""Core stream abstraction shared by every stage of a pipeline."""

from abc import abstractmethod
from collections.abc import Iterator
import inspect
import logging
from typing import TYPE_CHECKING
from typing import Any
from typing import Self
import weakref

from kvpipe.errors import LogicError
from kvpipe.types import Entry
from kvpipe.types import KeyedIterable

if TYPE_CHECKING:
  from kvpipe.aggregator import Aggregator

logger = logging.getLogger(__name__)


class AbstractStream[K, V](KeyedIterable[K, V]):
  """
  Abstract base class for all stream stages.

  A stream wraps zero or more upstream sources and exposes a single, lazy,
  forward-only iteration over `(key, value)` entries. Constructing a stream
  computes nothing; entries are pulled from upstream only when the stream
  itself is pulled.

  A stream can be iterated at most once. Iteration is considered started
  (the stream is `closed`) on the first pull, and a second iteration fails
  with a `LogicError`. Once iteration ran to completion the stream is also
  `exhausted`.

  Concrete stages implement `iterate()` only.
  """

  def __init__(self, *upstreams: Any) -> None:
    """Initialize the stream.

    Args:
        *upstreams: Sources this stream reads from, in order.
    """
    self._upstreams: list[Any] = list(upstreams)
    self._closed = False
    self._exhausted = False
    self._cursors: weakref.WeakSet = weakref.WeakSet()

  @abstractmethod
  def iterate(self) -> Iterator[Entry[K, V]]:
    """
    Produces the entries of this stage by pulling from its upstreams.
    This method must be implemented by all concrete stream classes.
    """
    raise NotImplementedError

  @property
  def upstreams(self) -> list[Any]:
    return list(self._upstreams)

  @property
  def aggregators(self) -> dict[str, "Aggregator[Any, Any, Any]"]:
    """Aggregators attached to this stream or to any of its upstreams."""
    aggregators: dict[str, Aggregator[Any, Any, Any]] = {}
    for upstream in self._upstreams:
      if isinstance(upstream, AbstractStream):
        aggregators.update(upstream.aggregators)
    return aggregators

  @property
  def aggregated(self) -> dict[str, Any]:
    """Current values of every attached aggregator, keyed by name.

    Values are final only once the stream is `exhausted`. While the stream
    is being iterated they reflect the entries pulled so far.

    Raises:
        LogicError: If the stream has not been iterated yet.
    """
    if not self._closed:
      raise LogicError("Stream is not iterated.")
    return {name: aggregator.value for name, aggregator in self.aggregators.items()}

  @property
  def closed(self) -> bool:
    """Whether iteration of this stream has started."""
    return self._closed

  @property
  def exhausted(self) -> bool:
    """Whether iteration of this stream ran to completion."""
    return self._exhausted

  def __iter__(self) -> Iterator[Entry[K, V]]:
    cursor = self._run()
    self._cursors.add(cursor)
    return cursor

  def _run(self) -> Iterator[Entry[K, V]]:
    if self._closed:
      logger.debug("Rejected second iteration of %s", type(self).__name__)
      raise LogicError(f"{type(self).__name__} is closed, a stream can be iterated only once.")

    self._closed = True
    try:
      yield from self.iterate()
      self._exhausted = True
    finally:
      # Upstream iterations end with this one, however it ends.
      for upstream in self._upstreams:
        if isinstance(upstream, AbstractStream):
          upstream.close()

  def close(self) -> None:
    """Abandon a running iteration.

    Closing runs pending cleanup of every stage pulled through this stream
    (see `Finalize`) without waiting for garbage collection. Closing a
    stream that is not being iterated is a no-op; iterators that have not
    been pulled yet are left untouched.
    """
    for cursor in list(self._cursors):
      if inspect.getgeneratorstate(cursor) == inspect.GEN_CREATED:
        continue
      cursor.close()

  def __enter__(self) -> Self:
    return self

  def __exit__(self, exc_type, exc_val, exc_tb) -> None:
    self.close()
