# stream.py
from collections.abc import Callable
from collections.abc import Hashable
from collections.abc import Iterable
from collections.abc import Iterator
from typing import Any

from kvpipe.aggregator import Aggregator
from kvpipe.base import AbstractStream
from kvpipe.collectors import ArrayCollector
from kvpipe.collectors import ListCollector
from kvpipe.helpers import iter_entries
from kvpipe.models import Buffer
from kvpipe.operators import DEFAULT_BUFFER_SIZE
from kvpipe.operators import BufferCount
from kvpipe.operators import BufferWhile
from kvpipe.operators import CompressJoin
from kvpipe.operators import Distinct
from kvpipe.operators import Filter
from kvpipe.operators import Finalize
from kvpipe.operators import Flatten
from kvpipe.operators import IfEmpty
from kvpipe.operators import LeftJoin
from kvpipe.operators import Map
from kvpipe.operators import Merge
from kvpipe.operators import Overflow
from kvpipe.operators import Reduce
from kvpipe.operators import Reverse
from kvpipe.operators import Skip
from kvpipe.operators import Sort
from kvpipe.operators import Take
from kvpipe.operators import TakeUntil
from kvpipe.operators import Tap
from kvpipe.operators.guards import Fallback
from kvpipe.operators.guards import OverflowFactory
from kvpipe.operators.join import Run
from kvpipe.reducers import create_reducer
from kvpipe.reducers.factory import ReducerSpec
from kvpipe.types import Collector
from kvpipe.types import Entry


class Stream[K, V](AbstractStream[K, V]):
  """Wraps a source and chains operators on top of it.

  A Stream provides the fluent interface of the library. Every chaining
  method wraps the current stream in an operator and returns a new Stream,
  so nothing is computed until the chain is iterated, collected or
  reduced.

  Example:
      >>> result = (Stream({"a": 2, "b": 10, "c": 5})
      ...           .filter(lambda value: value > 2)
      ...           .map(lambda value: value * 2)
      ...           .to_dict())
      >>> result  # {"b": 20, "c": 10}

  Note:
      A stream can be iterated only once. Each chaining method consumes the
      stream it is called on; keep using the returned stream.
  """

  def __init__(self, source: Any) -> None:
    """Initialize a stream over a source.

    Args:
        source: A stream, buffer or other keyed iterable, a mapping (its
                items are streamed), or any iterable (keyed by position).
    """
    super().__init__(source)
    self._source = source

  @classmethod
  def create(cls, source: Any) -> "Stream[Any, Any]":
    """Create a new stream over a source."""
    return cls(source)

  def iterate(self) -> Iterator[Entry[K, V]]:
    yield from iter_entries(self._source)

  def buffer_count(self, count: int = DEFAULT_BUFFER_SIZE) -> "Stream[int, Buffer[K, V]]":
    """Batch entries into buffers of `count` entries.

    Args:
        count: How many entries a buffer holds. The last buffer may hold
               fewer.

    Returns:
        A stream of buffers keyed sequentially from 0.
    """
    return Stream(BufferCount(self, count))

  def buffer_while(self, predicate: Callable[..., bool]) -> "Stream[int, Buffer[K, V]]":
    """Batch consecutive entries while `predicate(buffer, value, key)` holds.

    Args:
        predicate: Called with the current buffer, before the candidate entry
                   is added, and the candidate's value and key.

    Returns:
        A stream of buffers keyed sequentially from 0.

    Example:
        >>> Stream({"a": 2, "b": 2, "c": 3}).buffer_while(
        ...   lambda buffer, value: value == buffer.last().value
        ... )
    """
    return Stream(BufferWhile(self, predicate))

  def compress_join(self, predicate: Callable[..., bool], join: Callable[[Run], Iterable[Any]]) -> "Stream[Any, Any]":
    """Join runs of consecutive related entries.

    Args:
        predicate: Called as `predicate((previous_value, value),
                   (previous_key, key), run)`; true extends the current run.
        join: Called with a finished run, a list of `(key, value)` tuples;
              returns a source whose entries are yielded.

    Returns:
        A stream of the joined entries.
    """
    return Stream(CompressJoin(self, predicate, join))

  def distinct(self, identity: Callable[..., Hashable] | None = None) -> "Stream[K, V]":
    """Keep the first entry of every distinct value.

    Args:
        identity: Optional `identity(value, key)` to compare entries by.
                  Without it values are compared strictly.

    Returns:
        A stream without duplicate entries.
    """
    return Stream(Distinct(self, identity))

  def filter(self, predicate: Callable[..., bool]) -> "Stream[K, V]":
    """Keep entries for which `predicate(value, key)` is truthy."""
    return Stream(Filter(self, predicate))

  def finalize(self, finalizer: Callable[[], Any]) -> "Stream[K, V]":
    """Run `finalizer()` once iteration completes, fails or is abandoned.

    Abandoned iterations are finalized deterministically by calling
    `close()` on the returned stream or by iterating it in a `with` block.
    """
    return Stream(Finalize(self, finalizer))

  def flatten(self, preserve_keys: bool = False) -> "Stream[Any, Any]":
    """Yield the entries of the nested sources this stream yields.

    Args:
        preserve_keys: Keep inner keys instead of re-keying from 0.
    """
    return Stream(Flatten(self, preserve_keys))

  def if_empty(self, fallback: Fallback = None) -> "Stream[K, V]":
    """Fall back when this stream yields no entries.

    Args:
        fallback: None to raise `StreamEmptyError`, an exception to raise, a
                  callable returning a source to yield instead, or a source
                  (mapping, sequence, stream) to yield instead.
    """
    return Stream(IfEmpty(self, fallback))

  def left_join(self, right: Any) -> "Stream[K, list[Any]]":
    """Join every entry with all entries of `right` sharing its key.

    WARNING: `right` is loaded entirely into memory.

    Returns:
        A stream of `(key, [value, matching_right_values])` entries.
    """
    return Stream(LeftJoin(self, right))

  def map(
    self,
    value_transform: Callable[..., Any] | None = None,
    key_transform: Callable[..., Any] | None = None,
  ) -> "Stream[Any, Any]":
    """Transform values and/or keys.

    Args:
        value_transform: Called as `value_transform(value, key)`.
        key_transform: Called as `key_transform(key, value)`.

    Raises:
        LogicError: If neither transform is provided.
    """
    return Stream(Map(self, value_transform, key_transform))

  def merge(self, other: Any) -> "Stream[Any, Any]":
    """Yield every entry of this stream followed by every entry of `other`."""
    return Stream(Merge(self, other))

  def overflow(self, capacity: int, on_exceed: OverflowFactory = None) -> "Stream[K, V]":
    """Fail when this stream yields more than `capacity` entries.

    Args:
        capacity: Maximum number of entries.
        on_exceed: Exception to raise, or a callable building it from the
                   capacity. Defaults to `StreamOverflowError`.
    """
    return Stream(Overflow(self, capacity, on_exceed))

  def reverse(self) -> "Stream[K, V]":
    """Yield entries in reverse order.

    WARNING: This operator loads the entire stream into memory.
    """
    return Stream(Reverse(self))

  def skip(self, count: int) -> "Stream[K, V]":
    """Discard the first `count` entries."""
    return Stream(Skip(self, count))

  def sort(self, comparator: Callable[[Any, Any], int] | None = None, by_keys: bool = False) -> "Stream[K, V]":
    """Yield entries sorted by value, or by key.

    WARNING: This operator loads the entire stream into memory.

    Args:
        comparator: Optional `comparator(first, second) -> int`. Natural
                    ordering is used if omitted.
        by_keys: Compare keys instead of values.
    """
    return Stream(Sort(self, comparator, by_keys))

  def take(self, count: int) -> "Stream[K, V]":
    """Yield the first `count` entries."""
    return Stream(Take(self, count))

  def take_until(self, predicate: Callable[..., bool]) -> "Stream[K, V]":
    """Yield entries until `predicate(value, key)` is truthy, excluding that entry."""
    return Stream(TakeUntil(self, predicate))

  def tap(self, callback: Callable[..., Any]) -> "Stream[K, V]":
    """Call `callback(value, key)` for every entry without modifying it."""
    return Stream(Tap(self, callback))

  def operator(self, operator: Callable[..., AbstractStream[Any, Any]], *args: Any, **kwargs: Any) -> "Stream[Any, Any]":
    """Apply a custom operator.

    Args:
        operator: An `AbstractStream` subclass, or any factory building one,
                  called as `operator(self, *args, **kwargs)`.
        *args: Positional arguments for the operator.
        **kwargs: Keyword arguments for the operator.

    Returns:
        A new stream over the custom operator.
    """
    return Stream(operator(self, *args, **kwargs))

  def aggregate(self, name: str, reducer: ReducerSpec, *args: Any, **kwargs: Any) -> "Stream[K, V]":
    """Attach a named aggregation computed while the stream is consumed.

    The aggregated value is available through `aggregated[name]` (or
    `aggregators[name].value`) on the returned stream and every stream
    chained after it.

    Args:
        name: Name of the aggregation.
        reducer: A `Reducer` class, a `Reducer` instance, or a callable
                 `(carry, value, key) -> carry`.
        *args: Arguments for the reducer (e.g. the initial value).
        **kwargs: Keyword arguments for the reducer.

    Example:
        >>> stream = Stream([2, 10]).aggregate("count", Count).aggregate("sum", Sum).flush()
        >>> stream.aggregated  # {"count": 2, "sum": 12}
    """
    return Stream(Aggregator(name, Reduce(self, create_reducer(reducer, *args, **kwargs))))

  def collect[C: Collector[Any]](self, collector: Callable[..., C], *args: Any, **kwargs: Any) -> C:
    """Collect this stream with a collector (terminal operation).

    Args:
        collector: A collector class, called as `collector(self, *args,
                   **kwargs)`.

    Returns:
        The collector instance.
    """
    return collector(self, *args, **kwargs)

  def reduce(self, reducer: ReducerSpec, *args: Any, **kwargs: Any) -> Any:
    """Reduce this stream to a single value (terminal operation).

    Args:
        reducer: A `Reducer` class, a `Reducer` instance, or a callable
                 `(carry, value, key) -> carry`.
        *args: Arguments for the reducer (e.g. the initial value).
        **kwargs: Keyword arguments for the reducer.

    Returns:
        The final reduced value.
    """
    operator = Reduce(self, create_reducer(reducer, *args, **kwargs))
    for _ in operator:
      pass
    return operator.value

  def flush(self) -> "Stream[K, V]":
    """Iterate through the stream without collecting entries (terminal operation).

    Returns:
        The drained stream itself, so aggregated values can be read.
    """
    for _ in self:
      pass
    return self

  def to_dict(self) -> dict[K, V]:
    """Collect the stream into a dictionary; later duplicate keys win."""
    return self.collect(ArrayCollector).value

  def to_list(self) -> list[V]:
    """Collect the values of the stream into a list."""
    return self.collect(ListCollector).value
