"""Functional interface mirroring the fluent `Stream` API.

Every function takes the source as its first argument and returns a new
`Stream`, so `take(filter(source, predicate), 2)` is equivalent to
`Stream(source).filter(predicate).take(2)`. Terminal functions (`flush`,
`collect`, `reduce` and the reducer shortcuts) consume the source.

Note:
    Several names shadow builtins (`filter`, `map`, `sum`, ...). Import the
    module rather than its names: `from kvpipe import functions as kv`.
"""

from collections.abc import Callable
from collections.abc import Hashable
from collections.abc import Iterable
from typing import Any

from kvpipe.base import AbstractStream
from kvpipe.helpers import Pairs
from kvpipe.operators import DEFAULT_BUFFER_SIZE
from kvpipe.operators import Merge
from kvpipe.operators.guards import Fallback
from kvpipe.operators.guards import OverflowFactory
from kvpipe.operators.join import Run
from kvpipe.reducers import Average
from kvpipe.reducers import Count
from kvpipe.reducers import Max
from kvpipe.reducers import Min
from kvpipe.reducers import Sum
from kvpipe.reducers.factory import ReducerSpec
from kvpipe.stream import Stream
from kvpipe.types import Collector


def stream(source: Any) -> Stream[Any, Any]:
  """Wrap a source into a stream."""
  return Stream(source)


def pairs(entries: Iterable[tuple[Any, Any]]) -> Stream[Any, Any]:
  """Stream an iterable of `(key, value)` tuples, keeping duplicate keys."""
  return Stream(Pairs(entries))


def buffer_count(source: Any, count: int = DEFAULT_BUFFER_SIZE) -> Stream[Any, Any]:
  return Stream(source).buffer_count(count)


def buffer_while(source: Any, predicate: Callable[..., bool]) -> Stream[Any, Any]:
  return Stream(source).buffer_while(predicate)


def compress_join(source: Any, predicate: Callable[..., bool], join: Callable[[Run], Iterable[Any]]) -> Stream[Any, Any]:
  return Stream(source).compress_join(predicate, join)


def distinct(source: Any, identity: Callable[..., Hashable] | None = None) -> Stream[Any, Any]:
  return Stream(source).distinct(identity)


def filter(source: Any, predicate: Callable[..., bool]) -> Stream[Any, Any]:
  return Stream(source).filter(predicate)


def finalize(source: Any, finalizer: Callable[[], Any]) -> Stream[Any, Any]:
  return Stream(source).finalize(finalizer)


def flatten(source: Any, preserve_keys: bool = False) -> Stream[Any, Any]:
  return Stream(source).flatten(preserve_keys)


def if_empty(source: Any, fallback: Fallback = None) -> Stream[Any, Any]:
  return Stream(source).if_empty(fallback)


def left_join(left: Any, right: Any) -> Stream[Any, Any]:
  return Stream(left).left_join(right)


def map(
  source: Any,
  value_transform: Callable[..., Any] | None = None,
  key_transform: Callable[..., Any] | None = None,
) -> Stream[Any, Any]:
  return Stream(source).map(value_transform, key_transform)


def merge(first: Any, second: Any) -> Stream[Any, Any]:
  return Stream(Merge(first, second))


def overflow(source: Any, capacity: int, on_exceed: OverflowFactory = None) -> Stream[Any, Any]:
  return Stream(source).overflow(capacity, on_exceed)


def reverse(source: Any) -> Stream[Any, Any]:
  return Stream(source).reverse()


def skip(source: Any, count: int) -> Stream[Any, Any]:
  return Stream(source).skip(count)


def sort(source: Any, comparator: Callable[[Any, Any], int] | None = None, by_keys: bool = False) -> Stream[Any, Any]:
  return Stream(source).sort(comparator, by_keys)


def take(source: Any, count: int) -> Stream[Any, Any]:
  return Stream(source).take(count)


def take_until(source: Any, predicate: Callable[..., bool]) -> Stream[Any, Any]:
  return Stream(source).take_until(predicate)


def tap(source: Any, callback: Callable[..., Any]) -> Stream[Any, Any]:
  return Stream(source).tap(callback)


def operator(source: Any, operator: Callable[..., AbstractStream[Any, Any]], *args: Any, **kwargs: Any) -> Stream[Any, Any]:
  return Stream(source).operator(operator, *args, **kwargs)


def aggregate(name: str, source: Any, reducer: ReducerSpec, *args: Any, **kwargs: Any) -> Stream[Any, Any]:
  return Stream(source).aggregate(name, reducer, *args, **kwargs)


def flush(source: Any) -> Stream[Any, Any]:
  """Drain a source and return the drained stream."""
  return Stream(source).flush()


def collect[C: Collector[Any]](source: Any, collector: Callable[..., C], *args: Any, **kwargs: Any) -> C:
  return collector(source, *args, **kwargs)


def reduce(source: Any, reducer: ReducerSpec, *args: Any, **kwargs: Any) -> Any:
  return Stream(source).reduce(reducer, *args, **kwargs)


def average(
  source: Any,
  initial: int | float | None = None,
  extractor: Callable[..., Any] | None = None,
  count_none: bool = False,
) -> float | None:
  return reduce(source, Average, initial, extractor, count_none)


def count(source: Any, filter: Callable[..., bool] | None = None) -> int:
  return reduce(source, Count, filter)


def max(
  source: Any,
  initial: Any = None,
  extractor: Callable[..., Any] | None = None,
  comparator: Callable[[Any, Any], int] | None = None,
) -> Any:
  return reduce(source, Max, initial, extractor, comparator)


def min(
  source: Any,
  initial: Any = None,
  extractor: Callable[..., Any] | None = None,
  comparator: Callable[[Any, Any], int] | None = None,
) -> Any:
  return reduce(source, Min, initial, extractor, comparator)


def sum(source: Any, initial: int | float | None = None, extractor: Callable[..., Any] | None = None) -> Any:
  return reduce(source, Sum, initial, extractor)
