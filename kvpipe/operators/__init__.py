"""
Stream operators.

Every operator is an `AbstractStream` wrapping one or two upstream sources.
Operators are usually applied through the fluent `Stream` API, but can be
instantiated directly or passed to `Stream.operator()`.
"""

from .basic import Filter
from .basic import Map
from .basic import Skip
from .basic import Take
from .basic import TakeUntil
from .basic import Tap
from .buffer import DEFAULT_BUFFER_SIZE
from .buffer import BufferCount
from .buffer import BufferWhile
from .distinct import Distinct
from .flatten import Flatten
from .guards import Finalize
from .guards import IfEmpty
from .guards import Overflow
from .join import CompressJoin
from .join import LeftJoin
from .merge import Merge
from .ordering import Reverse
from .ordering import Sort
from .reduce import Reduce

__all__ = [
  "DEFAULT_BUFFER_SIZE",
  "BufferCount",
  "BufferWhile",
  "CompressJoin",
  "Distinct",
  "Filter",
  "Finalize",
  "Flatten",
  "IfEmpty",
  "LeftJoin",
  "Map",
  "Merge",
  "Overflow",
  "Reduce",
  "Reverse",
  "Skip",
  "Sort",
  "Take",
  "TakeUntil",
  "Tap",
]
