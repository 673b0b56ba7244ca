"""kvpipe - Lazy, composable key/value stream pipelines.

This library wraps any source of key/value entries in a chain of lazy
operators. Every operator is a stream itself, so chains compose freely, and
a chain is pulled exactly once by a terminal collector or reducer. Named
aggregations are computed during that single pass.
"""

import logging

from kvpipe.aggregator import Aggregator
from kvpipe.base import AbstractStream
from kvpipe.errors import DatasetError
from kvpipe.errors import ExpectationFailedError
from kvpipe.errors import LogicError
from kvpipe.errors import OutOfBoundsError
from kvpipe.errors import StreamEmptyError
from kvpipe.errors import StreamOverflowError
from kvpipe.errors import UnsupportedKeyError
from kvpipe.functions import pairs
from kvpipe.functions import stream
from kvpipe.helpers import Pairs
from kvpipe.models import Buffer
from kvpipe.models import Item
from kvpipe.stream import Stream
from kvpipe.types import Collector
from kvpipe.types import KeyedIterable
from kvpipe.types import Reducer

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
  "Stream",
  "stream",
  "pairs",
  "AbstractStream",
  "Aggregator",
  "Buffer",
  "Item",
  "Pairs",
  "KeyedIterable",
  "Reducer",
  "Collector",
  "DatasetError",
  "LogicError",
  "OutOfBoundsError",
  "UnsupportedKeyError",
  "ExpectationFailedError",
  "StreamEmptyError",
  "StreamOverflowError",
]
