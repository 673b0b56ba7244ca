"""
Reducers accumulate every entry of a stream into a single value.

They back both `Stream.reduce()` and named aggregations attached with
`Stream.aggregate()`.
"""

from .average import Average
from .callback import Callback
from .count import Count
from .extremum import Max
from .extremum import Min
from .factory import create_reducer
from .sum import Sum

__all__ = [
  "Average",
  "Callback",
  "Count",
  "Max",
  "Min",
  "Sum",
  "create_reducer",
]
