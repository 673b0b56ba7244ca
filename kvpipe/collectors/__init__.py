"""
Collectors materialize a stream into a concrete structure.

They are the terminal stage of a pipeline, built through
`Stream.collect(collector_class, *args)`.
"""

from .array import ArrayCollector
from .cursored import CursoredCollector
from .indexed import IndexedCollector
from .iterable import IterableCollector
from .sequence import ListCollector

__all__ = [
  "ArrayCollector",
  "CursoredCollector",
  "IndexedCollector",
  "IterableCollector",
  "ListCollector",
]
