"""Tests for aggregators and the reduce stage."""

import pytest

from kvpipe import Aggregator
from kvpipe import LogicError
from kvpipe import Stream
from kvpipe.operators import Reduce
from kvpipe.reducers import Callback
from kvpipe.reducers import Count
from kvpipe.reducers import Sum


def join_path(carry, value):
  return f"{carry}/{value}"


class TestReduce:
  """Test the reduce stage."""

  def test_passes_entries_through(self):
    """Test entries flow through unchanged."""
    operator = Reduce({"a": 1, "b": 2}, Sum())
    assert list(operator) == [("a", 1), ("b", 2)]
    assert operator.value == 3

  def test_value_requires_exhaustion(self):
    """Test the value is only available after a complete iteration."""
    operator = Reduce([1, 2, 3], Sum())

    with pytest.raises(LogicError):
      operator.value

    iterator = iter(operator)
    next(iterator)
    with pytest.raises(LogicError):
      operator.value

    list(iterator)
    assert operator.value == 6

  def test_reducer_sees_entries_before_they_are_yielded(self):
    """Test the reducer is updated before an entry reaches downstream."""
    operator = Reduce([5, 7], Sum())
    iterator = iter(operator)
    next(iterator)
    assert operator.reducer.value == 5


class TestAggregator:
  """Test the aggregator stage."""

  def test_callback_aggregation(self):
    """Test an aggregator reduces with a callback."""
    aggregator = Aggregator("path", Reduce(["foo", "bar", "baz"], Callback(join_path, "")))
    assert [value for _, value in aggregator] == ["foo", "bar", "baz"]
    assert aggregator.name == "path"
    assert aggregator.value == "/foo/bar/baz"

  def test_value_is_running(self):
    """Test the value reflects the entries pulled so far."""
    aggregator = Aggregator("count", Reduce([1, 2, 3], Count()))
    iterator = iter(aggregator)
    next(iterator)
    next(iterator)
    assert aggregator.value == 2

  def test_registers_itself(self):
    """Test an aggregator exposes itself through aggregators."""
    aggregator = Aggregator("sum", Reduce([1], Sum()))
    assert aggregator.aggregators == {"sum": aggregator}

  def test_downstream_streams_see_aggregators(self):
    """Test aggregators are reachable from every chained stream."""
    stream = Stream([1, 2]).aggregate("sum", Sum).map(lambda value: value * 10).aggregate("count", Count)
    assert set(stream.aggregators) == {"sum", "count"}
    assert stream.to_list() == [10, 20]
    assert stream.aggregated == {"sum": 3, "count": 2}

  def test_later_aggregator_wins_on_name_clash(self):
    """Test the downstream aggregator shadows an upstream one of the same name."""
    stream = Stream([1, 2]).aggregate("total", Sum).aggregate("total", Count).flush()
    assert stream.aggregated == {"total": 2}

  def test_empty_name(self):
    """Test an empty aggregator name is rejected."""
    with pytest.raises(ValueError):
      Aggregator("", Reduce([], Sum()))
