"""Tests for individual stream operators."""

import gc

import pytest

from kvpipe import LogicError
from kvpipe import Stream
from kvpipe import StreamEmptyError
from kvpipe import StreamOverflowError
from kvpipe import pairs
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
from kvpipe.operators import Reverse
from kvpipe.operators import Skip
from kvpipe.operators import Sort
from kvpipe.operators import Take
from kvpipe.operators import TakeUntil
from kvpipe.operators import Tap


def counting_source(values, pulled):
  """A generator recording every value pulled from it."""
  for value in values:
    pulled.append(value)
    yield value


class TestSimpleOperators:
  """Test order preserving operators."""

  def test_filter_receives_key(self):
    """Test filter predicates may use the key."""
    operator = Filter({"a": 1, "b": 2, "c": 3}, lambda value, key: key != "b")
    assert dict(operator) == {"a": 1, "c": 3}

  def test_map_values_only(self):
    """Test map keeps keys when only values are transformed."""
    assert dict(Map({"a": 1}, lambda value: value + 1)) == {"a": 2}

  def test_map_keys_only(self):
    """Test map keeps values when only keys are transformed."""
    assert dict(Map({"a": 1}, key_transform=lambda key, value: f"{key}{value}")) == {"a1": 1}

  def test_map_requires_a_transform(self):
    """Test map without transforms is rejected."""
    with pytest.raises(LogicError):
      Map([1, 2])

  def test_map_transforms_see_original_entry(self):
    """Test both transforms receive the untransformed entry."""
    operator = Map({"a": 1}, lambda value, key: f"{key}={value}", lambda key, value: value)
    assert list(operator) == [(1, "a=1")]

  def test_tap_runs_before_yield(self):
    """Test tap invokes the callback before the entry is yielded."""
    seen = []
    iterator = iter(Tap([1, 2], seen.append))
    assert next(iterator) == (0, 1)
    assert seen == [1]

  def test_take_does_not_over_pull(self):
    """Test take never pulls more entries than it yields."""
    pulled = []
    assert list(Take(counting_source([1, 2, 3, 4], pulled), 2)) == [(0, 1), (1, 2)]
    assert pulled == [1, 2]

  def test_take_zero(self):
    """Test take of zero entries pulls nothing."""
    pulled = []
    assert list(Take(counting_source([1, 2], pulled), 0)) == []
    assert pulled == []

  def test_take_more_than_available(self):
    """Test take yields everything from a short source."""
    assert list(Take([1], 5)) == [(0, 1)]

  def test_take_rejects_negative_count(self):
    """Test negative counts are rejected."""
    with pytest.raises(ValueError):
      Take([1], -1)

  def test_skip_everything(self):
    """Test skipping more than available yields nothing."""
    assert list(Skip([1, 2], 5)) == []

  def test_take_until_stops_pulling(self):
    """Test take_until does not pull past the matching entry."""
    pulled = []
    operator = TakeUntil(counting_source([1, 2, 3, 4], pulled), lambda value: value == 2)
    assert list(operator) == [(0, 1)]
    assert pulled == [1, 2]

  def test_take_until_without_match(self):
    """Test take_until yields everything when nothing matches."""
    assert list(TakeUntil([1, 2], lambda value: False)) == [(0, 1), (1, 2)]


class TestDistinct:
  """Test the distinct operator."""

  def test_strict_comparison(self):
    """Test values of different types are distinct even when equal."""
    result = [value for _, value in Distinct([1, 1.0, True, 1, 1.0])]
    assert [type(value) for value in result] == [int, float, bool]

  def test_unhashable_values(self):
    """Test unhashable values are compared by equality."""
    assert dict(Distinct({"a": [2], "b": [10], "c": [2]})) == {"a": [2], "b": [10]}

  def test_identity(self):
    """Test entries are compared through the identity callable."""
    operator = Distinct({"a": [2], "b": [10], "c": [2], "d": [10]}, lambda value: str(value[0]))
    assert dict(operator) == {"a": [2], "b": [10]}

  def test_identity_receives_key(self):
    """Test the identity callable may use the key."""
    operator = Distinct({"a1": 1, "a2": 2, "b1": 3}, lambda value, key: key[0])
    assert dict(operator) == {"a1": 1, "b1": 3}


class TestFlatten:
  """Test the flatten operator."""

  def test_flattens(self):
    """Test nested lists are flattened and re-keyed."""
    operator = Flatten({"a": [2, 3], "b": [10, 20], "c": [5], "d": [1, 4, 6]})
    assert [value for _, value in operator] == [2, 3, 10, 20, 5, 1, 4, 6]
    assert [key for key, _ in Flatten([[1, 2], [3]])] == [0, 1, 2]

  def test_flattens_preserving_keys(self):
    """Test inner keys are kept with preserve_keys."""
    operator = Flatten({"foo": {"a": 2, "b": 3}, "bar": {"c": 10, "d": 20}}, preserve_keys=True)
    assert dict(operator) == {"a": 2, "b": 3, "c": 10, "d": 20}

  def test_colliding_keys_are_kept(self):
    """Test colliding inner keys are all yielded."""
    operator = Flatten([{"a": 1}, {"a": 2}], preserve_keys=True)
    assert list(operator) == [("a", 1), ("a", 2)]


class TestOrdering:
  """Test operators materializing the stream."""

  def test_reverse_empty(self):
    """Test reversing an empty source."""
    assert list(Reverse([])) == []

  def test_sort_with_comparator(self):
    """Test sort uses a custom comparator."""
    operator = Sort({"a": 2, "b": 10, "c": 5}, lambda first, second: second - first)
    assert list(operator) == [("b", 10), ("c", 5), ("a", 2)]

  def test_sort_by_keys(self):
    """Test sort compares keys with by_keys."""
    operator = Sort({"c": 1, "a": 2, "b": 3}, by_keys=True)
    assert list(operator) == [("a", 2), ("b", 3), ("c", 1)]

  def test_sort_is_stable(self):
    """Test entries with equal values keep their order."""
    operator = Sort({"a": 1, "b": 0, "c": 1, "d": 0})
    assert [key for key, _ in operator] == ["b", "d", "a", "c"]


class TestMerge:
  """Test the merge operator."""

  def test_keys_are_not_deduplicated(self):
    """Test merged sources may share keys."""
    assert list(Merge([1, 2], [3])) == [(0, 1), (1, 2), (0, 3)]

  def test_upstreams(self):
    """Test merge reads from two upstreams."""
    first, second = [1], [2]
    assert Merge(first, second).upstreams == [first, second]


class TestIfEmpty:
  """Test the if_empty operator."""

  def test_empty_without_fallback(self):
    """Test an empty source raises a stream empty error."""
    with pytest.raises(StreamEmptyError):
      list(IfEmpty([]))

  def test_empty_with_exception(self):
    """Test the supplied exception is raised."""
    with pytest.raises(KeyError):
      list(IfEmpty([], KeyError("missing")))

  def test_empty_with_fallback(self):
    """Test the fallback entries are yielded."""
    assert list(IfEmpty([], lambda: {"x": 1, "y": 2})) == [("x", 1), ("y", 2)]

  def test_empty_with_sequence_fallback(self):
    """Test a sequence fallback yields its entries."""
    assert list(IfEmpty([], [7, 8])) == [(0, 7), (1, 8)]
    assert Stream([]).if_empty([7, 8]).to_list() == [7, 8]

  def test_empty_with_mapping_fallback(self):
    """Test a mapping fallback yields its items."""
    assert Stream([]).if_empty({"x": 1, "y": 2}).to_dict() == {"x": 1, "y": 2}

  def test_non_empty_ignores_fallback(self):
    """Test the fallback is never used for a non-empty source."""

    def fallback():
      raise AssertionError("Never to be called")

    assert list(IfEmpty([None], fallback)) == [(0, None)]


class TestOverflow:
  """Test the overflow operator."""

  def test_fails_on_pull_beyond_capacity(self):
    """Test the third pull fails with a capacity of two."""
    iterator = iter(Overflow([1, 2, 3], 2))
    assert next(iterator) == (0, 1)
    assert next(iterator) == (1, 2)
    with pytest.raises(StreamOverflowError) as info:
      next(iterator)
    assert info.value.capacity == 2
    assert "2 items" in str(info.value)

  def test_within_capacity(self):
    """Test a source within capacity passes through."""
    assert list(Overflow([1, 2], 2)) == [(0, 1), (1, 2)]

  def test_custom_exception(self):
    """Test a supplied exception replaces the default one."""
    with pytest.raises(RuntimeError, match="too many"):
      list(Overflow([1, 2], 1, RuntimeError("too many")))

  def test_exception_factory(self):
    """Test a factory receives the capacity."""
    with pytest.raises(RuntimeError, match="capacity 1"):
      list(Overflow([1, 2], 1, lambda capacity: RuntimeError(f"capacity {capacity}")))


class TestFinalize:
  """Test the finalize operator."""

  def test_runs_on_completion(self):
    """Test the finalizer runs once iteration completes."""
    calls = []
    stream = Stream([1, 2]).finalize(lambda: calls.append("done"))
    assert stream.to_list() == [1, 2]
    stream.close()
    assert calls == ["done"]

  def test_runs_on_error(self):
    """Test the finalizer runs when upstream raises."""
    calls = []

    def source():
      yield 1
      raise RuntimeError("boom")

    operator = Finalize(source(), lambda: calls.append("done"))
    with pytest.raises(RuntimeError, match="boom"):
      list(operator)
    assert calls == ["done"]
    assert operator.finalized

  def test_runs_on_downstream_error(self):
    """Test the finalizer runs once when a later stage raises."""
    calls = []

    def fail(value):
      if value == 2:
        raise RuntimeError("boom")
      return value

    stream = Stream([1, 2, 3]).finalize(lambda: calls.append("done")).map(fail)
    with pytest.raises(RuntimeError, match="boom"):
      stream.to_list()
    assert calls == ["done"]

    stream.close()
    assert calls == ["done"]

  def test_runs_when_take_stops_early(self):
    """Test a stage that stops pulling ends the upstream iteration."""
    calls = []
    stream = Stream([1, 2, 3]).finalize(lambda: calls.append("done")).take(1)
    iterator = iter(stream)
    assert next(iterator) == (0, 1)
    assert calls == []
    with pytest.raises(StopIteration):
      next(iterator)
    assert calls == ["done"]

  def test_runs_on_close(self):
    """Test closing an abandoned iteration runs the finalizer once."""
    calls = []
    stream = Stream([1, 2, 3]).finalize(lambda: calls.append("done")).map(lambda value: value * 2)
    iterator = iter(stream)
    assert next(iterator) == (0, 2)
    assert calls == []
    stream.close()
    stream.close()
    assert calls == ["done"]

  def test_runs_on_with_block(self):
    """Test leaving a with block finalizes an abandoned iteration."""
    calls = []
    with Stream([1, 2, 3]).finalize(lambda: calls.append("done")) as stream:
      for _, value in stream:
        if value == 2:
          break
    assert calls == ["done"]

  def test_runs_on_garbage_collection(self):
    """Test a discarded iteration is finalized when collected."""
    calls = []
    stream = Stream([1, 2, 3]).finalize(lambda: calls.append("done"))
    iterator = iter(stream)
    next(iterator)
    del iterator
    gc.collect()
    assert calls == ["done"]

  def test_not_run_without_iteration(self):
    """Test the finalizer does not run if nothing was pulled."""
    calls = []
    stream = Stream([1]).finalize(lambda: calls.append("done"))
    stream.close()
    assert calls == []


class TestBufferOperators:
  """Test the buffering operators."""

  @pytest.mark.parametrize(("length", "count"), [(0, 2), (1, 2), (4, 2), (5, 2), (5, 1), (3, 5)])
  def test_buffer_count_sizes(self, length, count):
    """Test the number of buffers and their concatenation."""
    source = {f"k{index}": index for index in range(length)}
    buffers = [buffer for _, buffer in BufferCount(source, count)]

    assert len(buffers) == -(-length // count)
    assert [entry for buffer in buffers for entry in buffer] == list(source.items())

  def test_buffer_count_rejects_zero(self):
    """Test buffer sizes below one are rejected."""
    with pytest.raises(ValueError):
      BufferCount([1], 0)

  def test_buffer_while_groups(self):
    """Test runs of equal values are buffered together."""
    operator = BufferWhile(
      {"a": 2, "b": 2, "c": 2, "d": 3, "e": 3},
      lambda buffer, value: value == buffer.last().value,
    )
    buffers = [buffer.keys() for _, buffer in operator]
    assert buffers == [["a", "b", "c"], ["d", "e"]]

  def test_buffer_while_sees_buffer_before_entry(self):
    """Test the predicate sees the buffer without the candidate."""
    sizes = []

    def predicate(buffer, value, key):
      sizes.append((len(buffer), key))
      return True

    list(BufferWhile({"a": 1, "b": 2, "c": 3}, predicate))
    assert sizes == [(1, "b"), (2, "c")]

  def test_buffer_while_single_entry(self):
    """Test a single entry yields one buffer without calling the predicate."""

    def predicate(buffer, value):
      raise AssertionError("Never to be called")

    buffers = [buffer.values() for _, buffer in BufferWhile({"a": 2}, predicate)]
    assert buffers == [[2]]

  def test_buffer_while_empty(self):
    """Test an empty source yields no buffers."""
    assert list(BufferWhile([], lambda buffer: True)) == []


class TestJoinOperators:
  """Test the joining operators."""

  @staticmethod
  def same_group(values):
    return values[0][0] == values[1][0]

  @staticmethod
  def join_group(run):
    return {run[0][1][0]: [value[1] for _, value in run]}

  def test_compress_join(self):
    """Test consecutive runs are joined."""
    operator = CompressJoin(
      {1: [10, 2], 2: [10, 3], 3: [10, 4], 4: [20, 1], 5: [20, 2], 6: [30, 5]},
      self.same_group,
      self.join_group,
    )
    assert dict(operator) == {10: [2, 3, 4], 20: [1, 2], 30: [5]}

  def test_compress_join_single_element(self):
    """Test a single entry forms one run."""
    operator = CompressJoin({1: [10, 2]}, self.same_group, self.join_group)
    assert dict(operator) == {10: [2]}

  def test_compress_join_empty(self):
    """Test an empty source joins nothing."""
    assert list(CompressJoin([], self.same_group, self.join_group)) == []

  def test_compress_join_groups_only_consecutive_entries(self):
    """Test non-adjacent entries of a group form separate runs."""
    operator = CompressJoin([1, 1, 2, 1], lambda values: values[0] == values[1], lambda run: [len(run)])
    assert [value for _, value in operator] == [2, 1, 1]

  def test_compress_join_predicate_arguments(self):
    """Test the predicate receives values, keys and the run so far."""
    calls = []

    def predicate(values, keys, run):
      calls.append((values, keys, list(run)))
      return True

    list(CompressJoin({"a": 1, "b": 2}, predicate, lambda run: run))
    assert calls == [((1, 2), ("a", "b"), [("a", 1)])]

  def test_left_join(self):
    """Test left entries are joined with matching right values."""
    operator = LeftJoin({1: "a", 2: "b", 3: "c"}, {1: "x", 2: "y"})
    assert dict(operator) == {1: ["a", ["x"]], 2: ["b", ["y"]], 3: ["c", []]}

  def test_left_join_with_duplicate_right_keys(self):
    """Test every right value sharing a key is collected."""
    operator = LeftJoin({1: "a", 2: "b"}, pairs([(1, "x"), (1, "y"), (1, "z")]))
    assert dict(operator) == {1: ["a", ["x", "y", "z"]], 2: ["b", []]}

  def test_left_join_with_object_keys(self):
    """Test object keys are matched by identity."""
    first, second = object(), object()
    operator = LeftJoin(pairs([(first, "a"), (second, "b")]), pairs([(first, "x")]))
    assert list(operator) == [(first, ["a", ["x"]]), (second, ["b", []])]
