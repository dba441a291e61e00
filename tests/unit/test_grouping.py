"""Unit tests for fragment grouping and merging."""

import pytest

from chunkstore.schemas import Point, TimeSeries, join_key
from chunkstore.storage import group_by, merge, merge_append, merge_sorted
from tests.fixtures.sample_series import make_series


class TestGroupBy:
    """Test group_by function."""
    
    def test_grouping_is_a_partition(self, key_function):
        """Every fragment lands in exactly one group."""
        fragments = [
            make_series("cpu", "a", [(1, 1.0)]),
            make_series("mem", "a", [(1, 2.0)]),
            make_series("cpu", "b", [(1, 3.0)]),
            make_series("cpu", "a", [(2, 4.0)]),
            make_series("mem", "a", [(2, 5.0)]),
        ]
        
        grouped = group_by(fragments, key_function)
        
        members = [id(f) for group in grouped.values() for f in group]
        assert sorted(members) == sorted(id(f) for f in fragments)
        assert len(members) == len(set(members))
        for key, group in grouped.items():
            assert all(key_function(f) == key for f in group)
            
    def test_preserves_encounter_order(self, key_function):
        """Groups and their members keep first-encounter order."""
        first = make_series("cpu", "b", [(1, 1.0)])
        second = make_series("cpu", "a", [(1, 2.0)])
        third = make_series("cpu", "b", [(2, 3.0)])
        
        grouped = group_by([first, second, third], key_function)
        
        assert list(grouped) == ["cpu-b", "cpu-a"]
        assert grouped["cpu-b"] == [first, third]
        
    def test_empty_input(self, key_function):
        assert group_by([], key_function) == {}
        
    def test_consumes_iterators(self, key_function):
        """Lazy inputs are fully materialized."""
        fragments = (make_series("cpu", str(i % 2), [(i, float(i))]) for i in range(4))
        
        grouped = group_by(fragments, key_function)
        
        assert {k: len(v) for k, v in grouped.items()} == {"cpu-0": 2, "cpu-1": 2}


class TestMerge:
    """Test merge operators."""
    
    def test_append_keeps_fragment_then_point_order(self):
        """Fragments of 2, 3 and 4 points merge into 9 points in order."""
        fragments = [
            make_series("cpu", "a", [(1, 1.0), (2, 2.0)]),
            make_series("cpu", "a", [(3, 3.0), (4, 4.0), (5, 5.0)]),
            make_series("cpu", "a", [(6, 6.0), (7, 7.0), (8, 8.0), (9, 9.0)]),
        ]
        
        merged = merge(fragments, merge_append)
        
        assert merged.size() == 9
        assert merged.timestamps() == list(range(1, 10))
        assert merged.attributes == {"metric": "cpu", "host": "a"}
        
    def test_append_does_not_sort(self):
        """Out-of-order fragments give a non-monotonic series."""
        later = make_series("cpu", "a", [(5, 5.0)])
        earlier = make_series("cpu", "a", [(1, 1.0)])
        
        merged = merge([later, earlier], merge_append)
        
        assert merged.timestamps() == [5, 1]
        
    def test_merge_leaves_fragments_untouched(self):
        first = make_series("cpu", "a", [(1, 1.0)])
        second = make_series("cpu", "a", [(2, 2.0)])
        
        merged = merge([first, second], merge_append)
        
        assert merged.size() == 2
        assert first.size() == 1
        assert second.size() == 1
        
    def test_single_fragment(self):
        fragment = make_series("cpu", "a", [(1, 1.0)])
        
        merged = merge([fragment], merge_append)
        
        assert merged is not fragment
        assert merged == fragment
        
    def test_many_fragments_fold_into_one_accumulator(self):
        """Thousands of fragments merge by extending a single series."""
        fragments = [
            make_series("cpu", "a", [(i * 10 + j, float(j)) for j in range(10)])
            for i in range(5000)
        ]
        accumulators = set()
        
        def recording_append(first, second):
            accumulators.add(id(first))
            return merge_append(first, second)
        
        merged = merge(fragments, recording_append)
        
        assert merged.size() == 50000
        assert merged.timestamps() == list(range(50000))
        assert len(accumulators) == 1
        assert all(fragment.size() == 10 for fragment in fragments)
        
    def test_empty_group_is_rejected(self):
        with pytest.raises(ValueError):
            merge([], merge_append)
            
    def test_sorted_merge_interleaves(self):
        """The sorted operator yields a chronological series."""
        later = make_series("cpu", "a", [(2, 2.0), (4, 4.0)])
        earlier = make_series("cpu", "a", [(1, 1.0), (3, 3.0)])
        
        merged = merge([later, earlier], merge_sorted)
        
        assert merged.points == [Point(1, 1.0), Point(2, 2.0), Point(3, 3.0), Point(4, 4.0)]
        
    def test_sorted_merge_of_chronological_fragments(self):
        fragments = [make_series("cpu", "a", [(i, float(i))]) for i in range(5)]
        
        merged = merge(fragments, merge_sorted)
        
        assert merged.timestamps() == [0, 1, 2, 3, 4]


class TestJoinKey:
    """Test join_key helper."""
    
    def test_joins_attribute_values(self):
        key = join_key("metric", "host")
        
        assert key(TimeSeries(attributes={"metric": "cpu", "host": "a"})) == "cpu-a"
        
    def test_missing_attribute_is_empty(self):
        key = join_key("metric", "host", separator="|")
        
        assert key(TimeSeries(attributes={"metric": "cpu"})) == "cpu|"
        
    def test_requires_fields(self):
        with pytest.raises(ValueError):
            join_key()
