"""Tests for the ranker and the stable merge sort behind it."""

import pytest

from sire.aggregate import aggregate
from sire.dsa import merge_sort
from sire.models import ImpactGroup, RankedEntry
from sire.rank import rank_groups, rank_impacts, top_k


class TestMergeSort:
    def test_sorts_ascending_and_descending(self):
        data = [5, 1, 4, 2, 3]
        assert merge_sort(data) == [1, 2, 3, 4, 5]
        assert merge_sort(data, reverse=True) == [5, 4, 3, 2, 1]
        assert data == [5, 1, 4, 2, 3]

    def test_descending_sort_is_stable(self):
        pairs = [("a", 1), ("b", 2), ("c", 1), ("d", 2), ("e", 1)]
        out = merge_sort(pairs, key=lambda p: p[1], reverse=True)
        assert [p[0] for p in out] == ["b", "d", "a", "c", "e"]


class TestTopK:
    def test_orders_descending_and_truncates(self):
        out = top_k({"a": 3.0, "b": 9.0, "c": 1.0, "d": 5.0}, 2)
        assert out == [RankedEntry("b", 9.0), RankedEntry("d", 5.0)]

    def test_fewer_than_k_returns_all(self):
        out = top_k({"a": 1.0, "b": 2.0}, 10)
        assert [e.label for e in out] == ["b", "a"]

    @pytest.mark.parametrize("k", [0, -3])
    def test_non_positive_k_is_empty(self, k):
        assert top_k({"a": 1.0}, k) == []

    def test_empty_mapping(self):
        assert top_k({}, 10) == []

    def test_ties_keep_first_seen_order(self):
        out = top_k({"x": 2.0, "y": 7.0, "z": 2.0, "w": 2.0}, 4)
        assert [e.label for e in out] == ["y", "x", "z", "w"]


class TestRankGroups:
    def test_length_and_monotonic_values(self, storm_batch):
        groups = aggregate(storm_batch).groups
        for metric in ("fatalities", "injuries", "damage", "property_damage", "crop_damage", "health", "events"):
            for k in (1, 3, 10):
                out = rank_groups(groups, metric, k)
                assert len(out) == min(k, len(groups))
                values = [e.value for e in out]
                assert values == sorted(values, reverse=True)

    def test_unknown_metric(self):
        with pytest.raises(ValueError):
            rank_groups({"A": ImpactGroup("A")}, "wind_speed")

    def test_metric_name_is_case_insensitive(self):
        groups = {"A": ImpactGroup("A", fatalities=2), "B": ImpactGroup("B", fatalities=4)}
        assert rank_groups(groups, " Fatalities ", 1) == [RankedEntry("B", 4)]


class TestRankImpacts:
    def test_tornado_flood_example(self, tornado_flood):
        ranking = rank_impacts(aggregate(tornado_flood), k=1)
        assert ranking.fatalities == [RankedEntry("Tornado", 5)]
        assert ranking.injuries == [RankedEntry("Tornado", 10)]
        assert ranking.damage == [RankedEntry("Flood", 3_001_000)]

    def test_three_independent_rankings(self, storm_batch):
        ranking = rank_impacts(aggregate(storm_batch), k=3)
        assert [e.label for e in ranking.fatalities] == ["EXCESSIVE HEAT", "TORNADO", "LIGHTNING"]
        assert [e.label for e in ranking.injuries] == ["TORNADO", "EXCESSIVE HEAT", "TSTM WIND"]
        assert [e.label for e in ranking.damage] == ["FLOOD", "TORNADO", "HAIL"]
        assert ranking.damage[0].value == pytest.approx(1_010_000_070)

    def test_empty_aggregation(self):
        ranking = rank_impacts(aggregate([]))
        assert ranking.fatalities == [] and ranking.injuries == [] and ranking.damage == []
