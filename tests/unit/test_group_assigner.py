"""Unit tests for BalancedRandomAssigner.

Randomness is checked statistically over repeated trials, never for an
exact split.
"""

from __future__ import annotations

import collections

from riskquiz.configurations.configuration_constants import Groups
from riskquiz.server.group_assigner import BalancedRandomAssigner, GroupAssigner


class TestAssignAll:
    """Tests for the start-of-session split."""

    def test_is_a_group_assigner(self):
        assert isinstance(BalancedRandomAssigner(), GroupAssigner)

    def test_partition_and_midpoint(self):
        assigner = BalancedRandomAssigner()
        ids = [f"s{i}" for i in range(9)]

        group_a, group_b = assigner.assign_all(ids)

        assert len(group_a) == 4
        assert len(group_b) == 5
        assert set(group_a).isdisjoint(group_b)
        assert sorted(group_a + group_b) == sorted(ids)

    def test_empty_input(self):
        group_a, group_b = BalancedRandomAssigner().assign_all([])
        assert group_a == []
        assert group_b == []

    def test_single_participant_goes_to_group_b(self):
        """floor(1/2) = 0 members go to group A."""
        group_a, group_b = BalancedRandomAssigner().assign_all(["only"])
        assert group_a == []
        assert group_b == ["only"]

    def test_seed_reproduces_assignment(self):
        ids = [f"s{i}" for i in range(10)]
        first = BalancedRandomAssigner(seed=42).assign_all(ids)
        second = BalancedRandomAssigner(seed=42).assign_all(ids)
        assert first == second

    def test_does_not_mutate_input(self):
        ids = ["a", "b", "c", "d"]
        BalancedRandomAssigner().assign_all(ids)
        assert ids == ["a", "b", "c", "d"]

    def test_each_participant_lands_in_group_a_about_half_the_time(self):
        assigner = BalancedRandomAssigner()
        ids = ["a", "b", "c", "d"]
        trials = 4000

        in_group_a = collections.Counter()
        for _ in range(trials):
            group_a, _ = assigner.assign_all(ids)
            in_group_a.update(group_a)

        for subject_id in ids:
            assert 0.44 < in_group_a[subject_id] / trials < 0.56

    def test_all_orderings_appear(self):
        """A uniform permutation of 3 ids produces all 6 orderings."""
        assigner = BalancedRandomAssigner()
        seen = collections.Counter()
        trials = 3000
        for _ in range(trials):
            group_a, group_b = assigner.assign_all(["x", "y", "z"])
            seen[tuple(group_a + group_b)] += 1

        assert len(seen) == 6
        for count in seen.values():
            assert 0.12 < count / trials < 0.22


class TestAssignOne:
    """Tests for late-joiner assignment."""

    def test_smaller_group_wins(self):
        assigner = BalancedRandomAssigner()
        assert assigner.assign_one(3, 5) == Groups.GroupA
        assert assigner.assign_one(5, 3) == Groups.GroupB

    def test_tie_goes_to_group_a(self):
        assigner = BalancedRandomAssigner()
        assert assigner.assign_one(0, 0) == Groups.GroupA
        assert assigner.assign_one(4, 4) == Groups.GroupA

    def test_repeated_late_joins_stay_balanced(self):
        assigner = BalancedRandomAssigner()
        sizes = {Groups.GroupA: 0, Groups.GroupB: 0}
        for _ in range(25):
            group = assigner.assign_one(sizes[Groups.GroupA], sizes[Groups.GroupB])
            sizes[group] += 1
            assert abs(sizes[Groups.GroupA] - sizes[Groups.GroupB]) <= 1
