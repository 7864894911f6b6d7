"""Group assignment strategies for the two treatment arms.

This module provides the pluggable assignment interface that decides which
treatment group each participant lands in.

Assignment happens through exactly two paths:
    - assign_all(): once, when the admin starts the session, over every
      participant registered at that moment
    - assign_one(): for each participant who joins after the start

The default BalancedRandomAssigner shuffles uniformly and splits at the
midpoint, then keeps the groups balanced by sending late joiners to the
smaller group.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np

from riskquiz.configurations.configuration_constants import Groups
from riskquiz.utils.typing import GroupName, SubjectID

logger = logging.getLogger(__name__)


class GroupAssigner(ABC):
    """Abstract base class for group assignment strategies.

    Thread safety: both methods are called under the SessionCoordinator's
    lock and receive plain values, never live session state. Implementations
    should be pure apart from their random source.
    """

    @abstractmethod
    def assign_all(
        self, subject_ids: list[SubjectID]
    ) -> tuple[list[SubjectID], list[SubjectID]]:
        """Split the participants present at session start into two groups.

        Args:
            subject_ids: Every registered, unassigned participant id

        Returns:
            (group_a_ids, group_b_ids). Together they must contain each
            input id exactly once.
        """
        ...

    @abstractmethod
    def assign_one(self, group_a_size: int, group_b_size: int) -> GroupName:
        """Choose the group for a participant joining a running session.

        Args:
            group_a_size: Current number of members in group A
            group_b_size: Current number of members in group B

        Returns:
            Groups.GroupA or Groups.GroupB
        """
        ...


class BalancedRandomAssigner(GroupAssigner):
    """Uniform random split at start, smallest-group-first afterwards.

    The permutation is drawn with numpy's Generator.permutation, which is
    uniform over all orderings. floor(n/2) participants go to group A and
    the remainder to group B, so group B is larger by one when n is odd.
    Late joiners go to the smaller group; ties go to group A.
    """

    def __init__(self, seed: int | None = None):
        """Initialize assigner.

        Args:
            seed: Optional seed for reproducible assignments. If None
                  (default), assignments are drawn from fresh OS entropy.
        """
        self.rng = np.random.default_rng(seed)

    def assign_all(
        self, subject_ids: list[SubjectID]
    ) -> tuple[list[SubjectID], list[SubjectID]]:
        shuffled = [subject_ids[i] for i in self.rng.permutation(len(subject_ids))]
        midpoint = len(shuffled) // 2

        group_a, group_b = shuffled[:midpoint], shuffled[midpoint:]
        logger.info(
            f"[GroupAssigner] Split {len(shuffled)} participants: "
            f"{len(group_a)} -> {Groups.GroupA}, {len(group_b)} -> {Groups.GroupB}"
        )
        return group_a, group_b

    def assign_one(self, group_a_size: int, group_b_size: int) -> GroupName:
        if group_a_size <= group_b_size:
            return Groups.GroupA
        return Groups.GroupB
