"""Participant progress tracking.

This module holds the per-participant records for the current session,
complementary to SessionCoordinator which owns the session-wide state
(phase, groups, results).

Participant (this file): one connected subject's group, answers and final choice
ParticipantRegistry (this file): every participant currently connected
"""

from __future__ import annotations

import dataclasses
import logging
import time
from enum import Enum, auto

from riskquiz.server.errors import (AlreadyCompletedError,
                                    DuplicateParticipantError,
                                    UnknownParticipantError)
from riskquiz.utils.typing import GroupName, SubjectID

logger = logging.getLogger(__name__)


class ParticipantStatus(Enum):
    """Where a participant is in their experiment flow.

    Derived from the participant record, never stored:
    - WAITING: Joined, not yet assigned to a group
    - IN_QUIZ: Assigned, still answering questions
    - AWAITING_CHOICE: Answered every question, final choice pending
    - COMPLETED: Final choice recorded
    """
    WAITING = auto()
    IN_QUIZ = auto()
    AWAITING_CHOICE = auto()
    COMPLETED = auto()


@dataclasses.dataclass(frozen=True)
class AnswerRecord:
    """One submitted answer. ``chosen_answer`` is None when the client timed out."""

    question_text: str | None
    chosen_answer: int | str | None
    was_correct: bool
    question_index: int

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)


@dataclasses.dataclass
class Participant:
    subject_id: SubjectID
    group: GroupName | None = None
    question_index: int = 0
    answers: list[AnswerRecord] = dataclasses.field(default_factory=list)
    final_choice: str | None = None
    completed: bool = False
    joined_at: float = dataclasses.field(default_factory=time.time)

    @property
    def is_assigned(self) -> bool:
        return self.group is not None

    def has_finished_quiz(self, quiz_length: int) -> bool:
        return self.question_index >= quiz_length

    def status(self, quiz_length: int) -> ParticipantStatus:
        if self.completed:
            return ParticipantStatus.COMPLETED
        if not self.is_assigned:
            return ParticipantStatus.WAITING
        if self.has_finished_quiz(quiz_length):
            return ParticipantStatus.AWAITING_CHOICE
        return ParticipantStatus.IN_QUIZ


class ParticipantRegistry:
    """Holds every participant connected to the current session.

    The registry does no locking of its own; SessionCoordinator is the only
    writer and serializes all calls.
    """

    def __init__(self):
        self._participants: dict[SubjectID, Participant] = {}

    def __contains__(self, subject_id: SubjectID) -> bool:
        return subject_id in self._participants

    def __len__(self) -> int:
        return len(self._participants)

    def get(self, subject_id: SubjectID) -> Participant | None:
        return self._participants.get(subject_id)

    def ids(self) -> list[SubjectID]:
        """Participant ids in join order."""
        return list(self._participants.keys())

    def values(self) -> list[Participant]:
        return list(self._participants.values())

    def add(self, subject_id: SubjectID) -> Participant:
        """Register a new, unassigned participant.

        Raises:
            DuplicateParticipantError: if the id is already registered
        """
        if subject_id in self._participants:
            raise DuplicateParticipantError(subject_id)

        participant = Participant(subject_id=subject_id)
        self._participants[subject_id] = participant
        logger.info(f"[Registry] Added {subject_id} ({len(self._participants)} total)")
        return participant

    def remove(self, subject_id: SubjectID) -> Participant | None:
        """Remove a participant. Returns the removed record, or None if absent."""
        participant = self._participants.pop(subject_id, None)
        if participant is not None:
            logger.info(
                f"[Registry] Removed {subject_id} after {participant.question_index} answers"
            )
        return participant

    def _require(self, subject_id: SubjectID) -> Participant:
        participant = self._participants.get(subject_id)
        if participant is None:
            raise UnknownParticipantError(subject_id)
        return participant

    def record_answer(
        self,
        subject_id: SubjectID,
        question_text: str | None,
        answer: int | str | None,
        correct: bool,
    ) -> Participant:
        """Append an answer and advance the participant's question index.

        Raises:
            UnknownParticipantError: if the id is not registered
        """
        participant = self._require(subject_id)
        participant.answers.append(
            AnswerRecord(
                question_text=question_text,
                chosen_answer=answer,
                was_correct=bool(correct),
                question_index=participant.question_index + 1,
            )
        )
        participant.question_index += 1
        return participant

    def record_final_choice(self, subject_id: SubjectID, choice: str) -> Participant:
        """Set the participant's final choice and mark them completed.

        Raises:
            UnknownParticipantError: if the id is not registered
            AlreadyCompletedError: if a final choice was already recorded
        """
        participant = self._require(subject_id)
        if participant.completed:
            raise AlreadyCompletedError(subject_id)

        participant.final_choice = choice
        participant.completed = True
        return participant

    def count(self) -> int:
        return len(self._participants)

    def count_by_group(self, group: GroupName | None) -> int:
        return sum(1 for p in self._participants.values() if p.group == group)

    def clear(self) -> None:
        self._participants.clear()
