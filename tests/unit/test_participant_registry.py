"""Unit tests for ParticipantRegistry and Participant status tracking."""

from __future__ import annotations

import pytest

from riskquiz.configurations.configuration_constants import FinalChoices, Groups
from riskquiz.server.errors import (AlreadyCompletedError,
                                    DuplicateParticipantError,
                                    UnknownParticipantError)
from riskquiz.server.participant_state import (ParticipantRegistry,
                                               ParticipantStatus)


class TestParticipantRegistry:
    """Tests for ParticipantRegistry."""

    def test_add_creates_unassigned_participant(self):
        registry = ParticipantRegistry()
        participant = registry.add("a")

        assert participant.subject_id == "a"
        assert participant.group is None
        assert participant.question_index == 0
        assert participant.answers == []
        assert participant.final_choice is None
        assert participant.completed is False
        assert "a" in registry
        assert registry.count() == 1

    def test_add_duplicate_raises(self):
        registry = ParticipantRegistry()
        registry.add("a")

        with pytest.raises(DuplicateParticipantError):
            registry.add("a")
        assert registry.count() == 1

    def test_remove_returns_participant(self):
        registry = ParticipantRegistry()
        registry.add("a")

        removed = registry.remove("a")

        assert removed.subject_id == "a"
        assert "a" not in registry

    def test_remove_absent_is_noop(self):
        registry = ParticipantRegistry()
        assert registry.remove("missing") is None

    def test_ids_preserve_join_order(self):
        registry = ParticipantRegistry()
        for subject_id in ["c", "a", "b"]:
            registry.add(subject_id)

        assert registry.ids() == ["c", "a", "b"]

    def test_record_answer_appends_and_increments(self):
        registry = ParticipantRegistry()
        registry.add("a")

        registry.record_answer("a", "1 + 2", 3, True)
        participant = registry.record_answer("a", "4 + 4", None, False)

        assert participant.question_index == 2
        assert len(participant.answers) == 2
        assert participant.answers[0].question_index == 1
        assert participant.answers[1].question_index == 2
        assert participant.answers[1].chosen_answer is None

    def test_record_answer_unknown_raises(self):
        registry = ParticipantRegistry()
        with pytest.raises(UnknownParticipantError):
            registry.record_answer("ghost", "q", 1, True)

    def test_record_final_choice(self):
        registry = ParticipantRegistry()
        registry.add("a")

        participant = registry.record_final_choice("a", FinalChoices.Safe)

        assert participant.final_choice == FinalChoices.Safe
        assert participant.completed is True

    def test_record_final_choice_twice_raises(self):
        registry = ParticipantRegistry()
        registry.add("a")
        registry.record_final_choice("a", FinalChoices.Safe)

        with pytest.raises(AlreadyCompletedError):
            registry.record_final_choice("a", FinalChoices.Risky)
        assert registry.get("a").final_choice == FinalChoices.Safe

    def test_record_final_choice_unknown_raises(self):
        registry = ParticipantRegistry()
        with pytest.raises(UnknownParticipantError):
            registry.record_final_choice("ghost", FinalChoices.Safe)

    def test_count_by_group(self):
        registry = ParticipantRegistry()
        for subject_id in ["a", "b", "c"]:
            registry.add(subject_id)
        registry.get("a").group = Groups.GroupA
        registry.get("b").group = Groups.GroupB

        assert registry.count_by_group(Groups.GroupA) == 1
        assert registry.count_by_group(Groups.GroupB) == 1
        assert registry.count_by_group(None) == 1

    def test_clear(self):
        registry = ParticipantRegistry()
        registry.add("a")
        registry.clear()
        assert len(registry) == 0


class TestParticipantStatus:
    """Status is derived from the record, never stored."""

    def test_status_progression(self):
        registry = ParticipantRegistry()
        participant = registry.add("a")
        assert participant.status(quiz_length=2) is ParticipantStatus.WAITING

        participant.group = Groups.GroupA
        assert participant.status(quiz_length=2) is ParticipantStatus.IN_QUIZ

        registry.record_answer("a", "q", 1, True)
        registry.record_answer("a", "q", 1, True)
        assert participant.status(quiz_length=2) is ParticipantStatus.AWAITING_CHOICE

        registry.record_final_choice("a", FinalChoices.Risky)
        assert participant.status(quiz_length=2) is ParticipantStatus.COMPLETED
