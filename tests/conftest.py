"""
Shared pytest fixtures for riskquiz tests.

Provides:
- broadcaster: RecordingBroadcaster that captures every published event
- make_coordinator: Factory for SessionCoordinators wired to the recorder
- coordinator: Default coordinator (quiz_length=5, fixed questions)

No running server or browser is needed; Socket.IO handler tests use
Flask-SocketIO's test client.
"""

from __future__ import annotations

import pytest

from riskquiz.configurations.configuration_constants import Groups
from riskquiz.questions.generators import Question
from riskquiz.server.broadcaster import AdminGroup, All, Broadcaster, Individual
from riskquiz.server.experiment_log import ExperimentLog
from riskquiz.server.group_assigner import BalancedRandomAssigner
from riskquiz.server.session_coordinator import SessionCoordinator

# ---------------------------------------------------------------------------
# Recording transport
# ---------------------------------------------------------------------------


class RecordingBroadcaster(Broadcaster):
    """Broadcaster that stores (audience, event, payload) tuples in order."""

    def __init__(self):
        self.published: list[tuple] = []
        self.disconnected: list[str] = []

    def publish(self, audience, event, payload=None):
        self.published.append((audience, event, payload))

    def disconnect(self, subject_id):
        self.disconnected.append(subject_id)

    def events_for(self, audience) -> list[str]:
        return [e for a, e, _ in self.published if a == audience]

    def participant_events(self, subject_id) -> list[str]:
        return self.events_for(Individual(subject_id))

    def admin_events(self) -> list[str]:
        return self.events_for(AdminGroup())

    def broadcast_events(self) -> list[str]:
        return self.events_for(All())

    def payloads(self, event, audience=None) -> list:
        return [
            p for a, e, p in self.published
            if e == event and (audience is None or a == audience)
        ]

    def clear(self):
        self.published.clear()
        self.disconnected.clear()


def fixed_group_a_question() -> Question:
    return Question(question_text="If x + y = 5 and y = 2, what is x?", options=[3, 1, 4, 2], correct_answer=3)


def fixed_group_b_question() -> Question:
    return Question(question_text="1 + 1", options=[2, 5, 9, 13], correct_answer=2)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def make_coordinator(broadcaster):
    def _make(quiz_length=5, seed=None, experiment_log=None):
        return SessionCoordinator(
            broadcaster=broadcaster,
            quiz_length=quiz_length,
            question_generators={
                Groups.GroupA: fixed_group_a_question,
                Groups.GroupB: fixed_group_b_question,
            },
            group_assigner=BalancedRandomAssigner(seed=seed),
            experiment_log=experiment_log or ExperimentLog(experiment_id="test"),
        )

    return _make


@pytest.fixture
def coordinator(make_coordinator):
    return make_coordinator()
