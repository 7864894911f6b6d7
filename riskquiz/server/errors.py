"""Exceptions raised by the session state containers.

The coordinator catches all of these at its boundary: a late or malformed
message must leave the session untouched, never take the server down.
"""

from __future__ import annotations


class SessionError(Exception):
    """Base class for recoverable session errors."""


class UnknownParticipantError(SessionError):
    def __init__(self, subject_id: str):
        super().__init__(f"Unknown participant {subject_id}")
        self.subject_id = subject_id


class DuplicateParticipantError(SessionError):
    def __init__(self, subject_id: str):
        super().__init__(f"Participant {subject_id} has already joined")
        self.subject_id = subject_id


class AlreadyCompletedError(SessionError):
    def __init__(self, subject_id: str):
        super().__init__(f"Participant {subject_id} already submitted a final choice")
        self.subject_id = subject_id


class InvalidPhaseTransitionError(SessionError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot {requested} while session is {current}")
        self.current = current
        self.requested = requested
