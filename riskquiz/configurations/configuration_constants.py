from __future__ import annotations

import dataclasses
from enum import Enum, auto


@dataclasses.dataclass(frozen=True)
class Groups:
    """Treatment arms. Group A receives the complex (algebra) questions,
    group B the simple single-digit additions."""

    GroupA = "group_a"
    GroupB = "group_b"


@dataclasses.dataclass(frozen=True)
class FinalChoices:
    Risky = "risky"
    Safe = "safe"


@dataclasses.dataclass(frozen=True)
class LogStatus:
    Completed = "completed"
    Stopped = "stopped"


class SessionPhase(Enum):
    """Session lifecycle phases.

    - IDLE: Accepting joins, participants wait for the admin to start
    - RUNNING: Quiz in progress, late joiners are assigned immediately
    - RESET: Transient while a reset/stop tears the session down
    """
    IDLE = auto()
    RUNNING = auto()
    RESET = auto()


# Number of questions per participant for each deployment profile.
QUIZ_PROFILES = {
    "standard": 5,
    "extended": 10,
}

DEFAULT_QUIZ_PROFILE = "standard"

GROUPS = (Groups.GroupA, Groups.GroupB)

FINAL_CHOICES = (FinalChoices.Risky, FinalChoices.Safe)

# Number of answer options every generated question carries.
NUM_OPTIONS = 4

WAITING_MESSAGE = "Waiting for session to start..."
