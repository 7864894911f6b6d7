"""Finalized participant outcomes and the raw tallies shown to the admin."""

from __future__ import annotations

import dataclasses

import flatten_dict
import pandas as pd

from riskquiz.configurations import configuration_constants
from riskquiz.server.participant_state import AnswerRecord, Participant
from riskquiz.utils.typing import GroupName, SubjectID


@dataclasses.dataclass(frozen=True)
class SessionResult:
    """Immutable outcome for one participant who made a final choice."""

    subject_id: SubjectID
    group: GroupName
    answers: tuple[AnswerRecord, ...]
    final_choice: str
    joined_at: float | None = None

    @classmethod
    def from_participant(cls, participant: Participant) -> SessionResult:
        return cls(
            subject_id=participant.subject_id,
            group=participant.group,
            answers=tuple(participant.answers),
            final_choice=participant.final_choice,
            joined_at=participant.joined_at,
        )

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "group": self.group,
            "answers": [a.to_dict() for a in self.answers],
            "final_choice": self.final_choice,
            "joined_at": self.joined_at,
        }


def tally_results(results: list[SessionResult]) -> dict[GroupName, dict[str, int]]:
    """Count final choices per group.

    Both groups and both choices are always present, with zero counts where
    nobody chose.
    """
    tallies = {
        group: {choice: 0 for choice in configuration_constants.FINAL_CHOICES}
        for group in configuration_constants.GROUPS
    }
    if not results:
        return tallies

    df = pd.DataFrame(
        [{"group": r.group, "final_choice": r.final_choice} for r in results]
    )
    counts = pd.crosstab(df["group"], df["final_choice"])

    for group in counts.index:
        for choice in counts.columns:
            if group in tallies and choice in tallies[group]:
                tallies[group][choice] = int(counts.at[group, choice])

    return tallies


def results_to_dataframe(results: list[SessionResult]) -> pd.DataFrame:
    """Flatten results into one row per answered question.

    Nested answer fields are flattened with a dot reducer, e.g.
    ``answer.question_text``, ``answer.was_correct``.
    """
    rows = []
    for result in results:
        for answer in result.answers:
            rows.append(
                flatten_dict.flatten(
                    {
                        "subject_id": result.subject_id,
                        "group": result.group,
                        "final_choice": result.final_choice,
                        "joined_at": result.joined_at,
                        "answer": answer.to_dict(),
                    },
                    reducer="dot",
                )
            )

    return pd.DataFrame(rows)
