"""Experiment log of finished and stopped sessions.

Each reset or stop that finds something worth keeping appends one
ExperimentLogEntry. The log lives in memory for the lifetime of the
process and is served to the admin dashboard on request.

When save_experiment_data is enabled, each entry that has results is also
exported to data/{experiment_id}/session_{session_id}.csv for
post-experiment analysis.
"""

from __future__ import annotations

import dataclasses
import datetime
import logging
import os
import threading

from riskquiz.server.results import SessionResult, results_to_dataframe

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ExperimentLogEntry:
    """Immutable snapshot of a session, taken at reset/stop time.

    Attributes:
        session_id: Monotonic counter, starting at 1
        timestamp: ISO-8601 UTC time the entry was recorded
        participant_count: Participants connected at reset/stop time
        group_a_size: Members of group A at reset/stop time
        group_b_size: Members of group B at reset/stop time
        status: LogStatus.Completed (reset) or LogStatus.Stopped (stop)
        results: Every finalized result of the session
    """

    session_id: int
    timestamp: str
    participant_count: int
    group_a_size: int
    group_b_size: int
    status: str
    results: tuple[SessionResult, ...] = ()

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "timestamp": self.timestamp,
            "participant_count": self.participant_count,
            "group_a_size": self.group_a_size,
            "group_b_size": self.group_b_size,
            "status": self.status,
            "results": [r.to_dict() for r in self.results],
        }


class ExperimentLog:
    """Append-only record of past sessions."""

    DATA_DIR = "data"

    def __init__(self, experiment_id: str | None = None, save_experiment_data: bool = False):
        """Initialize the experiment log.

        Args:
            experiment_id: Used to name the export directory
            save_experiment_data: Whether to export each entry's results to CSV
        """
        self.experiment_id = experiment_id or "experiment"
        self.save_experiment_data = save_experiment_data
        self._entries: list[ExperimentLogEntry] = []
        self._next_session_id = 1
        self._lock = threading.Lock()

        if self.save_experiment_data:
            os.makedirs(self.export_dir, exist_ok=True)
            logger.info(f"Session results will be saved to {self.export_dir}/")

    @property
    def export_dir(self) -> str:
        return os.path.join(self.DATA_DIR, self.experiment_id)

    def __len__(self) -> int:
        return len(self._entries)

    def record(
        self,
        status: str,
        participant_count: int,
        group_a_size: int,
        group_b_size: int,
        results: list[SessionResult],
    ) -> ExperimentLogEntry:
        """Append a new entry and return it."""
        with self._lock:
            entry = ExperimentLogEntry(
                session_id=self._next_session_id,
                timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
                participant_count=participant_count,
                group_a_size=group_a_size,
                group_b_size=group_b_size,
                status=status,
                results=tuple(results),
            )
            self._next_session_id += 1
            self._entries.append(entry)

        logger.info(
            f"[ExperimentLog] Recorded session {entry.session_id}: status={status}, "
            f"participants={participant_count}, results={len(entry.results)}"
        )

        if self.save_experiment_data and entry.results:
            self._write_to_file(entry)

        return entry

    def entries(self) -> list[ExperimentLogEntry]:
        with self._lock:
            return list(self._entries)

    def _write_to_file(self, entry: ExperimentLogEntry) -> None:
        """Export an entry's results as CSV, one row per answered question.

        Args:
            entry: The ExperimentLogEntry to export
        """
        filepath = os.path.join(self.export_dir, f"session_{entry.session_id}.csv")

        df = results_to_dataframe(list(entry.results))
        df["session_id"] = entry.session_id
        df["status"] = entry.status
        df["timestamp"] = entry.timestamp

        try:
            df.to_csv(filepath, index=False)
            logger.info(f"Saving {filepath}")
        except Exception as e:
            logger.error(f"Failed to write session results to {filepath}: {e}")
