"""Session coordinator: the single writer for all experiment session state.

Every inbound action (participant join/leave/answer/choice and admin
start/reset/stop) is applied here under one lock, and every outbound
event is published through a Broadcaster. The Socket.IO handlers in
app.py and admin/namespace.py are thin adapters around this class.

Session phases:
    IDLE -> RUNNING   start()
    RUNNING -> IDLE   reset() / stop(), passing through the transient RESET phase

"All complete" is a derived condition, not a phase: every connected
participant has either answered quiz_length questions or made a final
choice.
"""

from __future__ import annotations

import logging
import threading

from riskquiz.configurations import configuration_constants
from riskquiz.configurations.configuration_constants import (Groups,
                                                             LogStatus,
                                                             SessionPhase)
from riskquiz.questions import generators
from riskquiz.server import events
from riskquiz.server.broadcaster import (AdminGroup, All, Broadcaster,
                                         Individual)
from riskquiz.server.errors import (AlreadyCompletedError,
                                    DuplicateParticipantError,
                                    InvalidPhaseTransitionError,
                                    UnknownParticipantError)
from riskquiz.server.experiment_log import ExperimentLog, ExperimentLogEntry
from riskquiz.server.group_assigner import (BalancedRandomAssigner,
                                            GroupAssigner)
from riskquiz.server.participant_state import (Participant,
                                               ParticipantRegistry,
                                               ParticipantStatus)
from riskquiz.server.results import SessionResult, tally_results
from riskquiz.utils.typing import GroupName, SubjectID

logger = logging.getLogger(__name__)

# A participant in either status no longer blocks "all complete".
_FINISHED_STATUSES = (ParticipantStatus.AWAITING_CHOICE, ParticipantStatus.COMPLETED)


class SessionCoordinator:
    """
    The SessionCoordinator owns the state of the single active session:
    the participant registry, the two treatment groups, the finalized
    results, and the session phase.
    """

    def __init__(
        self,
        broadcaster: Broadcaster,
        quiz_length: int = configuration_constants.QUIZ_PROFILES[
            configuration_constants.DEFAULT_QUIZ_PROFILE
        ],
        question_generators: dict[GroupName, generators.QuestionGenerator] | None = None,
        group_assigner: GroupAssigner | None = None,
        experiment_log: ExperimentLog | None = None,
    ):
        self.broadcaster = broadcaster
        self.quiz_length = quiz_length
        self.question_generators = question_generators or dict(generators.DEFAULT_GENERATORS)
        self.group_assigner = group_assigner or BalancedRandomAssigner()
        self.experiment_log = experiment_log or ExperimentLog()

        # Re-entrant: a forced disconnect during reset/stop calls back into
        # leave() on the same thread while the lock is held.
        self.lock = threading.RLock()

        self.phase = SessionPhase.IDLE
        self.registry = ParticipantRegistry()
        self.group_a: list[SubjectID] = []
        self.group_b: list[SubjectID] = []
        self.completed: set[SubjectID] = set()
        self.results: list[SessionResult] = []
        self.all_complete_notified = False

    @classmethod
    def from_config(cls, config, broadcaster: Broadcaster) -> SessionCoordinator:
        return cls(
            broadcaster=broadcaster,
            quiz_length=config.quiz_length,
            question_generators=dict(config.question_generators),
            group_assigner=BalancedRandomAssigner(seed=config.assignment_seed),
            experiment_log=ExperimentLog(
                experiment_id=config.experiment_id,
                save_experiment_data=config.save_experiment_data,
            ),
        )

    ##################
    # Read accessors #
    ##################

    @property
    def is_running(self) -> bool:
        return self.phase is SessionPhase.RUNNING

    def snapshot(self) -> dict:
        with self.lock:
            return {
                "participant_count": self.registry.count(),
                "group_a_count": len(self.group_a),
                "group_b_count": len(self.group_b),
                "session_active": self.is_running,
                "session_started": self.is_running,
            }

    def request_results(self) -> list[SessionResult]:
        """Finalized results so far. Partial results are valid mid-session."""
        with self.lock:
            return list(self.results)

    def results_payload(self) -> dict:
        results = self.request_results()
        return {
            "results": [r.to_dict() for r in results],
            "tallies": tally_results(results),
        }

    def get_logs(self) -> list[ExperimentLogEntry]:
        return self.experiment_log.entries()

    def logs_payload(self) -> dict:
        return {"entries": [e.to_dict() for e in self.get_logs()]}

    #######################
    # Participant actions #
    #######################

    def join(self, subject_id: SubjectID) -> bool:
        """Register a participant. Late joiners are assigned and start immediately."""
        with self.lock:
            try:
                self.registry.add(subject_id)
            except DuplicateParticipantError as e:
                logger.warning(f"[Join] {e}; ignoring repeated join")
                return False

            logger.info(f"Participant joined: {subject_id} (phase={self.phase.name})")
            self._publish_snapshot()

            if self.is_running:
                self._assign_late_joiner(subject_id)
            else:
                self.broadcaster.publish(
                    Individual(subject_id),
                    events.WAITING,
                    {"message": configuration_constants.WAITING_MESSAGE},
                )
            return True

    def leave(self, subject_id: SubjectID) -> bool:
        """Drop a disconnected participant.

        Nothing is added to results for a participant who leaves mid-quiz;
        their answers are discarded with the participant record.
        """
        with self.lock:
            participant = self.registry.remove(subject_id)
            if participant is None:
                return False

            self._evict_from_groups(subject_id)
            self.completed.discard(subject_id)

            if not participant.completed and participant.answers:
                logger.info(
                    f"[Leave] {subject_id} left mid-quiz after "
                    f"{participant.question_index}/{self.quiz_length} answers; data dropped"
                )

            self._publish_snapshot()

            if self.is_running:
                self._check_all_complete()
            return True

    def submit_answer(
        self,
        subject_id: SubjectID,
        question_text: str | None,
        answer: int | str | None,
        correct: bool,
    ) -> bool:
        """Record an answer and send the next question or the final-choice prompt.

        The correctness flag is taken as reported by the participant's client.
        """
        with self.lock:
            if not self.is_running:
                logger.debug(f"[Answer] Ignoring answer from {subject_id}: session not running")
                return False

            participant = self.registry.get(subject_id)
            if participant is None:
                logger.info(f"Submit answer - participant not found: {subject_id}")
                return False

            status = participant.status(self.quiz_length)
            if status is ParticipantStatus.WAITING:
                logger.warning(f"[Answer] {subject_id} has no group yet; ignoring answer")
                return False

            if status is not ParticipantStatus.IN_QUIZ:
                logger.warning(
                    f"[Answer] {subject_id} already answered {participant.question_index} "
                    f"questions ({status.name}); ignoring extra answer"
                )
                return False

            self.registry.record_answer(subject_id, question_text, answer, correct)
            logger.info(
                f"Participant {subject_id} submitted answer for question "
                f"{participant.question_index}/{self.quiz_length}"
            )

            if participant.has_finished_quiz(self.quiz_length):
                logger.info(f"Participant {subject_id} completed quiz, sending final choice")
                self.broadcaster.publish(Individual(subject_id), events.SHOW_FINAL_CHOICE_PROMPT)
                self._check_all_complete()
            else:
                self._send_question(participant)
            return True

    def submit_final_choice(self, subject_id: SubjectID, choice: str) -> bool:
        """Record the participant's final choice and append their result."""
        with self.lock:
            if not self.is_running:
                logger.debug(f"[Choice] Ignoring choice from {subject_id}: session not running")
                return False

            if choice not in configuration_constants.FINAL_CHOICES:
                logger.warning(f"[Choice] {subject_id} sent invalid choice {choice!r}")
                return False

            participant = self.registry.get(subject_id)
            if participant is not None and participant.status(self.quiz_length) in (
                ParticipantStatus.WAITING,
                ParticipantStatus.IN_QUIZ,
            ):
                logger.warning(
                    f"[Choice] {subject_id} sent a final choice after only "
                    f"{participant.question_index}/{self.quiz_length} answers; ignoring"
                )
                return False

            try:
                participant = self.registry.record_final_choice(subject_id, choice)
            except UnknownParticipantError as e:
                logger.info(f"[Choice] {e}; ignoring")
                return False
            except AlreadyCompletedError as e:
                logger.warning(f"[Choice] {e}; ignoring")
                return False

            self.completed.add(subject_id)
            self.results.append(SessionResult.from_participant(participant))
            logger.info(f"Participant {subject_id} ({participant.group}) chose {choice}")

            self.broadcaster.publish(Individual(subject_id), events.EXPERIMENT_COMPLETE)
            self.broadcaster.publish(
                AdminGroup(),
                events.PARTICIPANT_COMPLETED,
                {
                    "completed_count": len(self.completed),
                    "total_count": self.registry.count(),
                },
            )
            self._check_all_complete()
            return True

    #################
    # Admin actions #
    #################

    def start(self) -> bool:
        """Assign every waiting participant to a group and send first questions."""
        with self.lock:
            try:
                self._require_phase(SessionPhase.IDLE, "start")
            except InvalidPhaseTransitionError as e:
                logger.warning(f"[Start] {e}; ignoring")
                return False

            self.phase = SessionPhase.RUNNING
            logger.info("Session started by admin")

            group_a, group_b = self.group_assigner.assign_all(self.registry.ids())
            for subject_id in group_a:
                self._add_to_group(self.registry.get(subject_id), Groups.GroupA)
            for subject_id in group_b:
                self._add_to_group(self.registry.get(subject_id), Groups.GroupB)

            for subject_id in self.group_a + self.group_b:
                self._send_question(self.registry.get(subject_id))

            self._publish_snapshot()
            return True

    def reset(self) -> ExperimentLogEntry | None:
        """End the session, logging it as completed if anyone finished."""
        return self._end_session(LogStatus.Completed)

    def stop(self) -> ExperimentLogEntry | None:
        """Abort the session, logging partial state and notifying everyone."""
        return self._end_session(LogStatus.Stopped)

    ###########
    # Helpers #
    ###########

    def _require_phase(self, expected: SessionPhase, requested: str) -> None:
        if self.phase is not expected:
            raise InvalidPhaseTransitionError(self.phase.name, requested)

    def _publish_snapshot(self) -> None:
        self.broadcaster.publish(AdminGroup(), events.SESSION_SNAPSHOT, self.snapshot())

    def _add_to_group(self, participant: Participant, group: GroupName) -> None:
        participant.group = group
        if group == Groups.GroupA:
            self.group_a.append(participant.subject_id)
        else:
            self.group_b.append(participant.subject_id)

    def _evict_from_groups(self, subject_id: SubjectID) -> None:
        if subject_id in self.group_a:
            self.group_a.remove(subject_id)
        if subject_id in self.group_b:
            self.group_b.remove(subject_id)

    def _assign_late_joiner(self, subject_id: SubjectID) -> None:
        participant = self.registry.get(subject_id)
        group = self.group_assigner.assign_one(len(self.group_a), len(self.group_b))
        self._add_to_group(participant, group)
        logger.info(
            f"Late joiner {subject_id} assigned to {group} "
            f"(A={len(self.group_a)}, B={len(self.group_b)})"
        )

        # A new participant with an unfinished quiz means the session is no
        # longer complete.
        self.all_complete_notified = False

        self._send_question(participant)
        self._publish_snapshot()

    def _send_question(self, participant: Participant | None) -> None:
        if participant is None or not participant.is_assigned:
            logger.warning("Cannot send question - invalid participant")
            return

        generator = self.question_generators.get(participant.group)
        if generator is None:
            logger.error(f"No question generator configured for group {participant.group}")
            return

        question = generator()
        question_number = participant.question_index + 1
        logger.info(
            f"Sending question {question_number}/{self.quiz_length} to "
            f"{participant.subject_id} ({participant.group} group)"
        )

        self.broadcaster.publish(
            Individual(participant.subject_id),
            events.QUESTION,
            {
                "question_index": question_number,
                "total_questions": self.quiz_length,
                **question.to_payload(),
                "group": participant.group,
            },
        )

    def _check_all_complete(self) -> bool:
        """Publish all_complete the first time every participant is done.

        Must be called with the lock held.
        """
        participants = self.registry.values()
        total = len(participants)
        done = sum(
            1 for p in participants
            if p.status(self.quiz_length) in _FINISHED_STATUSES
        )
        logger.info(f"Quiz completion check: {done}/{total} participants completed")

        if total == 0 or done < total:
            return False

        if not self.all_complete_notified:
            self.all_complete_notified = True
            logger.info("All participants completed quiz!")
            self.broadcaster.publish(AdminGroup(), events.ALL_COMPLETE)
        return True

    def _end_session(self, status: str) -> ExperimentLogEntry | None:
        with self.lock:
            logger.info(f"Session ending by admin: status={status}, phase={self.phase.name}")
            self.phase = SessionPhase.RESET

            entry = None
            participant_count = self.registry.count()
            if self.results or (status == LogStatus.Stopped and participant_count > 0):
                entry = self.experiment_log.record(
                    status=status,
                    participant_count=participant_count,
                    group_a_size=len(self.group_a),
                    group_b_size=len(self.group_b),
                    results=list(self.results),
                )

            # Clear state before dropping sockets so the disconnect handler's
            # leave() finds nothing to remove.
            subject_ids = self.registry.ids()
            self.registry.clear()
            self.group_a = []
            self.group_b = []
            self.completed = set()
            self.results = []
            self.all_complete_notified = False

            if status == LogStatus.Stopped:
                self.broadcaster.publish(All(), events.SESSION_ENDED)

            for subject_id in subject_ids:
                if status != LogStatus.Stopped:
                    self.broadcaster.publish(Individual(subject_id), events.SESSION_ENDED)
                self.broadcaster.disconnect(subject_id)

            self.phase = SessionPhase.IDLE
            self.broadcaster.publish(AdminGroup(), events.SESSION_RESET)
            self._publish_snapshot()
            return entry
