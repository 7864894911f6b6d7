from __future__ import annotations

import logging
import os

from riskquiz.configurations import configuration_constants
from riskquiz.questions import generators
from riskquiz.utils.sentinels import NotProvided

logger = logging.getLogger(__name__)


class ExperimentConfig:
    def __init__(self):

        # Experiment
        self.experiment_id: str = "risk_choice"
        self.save_experiment_data = False

        # Hosting
        self.host = os.environ.get("HOST", "0.0.0.0")
        self.port = int(os.environ.get("PORT", 3000))

        # Quiz
        self.quiz_profile: str = os.environ.get(
            "QUIZ_PROFILE", configuration_constants.DEFAULT_QUIZ_PROFILE
        )
        self.quiz_length: int = configuration_constants.QUIZ_PROFILES.get(
            self.quiz_profile,
            configuration_constants.QUIZ_PROFILES[configuration_constants.DEFAULT_QUIZ_PROFILE],
        )

        # Group -> question generator
        self.question_generators: dict[str, generators.QuestionGenerator] = dict(
            generators.DEFAULT_GENERATORS
        )

        # Group assignment
        self.assignment_seed: int | None = None

    def experiment(
        self,
        experiment_id: str = NotProvided,
        save_experiment_data: bool = NotProvided,
    ) -> ExperimentConfig:
        if experiment_id is not NotProvided:
            self.experiment_id = experiment_id

        if save_experiment_data is not NotProvided:
            self.save_experiment_data = save_experiment_data

        return self

    def hosting(
        self,
        host: str | None = NotProvided,
        port: int | None = NotProvided,
    ) -> ExperimentConfig:
        if host is not NotProvided:
            self.host = host

        if port is not NotProvided:
            self.port = port

        return self

    def quiz(
        self,
        profile: str = NotProvided,
        quiz_length: int = NotProvided,
    ) -> ExperimentConfig:
        """
        Configure how many questions each participant answers before the
        final choice.

        Args:
            profile: Name of a deployment profile in QUIZ_PROFILES
                     ("standard" = 5 questions, "extended" = 10).
            quiz_length: Explicit number of questions. Takes precedence
                         over the profile when both are given.
        """
        if profile is not NotProvided:
            if profile not in configuration_constants.QUIZ_PROFILES:
                raise ValueError(
                    f"Unknown quiz profile '{profile}'. "
                    f"Valid profiles: {sorted(configuration_constants.QUIZ_PROFILES)}"
                )
            self.quiz_profile = profile
            self.quiz_length = configuration_constants.QUIZ_PROFILES[profile]

        if quiz_length is not NotProvided:
            if quiz_length < 1:
                raise ValueError(f"quiz_length must be positive, got {quiz_length}")
            self.quiz_length = quiz_length

        logger.info(
            f"Quiz configured: profile={self.quiz_profile}, quiz_length={self.quiz_length}"
        )
        return self

    def questions(
        self,
        group_a: generators.QuestionGenerator = NotProvided,
        group_b: generators.QuestionGenerator = NotProvided,
    ) -> ExperimentConfig:
        if group_a is not NotProvided:
            self.question_generators[configuration_constants.Groups.GroupA] = group_a

        if group_b is not NotProvided:
            self.question_generators[configuration_constants.Groups.GroupB] = group_b

        return self

    def assignment(self, seed: int | None = NotProvided) -> ExperimentConfig:
        if seed is not NotProvided:
            self.assignment_seed = seed

        return self
