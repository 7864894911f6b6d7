"""Unit tests for ExperimentConfig."""

from __future__ import annotations

import pytest

from riskquiz.configurations.configuration_constants import Groups
from riskquiz.configurations.experiment_config import ExperimentConfig
from riskquiz.questions.generators import complex_question, simple_question


class TestDefaults:
    """Tests for values resolved at construction time."""

    def test_defaults(self, monkeypatch):
        for var in ["HOST", "PORT", "QUIZ_PROFILE"]:
            monkeypatch.delenv(var, raising=False)

        config = ExperimentConfig()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.quiz_profile == "standard"
        assert config.quiz_length == 5
        assert config.save_experiment_data is False
        assert config.question_generators[Groups.GroupA] is complex_question
        assert config.question_generators[Groups.GroupB] is simple_question

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("QUIZ_PROFILE", "extended")

        config = ExperimentConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.quiz_length == 10

    def test_unknown_profile_in_environment_falls_back(self, monkeypatch):
        monkeypatch.setenv("QUIZ_PROFILE", "bogus")
        assert ExperimentConfig().quiz_length == 5


class TestBuilder:
    """Tests for the chainable configuration methods."""

    def test_methods_chain(self):
        config = (
            ExperimentConfig()
            .experiment(experiment_id="pilot", save_experiment_data=True)
            .hosting(host="localhost", port=5001)
            .quiz(profile="extended")
            .assignment(seed=123)
        )

        assert config.experiment_id == "pilot"
        assert config.save_experiment_data is True
        assert config.host == "localhost"
        assert config.port == 5001
        assert config.quiz_length == 10
        assert config.assignment_seed == 123

    def test_unset_arguments_leave_values_alone(self):
        config = ExperimentConfig().hosting(port=4000).hosting(host="h")
        assert config.port == 4000
        assert config.host == "h"

    def test_explicit_length_beats_profile(self):
        config = ExperimentConfig().quiz(profile="extended", quiz_length=3)
        assert config.quiz_profile == "extended"
        assert config.quiz_length == 3

    def test_unknown_profile_raises(self):
        with pytest.raises(ValueError, match="Unknown quiz profile"):
            ExperimentConfig().quiz(profile="marathon")

    def test_non_positive_length_raises(self):
        with pytest.raises(ValueError):
            ExperimentConfig().quiz(quiz_length=0)

    def test_questions_override_single_group(self):
        config = ExperimentConfig().questions(group_b=complex_question)

        assert config.question_generators[Groups.GroupA] is complex_question
        assert config.question_generators[Groups.GroupB] is complex_question

    def test_question_overrides_do_not_leak_between_configs(self):
        ExperimentConfig().questions(group_a=simple_question)
        assert ExperimentConfig().question_generators[Groups.GroupA] is complex_question
