"""
Risk Choice Experiment (complex vs. simple quiz)

This example runs the two-arm experiment:
- Participants connect and wait until the admin starts the session
- On start, participants are split 50/50 between the complex (algebra)
  group and the simple (single-digit addition) group
- Each participant answers a short timed quiz, then chooses between a
  risky and a safe payoff
- The admin console on /admin tracks progress, results and past sessions

Usage:
    python -m riskquiz.examples.risk_choice_experiment --profile extended
"""

from __future__ import annotations

import eventlet

eventlet.monkey_patch()

import argparse
import os

from riskquiz.configurations import configuration_constants, experiment_config
from riskquiz.server import app

if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", 3000)),
        help="Port number to listen on",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("HOST", "0.0.0.0"),
        help="Host address to bind",
    )
    parser.add_argument(
        "--profile",
        choices=sorted(configuration_constants.QUIZ_PROFILES),
        default=os.environ.get("QUIZ_PROFILE", configuration_constants.DEFAULT_QUIZ_PROFILE),
        help="Deployment profile (sets the number of quiz questions)",
    )
    parser.add_argument(
        "--save-data",
        action="store_true",
        help="Export each finished session's results to data/<experiment_id>/",
    )
    args = parser.parse_args()

    config = (
        experiment_config.ExperimentConfig()
        .experiment(experiment_id="risk_choice", save_experiment_data=args.save_data)
        .hosting(host=args.host, port=args.port)
        .quiz(profile=args.profile)
    )

    app.run(config)
