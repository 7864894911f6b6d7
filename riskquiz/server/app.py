from __future__ import annotations

import logging
import os

import flask
import flask_socketio

from riskquiz.configurations import experiment_config
from riskquiz.server import events
from riskquiz.server.admin.namespace import AdminNamespace
from riskquiz.server.broadcaster import SocketIOBroadcaster
from riskquiz.server.session_coordinator import SessionCoordinator


def setup_logger(name, log_file, level=logging.INFO):
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler = logging.FileHandler(log_file)
    handler.setFormatter(formatter)

    # Create console handler with a higher log level
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.addHandler(handler)
    logger.addHandler(console_handler)
    logger.propagate = False

    return logger


logger = setup_logger(__name__, "./riskquiz.log", level=logging.DEBUG)

CONFIG = experiment_config.ExperimentConfig()

# The single session coordinator. Built by init_coordinator() on run().
COORDINATOR: SessionCoordinator | None = None


#######################
# Flask Configuration #
#######################

app = flask.Flask(__name__)
app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "secret!")

app.config["DEBUG"] = os.getenv("FLASK_ENV", "production") == "development"

socketio = flask_socketio.SocketIO(
    app,
    cors_allowed_origins="*",
    logger=app.config["DEBUG"],
)

# Admin controls live on their own namespace; the coordinator is attached
# in init_coordinator().
ADMIN_NAMESPACE = AdminNamespace(events.ADMIN_NAMESPACE)
socketio.on_namespace(ADMIN_NAMESPACE)

#######################
# Flask Configuration #
#######################


def init_coordinator(config: experiment_config.ExperimentConfig | None = None) -> SessionCoordinator:
    """Build a fresh coordinator from the config and wire it to the transport."""
    global CONFIG, COORDINATOR

    if config is not None:
        CONFIG = config

    COORDINATOR = SessionCoordinator.from_config(CONFIG, SocketIOBroadcaster(socketio))
    ADMIN_NAMESPACE.coordinator = COORDINATOR
    logger.info(
        f"Initialized session coordinator: experiment={CONFIG.experiment_id}, "
        f"quiz_length={CONFIG.quiz_length}"
    )
    return COORDINATOR


def _coordinator(action: str) -> SessionCoordinator | None:
    if COORDINATOR is None:
        logger.warning(f"{action} received before the coordinator was initialized")
    return COORDINATOR


@app.route("/status")
def status():
    """Current session snapshot, for monitoring without a socket connection."""
    coordinator = _coordinator("status")
    if coordinator is None:
        return flask.jsonify({"error": "Session coordinator not initialized"}), 503
    return flask.jsonify(coordinator.snapshot())


@socketio.on(events.JOIN)
def on_join(data=None):
    logger.info(f"Participant joined: {flask.request.sid}")

    coordinator = _coordinator("join")
    if coordinator is not None:
        coordinator.join(flask.request.sid)


@socketio.on(events.SUBMIT_ANSWER)
def on_submit_answer(data):
    """
    Participant submits an answer.

    Expected data: {"question_text": str, "answer": int | None, "correct": bool}.
    A null answer means the client's per-question timer ran out.
    """
    coordinator = _coordinator("submit_answer")
    if coordinator is None:
        return

    if not isinstance(data, dict):
        logger.warning(f"Malformed submit_answer payload from {flask.request.sid}: {data!r}")
        return

    coordinator.submit_answer(
        flask.request.sid,
        question_text=data.get("question_text"),
        answer=data.get("answer"),
        correct=data.get("correct") is True,
    )


@socketio.on(events.SUBMIT_FINAL_CHOICE)
def on_submit_final_choice(data):
    coordinator = _coordinator("submit_final_choice")
    if coordinator is None:
        return

    if not isinstance(data, dict):
        logger.warning(f"Malformed submit_final_choice payload from {flask.request.sid}: {data!r}")
        return

    coordinator.submit_final_choice(flask.request.sid, data.get("choice"))


@socketio.on("disconnect")
def on_disconnect(reason=None):
    """
    Handle participant disconnection.

    The participant is removed from the registry and their group; their
    answers so far are not kept.
    """
    logger.info(f"Disconnected: {flask.request.sid}")

    if COORDINATOR is not None:
        COORDINATOR.leave(flask.request.sid)


def run(config):
    init_coordinator(config)

    print("\n" + "=" * 70)
    print(f"Experiment {config.experiment_id}")
    print("=" * 70)
    print("\nServer starting on:")
    print(f"  http://{config.host}:{config.port}")
    print(f"  Admin namespace: {events.ADMIN_NAMESPACE}")
    print(f"  Quiz length: {config.quiz_length} ({config.quiz_profile} profile)")
    print("=" * 70 + "\n")

    socketio.run(
        app,
        log_output=app.config["DEBUG"],
        port=config.port,
        host=config.host,
    )
