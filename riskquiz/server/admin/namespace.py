"""
Admin SocketIO namespace for the experimenter console.

This namespace is isolated from the participant namespace (/) so that:
- Admin traffic doesn't pollute participant rooms
- Session controls (start/reset/stop) can only arrive from admin clients
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flask_socketio import Namespace, emit, join_room, leave_room

from riskquiz.server import events

if TYPE_CHECKING:
    from riskquiz.server.session_coordinator import SessionCoordinator

logger = logging.getLogger(__name__)


class AdminNamespace(Namespace):
    """
    Handles all admin client connections on the /admin namespace.

    Admins subscribe to session broadcasts with admin_join; results and
    logs are broadcast to the whole admin room so every open console
    stays in sync.
    """

    def __init__(self, namespace, coordinator: SessionCoordinator | None = None):
        """
        Initialize admin namespace.

        Args:
            namespace: The namespace path (should be '/admin')
            coordinator: SessionCoordinator to forward admin actions to.
                         Set after construction when the server starts.
        """
        super().__init__(namespace)
        self.coordinator = coordinator
        logger.info(f"AdminNamespace initialized on {namespace}")

    def _ready(self, action: str) -> bool:
        if self.coordinator is None:
            logger.warning(f"[Admin] {action} received before the coordinator was initialized")
            return False
        return True

    def on_connect(self, auth=None):
        logger.info("Admin connected to /admin namespace")

    def on_disconnect(self, reason=None):
        """Handle admin client disconnection."""
        logger.info("Admin disconnected from /admin namespace")
        leave_room(events.ADMIN_ROOM)

    def on_admin_join(self, data=None):
        """
        Subscribe this connection to admin broadcasts and send it the
        current session snapshot.
        """
        join_room(events.ADMIN_ROOM)
        logger.info("Admin joined admin room")

        if self._ready("admin_join"):
            emit(events.SESSION_SNAPSHOT, self.coordinator.snapshot())

    def on_start(self, data=None):
        if self._ready("start"):
            self.coordinator.start()

    def on_request_results(self, data=None):
        if self._ready("request_results"):
            emit(events.RESULTS_DATA, self.coordinator.results_payload(), to=events.ADMIN_ROOM)

    def on_get_logs(self, data=None):
        if self._ready("get_logs"):
            emit(events.EXPERIMENT_LOGS, self.coordinator.logs_payload(), to=events.ADMIN_ROOM)

    def on_reset(self, data=None):
        if self._ready("reset"):
            logger.info("Session reset by admin")
            self.coordinator.reset()

    def on_stop(self, data=None):
        if self._ready("stop"):
            logger.info("Experiment stopped by admin")
            self.coordinator.stop()
