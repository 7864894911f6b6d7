"""Audience-scoped event delivery.

The coordinator never talks to sockets directly. It publishes an event to
an audience and the broadcaster resolves that audience to connections:

    Individual(subject_id) -> one participant socket on the default namespace
    AdminGroup()           -> the admin_broadcast room on /admin
    All()                  -> every connection on both namespaces
"""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from riskquiz.server import events
from riskquiz.utils.typing import EventName, SubjectID

if TYPE_CHECKING:
    import flask_socketio

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Individual:
    subject_id: SubjectID


@dataclasses.dataclass(frozen=True)
class AdminGroup:
    pass


@dataclasses.dataclass(frozen=True)
class All:
    pass


Audience = Individual | AdminGroup | All


class Broadcaster(ABC):
    """Outbound side of the transport, as seen by the coordinator."""

    @abstractmethod
    def publish(self, audience: Audience, event: EventName, payload: Any = None) -> None:
        ...

    @abstractmethod
    def disconnect(self, subject_id: SubjectID) -> None:
        """Forcibly drop a participant's connection."""
        ...


class SocketIOBroadcaster(Broadcaster):
    """Resolves audiences onto a Flask-SocketIO server."""

    def __init__(
        self,
        socketio: flask_socketio.SocketIO,
        participant_namespace: str = events.PARTICIPANT_NAMESPACE,
        admin_namespace: str = events.ADMIN_NAMESPACE,
        admin_room: str = events.ADMIN_ROOM,
    ):
        self.socketio = socketio
        self.participant_namespace = participant_namespace
        self.admin_namespace = admin_namespace
        self.admin_room = admin_room

    def _emit(self, event: EventName, payload: Any, **kwargs) -> None:
        if payload is None:
            self.socketio.emit(event, **kwargs)
        else:
            self.socketio.emit(event, payload, **kwargs)

    def publish(self, audience: Audience, event: EventName, payload: Any = None) -> None:
        if isinstance(audience, Individual):
            self._emit(
                event, payload,
                to=audience.subject_id,
                namespace=self.participant_namespace,
            )
        elif isinstance(audience, AdminGroup):
            self._emit(event, payload, to=self.admin_room, namespace=self.admin_namespace)
        elif isinstance(audience, All):
            self._emit(event, payload, namespace=self.participant_namespace)
            self._emit(event, payload, namespace=self.admin_namespace)
        else:
            raise TypeError(f"Unknown audience {audience!r}")

    def disconnect(self, subject_id: SubjectID) -> None:
        try:
            self.socketio.server.disconnect(subject_id, namespace=self.participant_namespace)
        except Exception as e:
            # The socket may already be gone; the session state is what matters.
            logger.warning(f"[Broadcaster] Failed to disconnect {subject_id}: {e}")
