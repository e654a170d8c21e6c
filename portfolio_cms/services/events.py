"""Observational event sinks.

Every mutating service call emits a named event with string context
(``CommentApproved`` with comment/article/moderator ids and so on). Sinks are
purely observational: a failing sink is logged and never changes the outcome
of the operation that emitted the event.
"""
import logging

logger = logging.getLogger(__name__)


class EventSink:
    def emit(self, name: str, /, **context) -> None:
        try:
            self._publish(name, {k: "" if v is None else str(v) for k, v in context.items()})
        except Exception:
            logger.exception("Event sink failed to publish %s", name)

    def _publish(self, name, context):
        raise NotImplementedError


class NoOpEventSink(EventSink):
    def _publish(self, name, context):
        pass


class LoggingEventSink(EventSink):
    def __init__(self, log=None):
        self.log = log or logging.getLogger("portfolio_cms.events")

    def _publish(self, name, context):
        self.log.info("%s %s", name, " ".join(f"{k}={v}" for k, v in sorted(context.items())))


class SocketIOEventSink(EventSink):
    """Broadcast events to moderators connected to the `admins` room."""

    room = "admins"

    def __init__(self, socketio):
        self.socketio = socketio

    def _publish(self, name, context):
        self.socketio.emit("cms_event", {"event": name, "context": context}, to=self.room)


def build_event_sink(kind, socketio=None):
    if kind == "none":
        return NoOpEventSink()
    if kind == "socketio" and socketio is not None:
        return SocketIOEventSink(socketio)
    return LoggingEventSink()
