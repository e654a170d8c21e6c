import logging

from flask import request
from flask_jwt_extended import decode_token
from flask_socketio import join_room, leave_room

from portfolio_cms.extensions import socketio
from portfolio_cms.services.events import SocketIOEventSink

logger = logging.getLogger(__name__)


@socketio.on('connect')
def handle_connect():
    logger.debug("Socket client connected: %s", request.sid)


# Moderation dashboard sends 'join' with {'token': '<admin JWT>'} to receive cms_event broadcasts
@socketio.on('join')
def handle_join(data):
    token = (data or {}).get('token')
    if not token:
        return {'ok': False, 'message': 'token is required'}
    try:
        identity = decode_token(token)['sub']
    except Exception:
        logger.warning("Rejected admin room join from %s", request.sid)
        return {'ok': False, 'message': 'invalid token'}
    join_room(SocketIOEventSink.room)
    logger.info("Admin %s joined room %s", identity, SocketIOEventSink.room)
    return {'ok': True}


@socketio.on('leave')
def handle_leave(data=None):
    leave_room(SocketIOEventSink.room)
    logger.info("Client %s left room %s", request.sid, SocketIOEventSink.room)
