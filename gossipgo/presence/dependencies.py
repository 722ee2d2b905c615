"""Access to the presence objects owned by the running application."""

from fastapi import Request

from gossipgo.presence.channel import PresenceChannel
from gossipgo.presence.tracker import PresenceTracker


def get_channel(request: Request) -> PresenceChannel:
    return request.app.state.channel


def get_tracker(request: Request) -> PresenceTracker:
    return request.app.state.tracker
