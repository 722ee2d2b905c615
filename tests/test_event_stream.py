"""Tests for SSE formatting and the channel-to-stream bridge."""

import json

from gossipgo.db.models import Message
from gossipgo.presence.channel import EventType, PresenceChannel, UserStatusEvent
from gossipgo.presence.streaming import EventSubscription, format_new_message, format_user_status

from conftest import ScriptedRandom


def parse(frame: str) -> tuple[str, dict]:
    event_line, data_line = frame.strip().split("\n")
    assert event_line.startswith("event: ")
    assert data_line.startswith("data: ")
    return event_line[7:], json.loads(data_line[6:])


def test_format_new_message():
    message = Message(id="m9", chat_id="general", user_id="2", text="hi")
    event, data = parse(format_new_message(message))
    assert event == "new_message"
    assert data["message"]["id"] == "m9"
    assert data["message"]["text"] == "hi"


def test_format_user_status():
    event, data = parse(format_user_status(UserStatusEvent(user_id="4", is_online=True)))
    assert event == "user_status"
    assert data == {"type": "user_status", "user_id": "4", "is_online": True}


def test_subscription_filters_messages_by_chat():
    channel = PresenceChannel(["1"], rng=ScriptedRandom([0.1, 0.1], ["1"]))
    channel._connected = True

    with EventSubscription(channel, chat_filter=lambda chat_id: chat_id == "general") as sub:
        channel.send_message(Message(chat_id="secret", user_id="1", text="no"))
        channel.send_message(Message(chat_id="general", user_id="1", text="yes"))
        channel.simulate_tick()

        frames = []
        while not sub.queue.empty():
            frames.append(parse(sub.queue.get_nowait()))

    assert [event for event, _ in frames] == ["new_message", "user_status"]
    assert frames[0][1]["message"]["text"] == "yes"
    assert channel.listener_count(EventType.NEW_MESSAGE) == 0


def test_subscription_ends_on_disconnect():
    channel = PresenceChannel(["1"])
    channel._connected = True

    with EventSubscription(channel) as sub:
        channel.disconnect()
        first = sub.queue.get_nowait()
        second = sub.queue.get_nowait()

    assert parse(first)[0] == "disconnect"
    assert second is None
