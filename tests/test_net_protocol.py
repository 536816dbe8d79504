"""
网络协议测试
"""

import json

import pytest

from net.protocol import (
    MESSAGE_DIRECTIONS,
    Direction,
    Message,
    MsgType,
    validate_msg_type,
)


class TestMsgType:
    def test_closed_set(self):
        assert {t.value for t in MsgType} == {
            "welcome_request", "players_update", "state", "log", "full",
            "start_ack", "introduce", "action",
        }

    def test_every_type_has_direction(self):
        assert set(MESSAGE_DIRECTIONS) == set(MsgType)

    def test_guest_to_host(self):
        guest_types = {t for t, d in MESSAGE_DIRECTIONS.items() if d is Direction.GUEST_TO_HOST}
        assert guest_types == {MsgType.INTRODUCE, MsgType.ACTION}

    def test_validate_msg_type(self):
        assert validate_msg_type("state")
        assert not validate_msg_type("chat")


class TestMessage:
    def test_envelope(self):
        msg = Message.log("hi")
        obj = json.loads(msg.to_json())
        assert set(obj) == {"type", "seq", "timestamp", "data"}
        assert obj["type"] == "log"
        assert obj["data"] == {"msg": "hi"}

    def test_non_ascii_kept(self):
        assert "阿娜" in Message.introduce("阿娜").to_json()

    @pytest.mark.parametrize("factory,msg_type", [
        (Message.welcome_request, MsgType.WELCOME_REQUEST),
        (Message.full, MsgType.FULL),
        (Message.start_ack, MsgType.START_ACK),
    ])
    def test_empty_payloads(self, factory, msg_type):
        msg = factory()
        assert msg.type is msg_type
        assert msg.data == {}
        assert msg.direction is Direction.HOST_TO_GUEST

    def test_players_update(self):
        msg = Message.players_update([{"id": "h", "name": "Host"}])
        assert msg.data == {"players": [{"id": "h", "name": "Host"}]}

    def test_action_copies_data(self):
        data = {"type": "play", "tile": [6, 6]}
        msg = Message.action(data)
        data["type"] = "pass"
        assert msg.data["type"] == "play"
        assert msg.direction is Direction.GUEST_TO_HOST
