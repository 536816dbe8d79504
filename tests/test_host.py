"""
房主会话测试
通过收件箱事件驱动 HostSession，WebSocket 用 AsyncMock 代替
"""

import json
import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from game.actions import Action
from game.config import GameConfig
from game.enums import GamePhase
from game.state import Board, GameState
from game.tile import Tile
from i18n import t as _t
from net.host import EventKind, HostSession, InboxEvent
from net.protocol import Message, MsgType

# ==================== 辅助 ====================


def _session() -> HostSession:
    return HostSession(name="Host", config=GameConfig(), rng=random.Random(0), local_id="host")


def _sent(ws) -> list[dict]:
    return [json.loads(c[0][0]) for c in ws.send.call_args_list]


def _sent_types(ws) -> list[str]:
    return [m["type"] for m in _sent(ws)]


async def _open(session: HostSession, peer_id: str):
    ws = AsyncMock()
    await session._handle_event(InboxEvent(EventKind.OPEN, peer_id=peer_id, websocket=ws))
    return ws


async def _data(session: HostSession, peer_id: str, msg: Message) -> None:
    await session._handle_event(InboxEvent(EventKind.DATA, peer_id=peer_id, raw=msg.to_json()))


async def _join(session: HostSession, peer_id: str, name: str):
    ws = await _open(session, peer_id)
    await _data(session, peer_id, Message.introduce(name))
    return ws


def _feed_contains(session: HostSession, text: str) -> bool:
    return any(line.endswith(text) for line in session.projection.log)


# ==================== 初始化 ====================


class TestHostInit:
    def test_host_is_first_player(self):
        session = _session()
        assert session.roster.ids() == ["host"]
        assert session.projection.players == [{"id": "host", "name": "Host"}]

    def test_defaults_from_config(self):
        session = _session()
        assert session.port == GameConfig().port

    def test_name_sanitized(self):
        session = HostSession(name="<b>Ana</b>", config=GameConfig(), local_id="h")
        assert session.name == "Ana"


# ==================== 加入与离开 ====================


class TestJoin:
    @pytest.mark.asyncio
    async def test_welcome_then_players_update(self):
        session = _session()
        ws = await _join(session, "a1", "Ana")
        assert _sent_types(ws) == ["welcome_request", "players_update"]
        players = _sent(ws)[1]["data"]["players"]
        assert players == [{"id": "host", "name": "Host"}, {"id": "a1", "name": "Ana"}]
        assert session.projection.players == players
        assert _feed_contains(session, _t("feed.joined", name="Ana", peer="a1"))

    @pytest.mark.asyncio
    async def test_players_update_reaches_everyone(self):
        session = _session()
        ws_a = await _join(session, "a1", "Ana")
        await _join(session, "b2", "Bo")
        assert _sent_types(ws_a)[-1] == "players_update"
        assert len(_sent(ws_a)[-1]["data"]["players"]) == 3

    @pytest.mark.asyncio
    async def test_fourth_remote_rejected(self):
        session = _session()
        for pid in ("a", "b", "c"):
            await _join(session, pid, pid.upper())
        ws = await _open(session, "d")
        assert _sent_types(ws) == ["full"]
        ws.close.assert_called_once()
        assert session.roster.ids() == ["host", "a", "b", "c"]
        assert _feed_contains(session, _t("feed.rejected_full"))

    @pytest.mark.asyncio
    async def test_duplicate_peer_rejected(self):
        session = _session()
        await _join(session, "a", "Ana")
        ws = await _open(session, "a")
        ws.close.assert_called_once()
        assert _feed_contains(session, _t("feed.rejected_duplicate", peer="a"))

    @pytest.mark.asyncio
    async def test_disconnect_removes_from_roster_only(self):
        session = _session()
        await _join(session, "a", "Ana")
        ws_b = await _join(session, "b", "Bo")
        assert await session.start_game_now(seed=1)

        await session._handle_event(InboxEvent(EventKind.CLOSE, peer_id="a"))

        assert session.roster.ids() == ["host", "b"]
        assert _sent_types(ws_b)[-1] == "players_update"
        assert "a" in session.engine.state.hands
        assert session.engine.state.turn_order == ["host", "a", "b"]

    @pytest.mark.asyncio
    async def test_close_of_unknown_peer(self):
        session = _session()
        await session._handle_event(InboxEvent(EventKind.CLOSE, peer_id="ghost"))
        assert session.roster.ids() == ["host"]


# ==================== 开局 ====================


class TestStartGame:
    @pytest.mark.asyncio
    async def test_needs_two_players(self):
        session = _session()
        assert await session.start_game_now() is False
        assert session.engine.phase is GamePhase.NOT_RUNNING
        assert _feed_contains(session, _t("feed.need_players", count=2))

    @pytest.mark.asyncio
    async def test_start_broadcasts_ack_state_log(self):
        session = _session()
        ws = await _join(session, "a", "Ana")
        assert await session.start_game_now(seed=3)
        assert _sent_types(ws)[-3:] == ["start_ack", "state", "log"]
        snapshot = _sent(ws)[-2]["data"]
        assert snapshot["running"] is True
        assert snapshot["boneyard_count"] == 14
        assert "boneyard" not in snapshot
        assert len(snapshot["hands"]["a"]) == 7
        assert session.projection.state.running

    @pytest.mark.asyncio
    async def test_identical_snapshot_for_all(self):
        session = _session()
        ws_a = await _join(session, "a", "Ana")
        ws_b = await _join(session, "b", "Bo")
        await session.start_game_now(seed=3)
        assert _sent(ws_a)[-2]["data"] == _sent(ws_b)[-2]["data"]


# ==================== 动作 ====================


class TestActions:
    @pytest.mark.asyncio
    async def test_out_of_turn_guest_action_not_broadcast(self):
        session = _session()
        ws = await _join(session, "a", "Ana")
        await session.start_game_now(seed=3)
        before = session.engine.state.to_snapshot()
        count = ws.send.call_count

        await _data(session, "a", Message.action(Action.draw().to_wire()))

        assert ws.send.call_count == count
        assert session.engine.state.to_snapshot() == before
        assert _feed_contains(session, _t("feed.not_your_turn", player="a"))

    @pytest.mark.asyncio
    async def test_guest_play_accepted(self):
        session = _session()
        ws = await _join(session, "a", "Ana")
        await session.start_game_now(seed=3)
        await session.apply_action("host", Action.pass_turn())

        tile, side = session.engine.legal_plays("a")[0]
        await _data(session, "a", Message.action(Action.play(tile, side).to_wire()))

        state = session.engine.state
        assert state.board.tiles == [tile.pips]
        assert tile not in state.hands["a"]
        assert state.current_player_id == "host"
        assert _sent(ws)[-1]["data"]["board"] == [list(tile.pips)]

    @pytest.mark.asyncio
    async def test_action_before_introduce_dropped(self):
        session = _session()
        await _join(session, "a", "Ana")
        await session.start_game_now(seed=3)
        ws = await _open(session, "b")
        before = session.engine.state.to_snapshot()
        await _data(session, "b", Message.action(Action.pass_turn().to_wire()))
        assert session.engine.state.to_snapshot() == before
        assert _sent_types(ws) == ["welcome_request"]

    @pytest.mark.asyncio
    async def test_malformed_message_dropped(self):
        session = _session()
        ws = await _join(session, "a", "Ana")
        await session._handle_event(InboxEvent(EventKind.DATA, peer_id="a", raw="{oops"))
        assert session.router.dropped == 1
        assert _sent_types(ws) == ["welcome_request", "players_update"]

    @pytest.mark.asyncio
    async def test_winner_announced(self):
        session = _session()
        ws = await _join(session, "a", "Ana")
        session.engine.state = GameState(
            running=True,
            board=Board([(1, 6)]),
            hands={"host": [Tile(1, 1)], "a": [Tile(5, 5)]},
            turn_order=["host", "a"],
        )
        result = await session.apply_action("host", Action.play(Tile(1, 1)))
        assert result.winner == "host"
        assert _sent_types(ws)[-2:] == ["state", "log"]
        assert _sent(ws)[-1]["data"]["msg"] == _t("feed.winner", player="Host")
        assert _sent(ws)[-2]["data"]["winner"] == "host"


# ==================== actor ====================


class TestActor:
    @pytest.mark.asyncio
    async def test_start_and_local_action_via_queue(self):
        session = _session()
        await _join(session, "a", "Ana")
        session.start_actor()
        try:
            assert await session.start_game(seed=5)
            result = await session.submit_local_action(Action.pass_turn())
            assert result.accepted
            assert session.projection.state.current_player_id == "a"
        finally:
            await session.stop_actor()

    @pytest.mark.asyncio
    async def test_rejected_local_action(self):
        session = _session()
        session.start_actor()
        try:
            result = await session.submit_local_action(Action.draw())
            assert not result.accepted
        finally:
            await session.stop_actor()

    @pytest.mark.asyncio
    async def test_events_processed_in_order(self):
        session = _session()
        ws = AsyncMock()
        session.start_actor()
        try:
            await session._inbox.put(InboxEvent(EventKind.OPEN, peer_id="a", websocket=ws))
            await session._inbox.put(
                InboxEvent(EventKind.DATA, peer_id="a", raw=Message.introduce("Ana").to_json())
            )
            await session._inbox.put(InboxEvent(EventKind.CLOSE, peer_id="a"))
            await session.drain()
        finally:
            await session.stop_actor()
        assert _sent_types(ws) == ["welcome_request", "players_update"]
        assert session.roster.ids() == ["host"]

    @pytest.mark.asyncio
    async def test_connection_handler(self):
        session = _session()
        ws = AsyncMock()
        ws.request = MagicMock()
        ws.request.path = "/?peer=zz"
        ws.__aiter__.return_value = [Message.introduce("Zed").to_json()]
        session.start_actor()
        try:
            await session._connection_handler(ws)
            await session.drain()
        finally:
            await session.stop_actor()
        assert _sent_types(ws)[0] == "welcome_request"
        assert _feed_contains(session, _t("feed.joined", name="Zed", peer="zz"))
        assert _feed_contains(session, _t("feed.client_disconnected", peer="zz"))
        assert session.roster.ids() == ["host"]

    @pytest.mark.asyncio
    async def test_rejected_connection_not_read(self):
        session = _session()
        for pid in ("a", "b", "c"):
            await _join(session, pid, pid)
        ws = AsyncMock()
        ws.request = MagicMock()
        ws.request.path = "/?peer=dd"
        ws.__aiter__.return_value = [Message.introduce("Dee").to_json()]
        session.start_actor()
        try:
            await session._connection_handler(ws)
            await session.drain()
        finally:
            await session.stop_actor()
        assert _sent_types(ws) == ["full"]
        assert "dd" not in session.roster


class TestMessageTypes:
    def test_router_handles_guest_messages(self):
        session = _session()
        assert set(session.router._handlers) == {MsgType.INTRODUCE, MsgType.ACTION}
