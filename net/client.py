"""WebSocket 对局客户端

功能:
- 连接房主 (本地身份随会合地址一同发送)
- 收到 welcome_request 后自我介绍
- 用收到的名册 / 快照 / 日志整体替换本地视图
- 发送玩家动作 (没有乐观预测，等广播回来才可见)

不做断线重连。
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from game.actions import Action
from game.config import GameConfig, get_config
from game.enums import Side
from game.tile import Tile
from i18n import t as _t

from .broadcast import Projection, StateProjector
from .connection import Channel, ConnectionManager
from .models import EmptyData, EnvelopeModel, LogData, PlayersUpdateData, StateData
from .protocol import Message, MsgType
from .router import MessageRouter, Role

logger = logging.getLogger(__name__)


class GuestClient:
    """多米诺客户端

    职责:
    1. 维护与房主的 WebSocket 通道
    2. 收发消息
    3. 维护本地只读投影，并通过回调通知上层 (UI)
    """

    def __init__(self, host_url: str = "ws://localhost:8765", name: str = "Player",
                 config: GameConfig | None = None, local_id: str | None = None):
        self.config = config or get_config()
        self.host_url = host_url
        self.name = name

        self.connections = ConnectionManager(local_id, self.config)
        self.projector = StateProjector(log_limit=self.config.log_feed_limit)

        self.router = MessageRouter(Role.GUEST, on_diagnostic=self.projector.append_log)
        self.router.on(MsgType.WELCOME_REQUEST, self._handle_welcome_request)
        self.router.on(MsgType.PLAYERS_UPDATE, self._handle_players_update)
        self.router.on(MsgType.STATE, self._handle_state)
        self.router.on(MsgType.LOG, self._handle_log)
        self.router.on(MsgType.FULL, self._handle_full)
        self.router.on(MsgType.START_ACK, self._handle_start_ack)
        self.connections.on_message(self.router.route)

        self._channel: Channel | None = None
        self.projector.append_log(_t("feed.peer_created", id=self.local_id))

    # ==================== 属性 ====================

    @property
    def local_id(self) -> str:
        return self.connections.local_id

    @property
    def projection(self) -> Projection:
        return self.projector.projection

    @property
    def is_connected(self) -> bool:
        return self._channel is not None and self._channel.is_open

    @property
    def my_hand(self) -> list[Tile]:
        return self.projection.state.hand_of(self.local_id)

    @property
    def is_my_turn(self) -> bool:
        state = self.projection.state
        return state.running and state.current_player_id == self.local_id

    def on_update(self, handler: Callable[[Projection], Any]) -> None:
        """注册视图更新回调"""
        self.projector.subscribe(handler)

    # ==================== 连接管理 ====================

    async def connect(self) -> bool:
        """连接到房主"""
        try:
            self._channel = await self.connections.connect_to(self.host_url)
        except Exception as e:
            logger.error(f"连接失败: {e}")
            self._channel = None
            return False
        self.projector.append_log(_t("feed.connected_host", host=self.host_url))
        return True

    async def disconnect(self) -> None:
        """断开连接"""
        if self._channel:
            await self._channel.close()
        await self.connections.close_all()
        self._channel = None
        logger.info("已断开连接")

    async def _receive_loop(self) -> None:
        """消息接收循环: 逐条处理，处理完一条再取下一条"""
        channel = self._channel
        try:
            async for raw in channel:
                await self.connections.dispatch_message(channel.peer_id, raw)
        except Exception as e:
            logger.warning(f"接收循环中断: {e}")
        finally:
            await self.connections.channel_closed(channel.peer_id)
            self._channel = None
            self.projector.append_log(_t("feed.disconnected_host"))
            self.projector.apply_players([])

    async def run(self) -> None:
        """客户端主循环，直到与房主的连接关闭"""
        if not await self.connect():
            return
        try:
            await self._receive_loop()
        except asyncio.CancelledError:
            await self.disconnect()
            raise

    # ==================== 消息处理器 ====================

    async def _handle_welcome_request(self, peer_id: str, data: EmptyData,
                                      envelope: EnvelopeModel) -> None:
        await self._send(Message.introduce(self.name))

    def _handle_players_update(self, peer_id: str, data: PlayersUpdateData,
                               envelope: EnvelopeModel) -> None:
        self.projector.apply_players([p.model_dump() for p in data.players])

    def _handle_state(self, peer_id: str, data: StateData,
                      envelope: EnvelopeModel) -> None:
        self.projector.apply_state(data.model_dump(), envelope.seq)

    def _handle_log(self, peer_id: str, data: LogData,
                    envelope: EnvelopeModel) -> None:
        self.projector.append_log(data.msg)

    def _handle_full(self, peer_id: str, data: EmptyData,
                     envelope: EnvelopeModel) -> None:
        logger.warning("房间已满，连接将被关闭")
        self.projector.apply(Message.full())

    def _handle_start_ack(self, peer_id: str, data: EmptyData,
                          envelope: EnvelopeModel) -> None:
        self.projector.apply(Message.start_ack())

    # ==================== 发送 ====================

    async def _send(self, msg: Message) -> bool:
        if not self.is_connected:
            self.projector.append_log(_t("feed.not_connected"))
            return False
        return await self._channel.send(msg)

    async def send_action(self, action: Action) -> bool:
        """把动作发给房主；本地视图不变，等待下一份快照"""
        return await self._send(Message.action(action.to_wire()))

    async def play(self, tile: Tile, side: Side | None = None) -> bool:
        return await self.send_action(Action.play(tile, side))

    async def draw(self) -> bool:
        return await self.send_action(Action.draw())

    async def pass_turn(self) -> bool:
        return await self.send_action(Action.pass_turn())
