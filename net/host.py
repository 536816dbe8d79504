"""房主会话 (权威端)
基于 asyncio + websockets 的多米诺对局房主

并发模型:
- 每个 WebSocket 连接有自己的接收协程，但它们只负责把
  打开 / 数据 / 关闭 事件放进同一个收件箱队列
- 唯一的 actor 协程 (_actor_loop) 逐条取出事件并处理完毕后再取下一条，
  它是 GameState 与名册的唯一写者，因此不需要锁
- 房主本人的动作也走同一个队列，不经过序列化
- 同一通道内消息按发送顺序到达；不同通道之间按到达先后处理，
  同时提交的动作只由 "是否为当前回合玩家" 决定取舍
- 没有超时: 当前回合玩家无响应会让对局一直停在该回合
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from websockets.asyncio.server import serve

from game.actions import Action, ActionResult
from game.config import GameConfig, get_config
from game.engine import DominoEngine
from game.exceptions import ProtocolError
from game.player import Player, Roster
from i18n import t as _t

from .broadcast import StateBroadcaster, StateProjector
from .connection import Channel, ConnectionManager, create_identity, peer_id_from_path
from .models import ActionData, EnvelopeModel, IntroduceData
from .protocol import Message, MsgType
from .router import MessageRouter, Role
from .security import sanitize_display_name

if TYPE_CHECKING:
    from websockets.asyncio.server import ServerConnection

    from .broadcast import Projection

logger = logging.getLogger(__name__)


# ==================== 收件箱事件 ====================


class EventKind(Enum):
    OPEN = "open"
    DATA = "data"
    CLOSE = "close"
    LOCAL_ACTION = "local_action"
    START_GAME = "start_game"


@dataclass
class InboxEvent:
    """actor 收件箱中的一条事件"""
    kind: EventKind
    peer_id: str = ""
    raw: str | bytes | None = None
    websocket: Any = None
    action: Action | None = None
    seed: int | None = None
    reply: asyncio.Future | None = None


# ==================== 房主会话 ====================


class HostSession:
    """多米诺房主

    职责:
    1. 管理入站 WebSocket 连接 (容量上限 4 人)
    2. 通过单一 actor 串行处理所有事件
    3. 将客户端消息路由给引擎
    4. 每次权威状态变化后广播完整快照
    """

    def __init__(self, name: str = "Host", host: str | None = None,
                 port: int | None = None, config: GameConfig | None = None,
                 rng: random.Random | None = None, local_id: str | None = None):
        self.config = config or get_config()
        self.host = host if host is not None else self.config.host
        self.port = port if port is not None else self.config.port
        self.local_id = local_id or create_identity()
        self.name = sanitize_display_name(name) or "Host"

        # 连接与名册
        self.connections = ConnectionManager(self.local_id, self.config)
        self.roster = Roster()
        self.roster.add(Player(player_id=self.local_id, display_name=self.name))

        # 房主自己的视图 (隐式自通道)
        self.projector = StateProjector(log_limit=self.config.log_feed_limit)
        self.projector.apply_players(self.roster.to_wire())

        # 权威引擎与广播
        self.engine = DominoEngine(self.config, rng, on_log=self.projector.append_log)
        self.broadcaster = StateBroadcaster(self.connections, self.projector)

        # 消息路由表
        self.router = MessageRouter(Role.HOST, on_diagnostic=self.projector.append_log)
        self.router.on(MsgType.INTRODUCE, self._handle_introduce)
        self.router.on(MsgType.ACTION, self._handle_action)

        self.connections.on_channel_open(self._on_channel_open)
        self.connections.on_channel_close(self._on_channel_close)
        self.connections.on_message(self.router.route)

        # actor
        self._inbox: asyncio.Queue[InboxEvent] = asyncio.Queue()
        self._actor_task: asyncio.Task | None = None
        self._running = False

    @property
    def projection(self) -> Projection:
        return self.projector.projection

    # ==================== actor ====================

    def start_actor(self) -> None:
        """启动唯一的状态写者"""
        if self._actor_task is None or self._actor_task.done():
            self._actor_task = asyncio.create_task(self._actor_loop())

    async def stop_actor(self) -> None:
        if self._actor_task and not self._actor_task.done():
            self._actor_task.cancel()
            try:
                await self._actor_task
            except asyncio.CancelledError:
                pass
        self._actor_task = None

    async def drain(self) -> None:
        """等待收件箱中已有事件全部处理完"""
        await self._inbox.join()

    async def _actor_loop(self) -> None:
        while True:
            event = await self._inbox.get()
            try:
                await self._handle_event(event)
            except Exception as e:
                logger.exception(f"处理事件异常 ({event.kind.value}): {e}")
                if event.reply is not None and not event.reply.done():
                    event.reply.set_result(None)
            finally:
                self._inbox.task_done()

    async def _handle_event(self, event: InboxEvent) -> None:
        if event.kind is EventKind.OPEN:
            was_full = self.connections.is_full
            channel = await self.connections.accept_inbound(event.peer_id, event.websocket)
            if channel is None:
                if was_full:
                    self.projector.append_log(_t("feed.rejected_full"))
                else:
                    self.projector.append_log(_t("feed.rejected_duplicate", peer=event.peer_id))
            if event.reply is not None and not event.reply.done():
                event.reply.set_result(channel)
        elif event.kind is EventKind.DATA:
            await self.connections.dispatch_message(event.peer_id, event.raw)
        elif event.kind is EventKind.CLOSE:
            await self.connections.channel_closed(event.peer_id)
        elif event.kind is EventKind.LOCAL_ACTION:
            result = await self.apply_action(self.local_id, event.action)
            if event.reply is not None and not event.reply.done():
                event.reply.set_result(result)
        elif event.kind is EventKind.START_GAME:
            started = await self.start_game_now(event.seed)
            if event.reply is not None and not event.reply.done():
                event.reply.set_result(started)

    async def _submit(self, event: InboxEvent) -> Any:
        event.reply = asyncio.get_running_loop().create_future()
        await self._inbox.put(event)
        return await event.reply

    # ==================== 房主本地操作 ====================

    async def start_game(self, seed: int | None = None) -> bool:
        """房主开局 (经由 actor)"""
        return await self._submit(InboxEvent(EventKind.START_GAME, seed=seed))

    async def submit_local_action(self, action: Action) -> ActionResult:
        """房主本人的动作，与客户端动作走同一个队列"""
        return await self._submit(
            InboxEvent(EventKind.LOCAL_ACTION, peer_id=self.local_id, action=action)
        )

    # ==================== 以下方法只在 actor 内调用 ====================

    async def start_game_now(self, seed: int | None = None) -> bool:
        if not self.engine.host_start_game(self.roster.ids(), seed=seed):
            return False
        await self.broadcaster.broadcast(Message.start_ack())
        await self.broadcaster.broadcast_state(self.engine.state)
        await self.broadcaster.broadcast(Message.log(_t("feed.host_started")))
        logger.info(f"对局开始 ({len(self.roster)} 人)")
        return True

    async def apply_action(self, player_id: str, action: Action) -> ActionResult:
        """交给引擎校验并应用；状态有变化时广播快照"""
        result = self.engine.process_action(player_id, action)
        if result.changed:
            await self.broadcaster.broadcast_state(self.engine.state)
            if result.winner is not None:
                winner_name = self.projection.player_name(result.winner)
                await self.broadcaster.broadcast(
                    Message.log(_t("feed.winner", player=winner_name))
                )
        return result

    async def _on_channel_open(self, channel: Channel) -> None:
        self.projector.append_log(_t("feed.client_connected", peer=channel.peer_id))
        await channel.send(Message.welcome_request())

    async def _on_channel_close(self, channel: Channel) -> None:
        # 名册移除该玩家，但 GameState 中的手牌与座次保留
        self.projector.append_log(_t("feed.client_disconnected", peer=channel.peer_id))
        player = self.roster.remove_by_channel(channel.peer_id)
        if player is not None:
            await self.broadcaster.broadcast(Message.players_update(self.roster.to_wire()))

    async def _handle_introduce(self, peer_id: str, data: IntroduceData,
                                envelope: EnvelopeModel) -> None:
        player = self.roster.add(
            Player(player_id=peer_id, display_name=data.name, channel_id=peer_id)
        )
        self.projector.append_log(_t("feed.joined", name=player.display_name, peer=peer_id))
        await self.broadcaster.broadcast(Message.players_update(self.roster.to_wire()))

    async def _handle_action(self, peer_id: str, data: ActionData,
                             envelope: EnvelopeModel) -> None:
        player = self.roster.get_by_channel(peer_id)
        if player is None:
            err = ProtocolError("action before introduce", msg_type="action", peer_id=peer_id)
            logger.warning(f"丢弃来自 {peer_id} 的动作: {err}")
            self.projector.append_log(_t("feed.dropped", peer=peer_id, reason=err.message))
            return
        action = Action.from_wire(data.model_dump())
        await self.apply_action(player.player_id, action)

    # ==================== 服务端生命周期 ====================

    async def _connection_handler(self, websocket: ServerConnection) -> None:
        """处理单个 WebSocket 连接: 只负责把事件放进收件箱"""
        peer_id = peer_id_from_path(websocket.request.path) or create_identity()
        channel = await self._submit(
            InboxEvent(EventKind.OPEN, peer_id=peer_id, websocket=websocket)
        )
        if channel is None:
            return  # 连接被拒绝
        try:
            async for raw in websocket:
                await self._inbox.put(InboxEvent(EventKind.DATA, peer_id=peer_id, raw=raw))
        except Exception as e:
            logger.warning(f"连接异常 (节点 {peer_id}): {e}")
        finally:
            await self._inbox.put(InboxEvent(EventKind.CLOSE, peer_id=peer_id))

    async def start(self) -> None:
        """启动房主服务并一直运行到 stop()"""
        self._running = True
        self.start_actor()
        self.projector.append_log(_t("feed.room_created", id=self.local_id))
        logger.info(f"多米诺房主启动: ws://{self.host}:{self.port} (房间号 {self.local_id})")

        async with serve(
            self._connection_handler,
            self.host,
            self.port,
            max_size=self.config.max_message_size,
        ):
            while self._running:
                await asyncio.sleep(0.2)
        await self.connections.close_all()
        await self.stop_actor()

    def stop(self) -> None:
        """停止房主服务"""
        self._running = False
        logger.info("房主服务停止")
