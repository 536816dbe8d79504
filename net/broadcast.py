"""状态广播与本地投影

- StateBroadcaster (仅房主): 每次权威状态变化后，把同一份完整快照发给所有
  打开的通道，并直接更新房主自己的投影 (隐式自通道，无需序列化往返)
- StateProjector (双方): 收到快照时整体替换本地视图，从不合并或做差分；
  客户端没有乐观预测，自己的动作要等广播回来才可见

复制模型为尽力而为: 没有确认与重传，seq 仅用于诊断。
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from game.state import GameState
from i18n import t as _t

from .protocol import Message, MsgType

if TYPE_CHECKING:
    from .connection import ConnectionManager

logger = logging.getLogger(__name__)

DEFAULT_LOG_LIMIT = 200


@dataclass
class Projection:
    """本地只读视图

    Attributes:
        state: 最近一次收到的对局快照
        players: 名册 [{id, name}]
        log: 诊断日志流 (只追加，有上限)
        seq: 最近一次快照的序号
    """
    state: GameState = field(default_factory=GameState)
    players: list[dict[str, Any]] = field(default_factory=list)
    log: deque[str] = field(default_factory=lambda: deque(maxlen=DEFAULT_LOG_LIMIT))
    seq: int = 0

    def player_name(self, player_id: str | None) -> str:
        for p in self.players:
            if p.get("id") == player_id:
                return p.get("name", player_id)
        return player_id or "-"


class StateProjector:
    """本地投影的唯一修改入口"""

    def __init__(self, log_limit: int = DEFAULT_LOG_LIMIT,
                 on_update: Callable[[Projection], Any] | None = None):
        self.projection = Projection(log=deque(maxlen=log_limit))
        self._listeners: list[Callable[[Projection], Any]] = []
        if on_update:
            self._listeners.append(on_update)

    def subscribe(self, listener: Callable[[Projection], Any]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            try:
                listener(self.projection)
            except Exception as e:
                logger.warning(f"视图回调异常: {e}")

    def apply_state(self, snapshot: dict[str, Any], seq: int = 0) -> None:
        """整体替换对局视图"""
        self.projection.state = GameState.from_snapshot(snapshot)
        self.projection.seq = seq
        self._notify()

    def apply_players(self, players: list[dict[str, Any]]) -> None:
        self.projection.players = [dict(p) for p in players]
        self._notify()

    def append_log(self, msg: str) -> None:
        stamp = datetime.now().strftime("%H:%M:%S")
        self.projection.log.append(f"[{stamp}] {msg}")
        self._notify()

    def apply(self, msg: Message) -> None:
        """按消息类型更新视图 (房主自通道与客户端共用同一语义)"""
        if msg.type is MsgType.STATE:
            self.apply_state(msg.data, msg.seq)
        elif msg.type is MsgType.PLAYERS_UPDATE:
            self.apply_players(msg.data.get("players", []))
        elif msg.type is MsgType.LOG:
            self.append_log(msg.data.get("msg", ""))
        elif msg.type is MsgType.START_ACK:
            self.append_log(_t("feed.game_started"))
        elif msg.type is MsgType.FULL:
            self.append_log(_t("feed.room_full"))

    def reset(self) -> None:
        self.projection.state = GameState()
        self.projection.players = []
        self.projection.seq = 0
        self._notify()


class StateBroadcaster:
    """房主侧广播器"""

    def __init__(self, connections: ConnectionManager, local: StateProjector):
        self.connections = connections
        self.local = local
        self._seq = 0

    @property
    def seq(self) -> int:
        return self._seq

    async def broadcast(self, msg: Message) -> int:
        """发送给所有打开的通道，并同步更新房主自己的视图

        Returns:
            成功送达的远程通道数
        """
        delivered = 0
        for channel in self.connections.open_channels():
            if await channel.send(msg):
                delivered += 1
        self.local.apply(msg)
        return delivered

    async def broadcast_state(self, state: GameState) -> Message:
        """广播完整权威快照 (牌堆只给张数)"""
        self._seq += 1
        msg = Message.state(state.to_snapshot(), seq=self._seq)
        delivered = await self.broadcast(msg)
        logger.debug(f"快照 #{self._seq} 已广播到 {delivered} 个通道")
        return msg
