"""连接管理器

持有本地身份与到其他参与者的点对点通道 (WebSocket)，并执行房间容量限制。

- 房主角色: accept_inbound() 接受入站连接，超出容量的连接收到 full 后被关闭
- 客户端角色: connect_to() 连接房主，本地身份通过 URL 查询参数 ``peer`` 传递
- 通道关闭后从通道表移除，不做任何重连
"""

from __future__ import annotations

import inspect
import logging
import re
import uuid
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from websockets.asyncio.client import connect

from game.config import GameConfig, get_config
from game.exceptions import CapacityExceededError

from .protocol import Message
from .security import CLOSE_POLICY_VIOLATION, CLOSE_TRY_AGAIN_LATER

if TYPE_CHECKING:
    from websockets.asyncio.client import ClientConnection
    from websockets.asyncio.server import ServerConnection

logger = logging.getLogger(__name__)

_PEER_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

ChannelHandler = Callable[["Channel"], Awaitable[None] | None]
MessageHandler = Callable[[str, str | bytes], Awaitable[Any] | None]


def create_identity() -> str:
    """生成本会话内稳定的参与者 ID"""
    return uuid.uuid4().hex[:12]


def peer_id_from_path(path: str) -> str | None:
    """从请求路径 (如 ``/?peer=ab12``) 中提取合法的节点 ID"""
    query = urlsplit(path).query
    values = parse_qs(query).get("peer", [])
    if values and _PEER_ID_RE.match(values[0]):
        return values[0]
    return None


def with_peer_id(url: str, peer_id: str) -> str:
    """把本地身份附加到会合地址上"""
    parts = urlsplit(url)
    query = parse_qs(parts.query)
    query["peer"] = [peer_id]
    return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))


async def _fire(handler: Callable | None, *args: Any) -> Any:
    """调用同步或异步回调"""
    if handler is None:
        return None
    result = handler(*args)
    if inspect.isawaitable(result):
        return await result
    return result


# ==================== 通道 ====================


class Channel:
    """到单个参与者的可靠有序双向通道

    连接句柄 (websocket) 只由连接管理器持有，从不写入对局状态。
    """

    def __init__(self, peer_id: str, websocket: ServerConnection | ClientConnection):
        self.peer_id = peer_id
        self.websocket = websocket
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    async def send(self, msg: Message) -> bool:
        """发送一条完整消息 (尽力而为，失败只记录日志)"""
        if not self._open:
            return False
        try:
            await self.websocket.send(msg.to_json())
            return True
        except Exception as e:
            logger.warning(f"发送消息失败 (节点 {self.peer_id}): {e}")
            return False

    async def close(self, code: int = 1000, reason: str = "") -> None:
        if not self._open:
            return
        self._open = False
        try:
            await self.websocket.close(code, reason)
        except Exception as e:
            logger.debug(f"关闭通道异常 (节点 {self.peer_id}): {e}")

    def mark_closed(self) -> None:
        self._open = False

    def __aiter__(self):
        return self.websocket.__aiter__()

    def __repr__(self) -> str:
        state = "open" if self._open else "closed"
        return f"Channel({self.peer_id!r}, {state})"


# ==================== 连接管理器 ====================


class ConnectionManager:
    """连接管理器

    职责:
    1. 持有本地身份
    2. 维护通道表 (按连接顺序)
    3. 执行容量上限 (房主 + 3 名远程玩家)
    4. 通知上层通道打开 / 关闭 / 收到消息
    """

    def __init__(self, local_id: str | None = None, config: GameConfig | None = None):
        self.config = config or get_config()
        self.local_id: str = local_id or create_identity()
        self.channels: dict[str, Channel] = {}  # peer_id → channel

        self._on_open: ChannelHandler | None = None
        self._on_close: ChannelHandler | None = None
        self._on_message: MessageHandler | None = None

    # ==================== 回调注册 ====================

    def on_channel_open(self, handler: ChannelHandler) -> None:
        self._on_open = handler

    def on_channel_close(self, handler: ChannelHandler) -> None:
        self._on_close = handler

    def on_message(self, handler: MessageHandler) -> None:
        self._on_message = handler

    # ==================== 查询 ====================

    @property
    def is_full(self) -> bool:
        return len(self.channels) >= self.config.max_remote_peers

    def get(self, peer_id: str) -> Channel | None:
        return self.channels.get(peer_id)

    def open_channels(self) -> list[Channel]:
        return [ch for ch in self.channels.values() if ch.is_open]

    # ==================== 房主角色 ====================

    def check_capacity(self) -> None:
        if self.is_full:
            raise CapacityExceededError(capacity=self.config.max_participants)

    async def accept_inbound(self, peer_id: str,
                             websocket: ServerConnection) -> Channel | None:
        """接受入站连接；超出容量或节点 ID 冲突时拒绝并关闭

        Returns:
            新通道；被拒绝时为 None (不进入通道表，也不进入名册)
        """
        try:
            self.check_capacity()
        except CapacityExceededError as e:
            logger.warning(f"{e}: 拒绝节点 {peer_id}")
            rejected = Channel(peer_id, websocket)
            await rejected.send(Message.full())
            await rejected.close(CLOSE_TRY_AGAIN_LATER, "room full")
            return None

        if peer_id in self.channels or peer_id == self.local_id:
            logger.warning(f"节点 ID 冲突，拒绝连接: {peer_id}")
            await Channel(peer_id, websocket).close(CLOSE_POLICY_VIOLATION, "duplicate peer id")
            return None

        channel = Channel(peer_id, websocket)
        self.channels[peer_id] = channel
        logger.info(f"节点 {peer_id} 已连接 ({len(self.channels)}/{self.config.max_remote_peers})")
        await _fire(self._on_open, channel)
        return channel

    # ==================== 客户端角色 ====================

    async def connect_to(self, host_url: str) -> Channel:
        """连接房主并登记通道 (连接失败时异常向上抛出)"""
        websocket = await connect(
            with_peer_id(host_url, self.local_id),
            max_size=self.config.max_message_size,
        )
        channel = Channel(host_url, websocket)
        self.channels[host_url] = channel
        logger.info(f"已连接到 {host_url} (本地 ID: {self.local_id})")
        await _fire(self._on_open, channel)
        return channel

    # ==================== 事件入口 ====================

    async def dispatch_message(self, peer_id: str, raw: str | bytes) -> None:
        """把通道收到的原始消息交给上层"""
        if peer_id not in self.channels:
            logger.debug(f"忽略未登记节点的消息: {peer_id}")
            return
        await _fire(self._on_message, peer_id, raw)

    async def channel_closed(self, peer_id: str) -> Channel | None:
        """通道关闭: 移除并通知上层；未登记的节点 (如被拒绝的连接) 直接忽略"""
        channel = self.channels.pop(peer_id, None)
        if channel is None:
            return None
        channel.mark_closed()
        logger.info(f"节点 {peer_id} 已断开")
        await _fire(self._on_close, channel)
        return channel

    async def close_all(self) -> None:
        for peer_id in list(self.channels):
            channel = self.channels.pop(peer_id)
            await channel.close()
