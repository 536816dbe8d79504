"""消息路由

把通道收到的原始负载分类为有类型的事件，并分发给引擎或本地视图。

- 房主角色只接受 客户端 → 房主 的消息 (introduce / action)
- 客户端角色只接受 房主 → 客户端 的消息
- 未知、格式错误、缺少必填字段或方向不符的消息被丢弃并记录诊断日志，
  不会从 route() 抛出，也不会造成任何部分修改
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from game.exceptions import ProtocolError
from i18n import t as _t

from .models import EnvelopeModel, validate_message
from .protocol import MESSAGE_DIRECTIONS, Direction, MsgType

logger = logging.getLogger(__name__)

RouteHandler = Callable[[str, Any, EnvelopeModel], Awaitable[None] | None]


class Role(Enum):
    """本地参与者角色"""

    HOST = "host"
    GUEST = "guest"

    @property
    def inbound(self) -> Direction:
        """该角色应当收到的消息方向"""
        if self is Role.HOST:
            return Direction.GUEST_TO_HOST
        return Direction.HOST_TO_GUEST


class MessageRouter:
    """消息路由器

    用法::

        router = MessageRouter(Role.HOST, on_diagnostic=feed.append)
        router.on(MsgType.ACTION, handle_action)
        await router.route(peer_id, raw)
    """

    def __init__(self, role: Role,
                 on_diagnostic: Callable[[str], None] | None = None):
        self.role = role
        self._handlers: dict[MsgType, RouteHandler] = {}
        self._on_diagnostic = on_diagnostic
        self.dropped: int = 0

    def on(self, msg_type: MsgType, handler: RouteHandler) -> None:
        """注册消息处理器 (handler(peer_id, data, envelope))"""
        if MESSAGE_DIRECTIONS[msg_type] is not self.role.inbound:
            raise ValueError(f"{self.role.value} 不接收 {msg_type.value} 消息")
        self._handlers[msg_type] = handler

    def classify(self, peer_id: str,
                 raw: str | bytes) -> tuple[MsgType, EnvelopeModel, BaseModel]:
        """校验并分类消息，返回 (类型, 信封, 已校验的 data)

        Raises:
            ProtocolError: 无法识别、格式错误或方向不符
        """
        try:
            envelope, data = validate_message(raw)
        except ValidationError as e:
            raise ProtocolError(
                f"{_t('exc.protocol')}: {e.error_count()} error(s)", peer_id=peer_id
            ) from e
        except (ValueError, TypeError, KeyError) as e:
            raise ProtocolError(f"{_t('exc.protocol')}: {e}", peer_id=peer_id) from e

        msg_type = MsgType(envelope.type)
        if MESSAGE_DIRECTIONS[msg_type] is not self.role.inbound:
            raise ProtocolError(
                f"{_t('exc.protocol')}: unexpected {msg_type.value}",
                msg_type=msg_type.value, peer_id=peer_id,
            )
        return msg_type, envelope, data

    async def route(self, peer_id: str, raw: str | bytes) -> bool:
        """路由一条原始消息

        Returns:
            是否已分发给处理器
        """
        try:
            msg_type, envelope, data = self.classify(peer_id, raw)
            handler = self._handlers.get(msg_type)
            if handler is None:
                raise ProtocolError(
                    f"{_t('exc.protocol')}: no handler for {msg_type.value}",
                    msg_type=msg_type.value, peer_id=peer_id,
                )
        except ProtocolError as e:
            self._drop(peer_id, e)
            return False

        try:
            result = handler(peer_id, data, envelope)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.exception(f"处理消息异常 ({msg_type.value}, 节点 {peer_id}): {e}")
            return False
        return True

    def _drop(self, peer_id: str, error: ProtocolError) -> None:
        self.dropped += 1
        logger.warning(f"丢弃来自 {peer_id} 的消息: {error}")
        if self._on_diagnostic:
            self._on_diagnostic(_t("feed.dropped", peer=peer_id, reason=error.message))
