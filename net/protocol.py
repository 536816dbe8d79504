"""网络协议定义
房主与客户端之间的 JSON 消息格式

协议设计:
- 客户端 → 房主: introduce / action
- 房主 → 客户端: welcome_request / players_update / state / log / full / start_ack
- 所有消息均为完整 JSON 对象，包含 type 字段用于路由，不分片
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ==================== 消息类型枚举 ====================


class MsgType(Enum):
    """网络消息类型 (封闭集合)"""

    # ---- 房主 → 客户端 ----
    WELCOME_REQUEST = "welcome_request"   # 请求新客户端自我介绍
    PLAYERS_UPDATE = "players_update"     # 玩家名册
    STATE = "state"                       # 完整对局快照
    LOG = "log"                           # 诊断日志
    FULL = "full"                         # 房间已满 (随后关闭连接)
    START_ACK = "start_ack"               # 对局已开始

    # ---- 客户端 → 房主 ----
    INTRODUCE = "introduce"               # 自我介绍 (显示名)
    ACTION = "action"                     # 玩家动作


class Direction(Enum):
    """消息方向"""

    HOST_TO_GUEST = "host_to_guest"
    GUEST_TO_HOST = "guest_to_host"


MESSAGE_DIRECTIONS: dict[MsgType, Direction] = {
    MsgType.WELCOME_REQUEST: Direction.HOST_TO_GUEST,
    MsgType.PLAYERS_UPDATE: Direction.HOST_TO_GUEST,
    MsgType.STATE: Direction.HOST_TO_GUEST,
    MsgType.LOG: Direction.HOST_TO_GUEST,
    MsgType.FULL: Direction.HOST_TO_GUEST,
    MsgType.START_ACK: Direction.HOST_TO_GUEST,
    MsgType.INTRODUCE: Direction.GUEST_TO_HOST,
    MsgType.ACTION: Direction.GUEST_TO_HOST,
}


# ==================== 消息数据类 ====================


@dataclass
class Message:
    """线上消息

    格式:
    {
        "type": "state",
        "seq": 7,
        "timestamp": 1706000000.0,
        "data": { ... }
    }

    seq 只在 state 消息上递增，仅作诊断用途；没有确认与重传。
    """
    type: MsgType
    data: dict[str, Any] = field(default_factory=dict)
    seq: int = 0
    timestamp: float = field(default_factory=time.time)

    @property
    def direction(self) -> Direction:
        return MESSAGE_DIRECTIONS[self.type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "seq": self.seq,
            "timestamp": self.timestamp,
            "data": self.data,
        }

    def to_json(self) -> str:
        """序列化为 JSON 字符串"""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    # ---------- 工厂方法: 房主 → 客户端 ----------

    @classmethod
    def welcome_request(cls) -> Message:
        return cls(type=MsgType.WELCOME_REQUEST)

    @classmethod
    def players_update(cls, players: list[dict[str, Any]]) -> Message:
        return cls(type=MsgType.PLAYERS_UPDATE, data={"players": players})

    @classmethod
    def state(cls, snapshot: dict[str, Any], seq: int = 0) -> Message:
        """完整对局快照"""
        return cls(type=MsgType.STATE, data=snapshot, seq=seq)

    @classmethod
    def log(cls, msg: str) -> Message:
        return cls(type=MsgType.LOG, data={"msg": msg})

    @classmethod
    def full(cls) -> Message:
        return cls(type=MsgType.FULL)

    @classmethod
    def start_ack(cls) -> Message:
        return cls(type=MsgType.START_ACK)

    # ---------- 工厂方法: 客户端 → 房主 ----------

    @classmethod
    def introduce(cls, name: str) -> Message:
        return cls(type=MsgType.INTRODUCE, data={"name": name})

    @classmethod
    def action(cls, action_data: dict[str, Any]) -> Message:
        """玩家动作: {"type": "play"|"draw"|"pass", "tile"?: [a, b], "side"?: "left"|"right"}"""
        return cls(type=MsgType.ACTION, data=dict(action_data))


# ==================== 工具函数 ====================


def validate_msg_type(type_str: str) -> bool:
    """检查消息类型是否合法"""
    try:
        MsgType(type_str)
        return True
    except ValueError:
        return False
