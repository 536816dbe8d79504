"""网络消息 Pydantic 校验模型

路由层在分发前先用这里的模型校验原始 JSON:
  - 外层信封结构 (type / seq / timestamp / data)
  - 按 type 查找 data 子结构的校验模型

设计原则:
  - 校验模型与内部 dataclass 分离 (校验层 vs 业务层)
  - 校验失败抛出 pydantic.ValidationError，由路由层统一捕获
  - 信封使用 extra="forbid" 防止未知字段注入
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from game.tile import MAX_PIP

from .protocol import MsgType, validate_msg_type
from .security import sanitize_display_name

Pip = Annotated[int, Field(ge=0, le=MAX_PIP)]
TilePips = tuple[Pip, Pip]

# ====================================================================== #
#  外层信封                                                               #
# ====================================================================== #


class EnvelopeModel(BaseModel):
    """消息信封校验模型"""

    model_config = ConfigDict(extra="forbid")

    type: str
    seq: int = Field(default=0, ge=0)
    timestamp: float = 0.0
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("type")
    @classmethod
    def type_known(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("消息类型不能为空")
        if not validate_msg_type(v):
            raise ValueError(f"未知消息类型: {v}")
        return v


# ====================================================================== #
#  客户端 → 房主                                                          #
# ====================================================================== #


class IntroduceData(BaseModel):
    """introduce 消息的 data 校验"""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        cleaned = sanitize_display_name(v)
        if not cleaned:
            raise ValueError("显示名不能为空")
        return cleaned


class ActionData(BaseModel):
    """action 消息的 data 校验"""

    model_config = ConfigDict(extra="forbid")

    type: Literal["play", "draw", "pass"]
    tile: TilePips | None = None
    side: Literal["left", "right"] | None = None

    @model_validator(mode="after")
    def play_needs_tile(self) -> ActionData:
        if self.type == "play" and self.tile is None:
            raise ValueError("play 动作缺少 tile")
        return self


# ====================================================================== #
#  房主 → 客户端                                                          #
# ====================================================================== #


class EmptyData(BaseModel):
    """welcome_request / full / start_ack 无负载"""

    model_config = ConfigDict(extra="ignore")


class PlayerEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    name: str


class PlayersUpdateData(BaseModel):
    """players_update 消息的 data 校验"""

    model_config = ConfigDict(extra="forbid")

    players: list[PlayerEntry]


class LogData(BaseModel):
    """log 消息的 data 校验"""

    model_config = ConfigDict(extra="forbid")

    msg: str


class StateData(BaseModel):
    """state 快照校验

    extra="forbid": 快照中不允许出现牌堆明细等额外字段。
    """

    model_config = ConfigDict(extra="forbid")

    running: bool
    board: list[TilePips]
    ends: TilePips | None = None
    hands: dict[str, list[TilePips]]
    boneyard_count: int = Field(ge=0)
    turn_order: list[str]
    current_turn_index: int = Field(ge=0)
    winner: str | None = None

    @model_validator(mode="after")
    def index_in_range(self) -> StateData:
        if self.turn_order and self.current_turn_index >= len(self.turn_order):
            raise ValueError("current_turn_index 越界")
        return self


# ====================================================================== #
#  消息类型 → data 校验模型映射                                            #
# ====================================================================== #

DATA_VALIDATORS: dict[MsgType, type[BaseModel]] = {
    MsgType.WELCOME_REQUEST: EmptyData,
    MsgType.INTRODUCE: IntroduceData,
    MsgType.PLAYERS_UPDATE: PlayersUpdateData,
    MsgType.ACTION: ActionData,
    MsgType.STATE: StateData,
    MsgType.LOG: LogData,
    MsgType.FULL: EmptyData,
    MsgType.START_ACK: EmptyData,
}


def validate_message(raw_json: str | bytes) -> tuple[EnvelopeModel, BaseModel]:
    """校验原始 JSON，返回 (信封, 已校验的 data)。

    流程:
      1. 用 EnvelopeModel.model_validate_json 校验外层结构与类型
      2. 根据 type 查找 DATA_VALIDATORS 校验 data 子结构

    Raises:
        pydantic.ValidationError: 校验失败
    """
    envelope = EnvelopeModel.model_validate_json(raw_json)
    validator_cls = DATA_VALIDATORS[MsgType(envelope.type)]
    data = validator_cls.model_validate(envelope.data)
    return envelope, data
