"""对局阶段与动作枚举 — 独立成模块以避免 engine / state 之间循环导入"""

from enum import Enum


class GamePhase(Enum):
    """对局阶段枚举"""

    NOT_RUNNING = "not_running"  # 未开局
    RUNNING = "running"  # 进行中
    FINISHED = "finished"  # 已决出胜者


class ActionType(Enum):
    """玩家动作类型"""

    PLAY = "play"  # 出牌
    DRAW = "draw"  # 摸牌
    PASS = "pass"  # 过


class Side(Enum):
    """牌面两端"""

    LEFT = "left"
    RIGHT = "right"
