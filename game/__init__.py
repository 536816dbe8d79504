"""
多米诺对局核心模块
包含骨牌模型、对局状态、玩家名册与权威引擎
"""

from .actions import Action, ActionResult
from .config import GameConfig, get_config
from .engine import DominoEngine
from .enums import ActionType, GamePhase, Side
from .player import Player, Roster
from .state import Board, GameState
from .tile import Tile, deal, make_double_six_set, shuffle_tiles

__all__ = [
    # 骨牌
    'Tile', 'make_double_six_set', 'shuffle_tiles', 'deal',
    # 状态
    'Board', 'GameState', 'GamePhase',
    # 玩家
    'Player', 'Roster',
    # 引擎
    'DominoEngine', 'Action', 'ActionResult', 'ActionType', 'Side',
    # 配置
    'GameConfig', 'get_config',
]

__version__ = '1.0.0'
