"""
权威对局引擎
房主进程中唯一持有并修改 GameState 的组件：校验并应用动作、推进回合、判定胜负

所有校验都在修改之前完成 (先校验后应用)，因此被拒绝的动作不会留下
任何部分修改，也无需回滚。
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence

from i18n import t as _t
from i18n import side_name

from .actions import Action, ActionResult
from .config import GameConfig, get_config
from .enums import ActionType, GamePhase, Side
from .exceptions import (
    GameError,
    GameNotRunningError,
    InvalidMoveError,
    NotEnoughPlayersError,
    TurnViolationError,
)
from .state import Board, GameState
from .tile import Tile, deal, make_double_six_set, shuffle_tiles

logger = logging.getLogger(__name__)


class DominoEngine:
    """
    权威对局引擎

    状态机: NOT_RUNNING → RUNNING → FINISHED(winner)
    FINISHED 之后只能通过新的 host_start_game 重新进入 RUNNING。
    """

    def __init__(self, config: GameConfig | None = None,
                 rng: random.Random | None = None,
                 on_log: Callable[[str], None] | None = None):
        """
        Args:
            config: 对局配置
            rng: 洗牌用随机源 (测试时可传入固定种子)
            on_log: 诊断日志回调 (房主本地日志流)
        """
        self.config = config or get_config()
        self.rng = rng or random.Random()
        self.state: GameState = GameState()
        self.game_seed: int | None = None
        self._on_log = on_log

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    def log_event(self, message: str) -> None:
        """记录诊断信息到 logging 与本地日志流"""
        logger.info(message)
        if self._on_log:
            self._on_log(message)

    # ==================== 开局 ====================

    def host_start_game(self, player_ids: Sequence[str], seed: int | None = None) -> bool:
        """房主开局

        Args:
            player_ids: 按连接顺序排列的玩家 ID (房主在首位)
            seed: 可选洗牌种子

        Returns:
            是否成功开局；人数不足时不做任何修改
        """
        ids = list(player_ids)
        if len(ids) < self.config.min_players:
            err = NotEnoughPlayersError(count=len(ids), required=self.config.min_players)
            logger.warning(f"开局失败: {err}")
            self.log_event(_t("feed.need_players", count=self.config.min_players))
            return False

        if seed is not None:
            self.rng = random.Random(seed)
        self.game_seed = seed

        tiles = shuffle_tiles(make_double_six_set(self.config.max_pip), self.rng)
        hands, boneyard = deal(tiles, ids, self.config)
        self.state = GameState(
            running=True,
            board=Board(),
            hands=hands,
            boneyard=boneyard,
            boneyard_count=len(boneyard),
            turn_order=ids,
            current_turn_index=0,
            winner=None,
        )
        logger.info(
            f"对局开始: {len(ids)} 人, 每人 {len(hands[ids[0]])} 张, 牌堆 {len(boneyard)} 张"
        )
        return True

    # ==================== 动作处理 ====================

    def process_action(self, acting_player_id: str, action: Action) -> ActionResult:
        """校验并应用一名玩家的动作

        任何违规都在此处捕获并记录，不会向外抛出。
        """
        try:
            self._check_turn(acting_player_id)
            if action.action_type is ActionType.PLAY:
                return self._play(acting_player_id, action)
            if action.action_type is ActionType.DRAW:
                return self._draw(acting_player_id)
            return self._pass(acting_player_id)
        except GameError as e:
            logger.info(f"动作被拒绝 ({acting_player_id}, {action.action_type.value}): {e}")
            return ActionResult.rejected(e)

    def _check_turn(self, player_id: str) -> None:
        state = self.state
        if not state.running:
            self.log_event(_t("feed.not_running", player=player_id))
            raise GameNotRunningError(player_id=player_id)
        current = state.current_player_id
        if player_id != current:
            self.log_event(_t("feed.not_your_turn", player=player_id))
            raise TurnViolationError(player_id=player_id, current_player_id=current)

    def resolve_side(self, tile: Tile, side: Side | None) -> Side | None:
        """确定骨牌要接的端，不可接时抛出 InvalidMoveError

        空牌面返回 None (忽略 side)；两端都可接且未指定时优先左端。
        """
        board = self.state.board
        if board.is_empty:
            return None
        left, right = board.ends
        fits_left = tile.touches(left)
        fits_right = tile.touches(right)
        if not fits_left and not fits_right:
            self.log_event(_t("feed.no_fit", tile=tile))
            raise InvalidMoveError(action_type="play", reason="no_fit")
        if side is None:
            return Side.LEFT if fits_left else Side.RIGHT
        if (side is Side.LEFT and not fits_left) or (side is Side.RIGHT and not fits_right):
            self.log_event(_t("feed.wrong_side", tile=tile, side=side_name(side.value)))
            raise InvalidMoveError(action_type="play", reason="wrong_side")
        return side

    def _play(self, player_id: str, action: Action) -> ActionResult:
        state = self.state
        tile = action.tile
        hand = state.hands.setdefault(player_id, [])
        if tile is None or tile not in hand:
            self.log_event(_t("feed.not_in_hand", tile=tile))
            raise InvalidMoveError(action_type="play", player_id=player_id, reason="not_in_hand")
        side = self.resolve_side(tile, action.side)

        # ---- 以下为应用阶段，不再有失败路径 ----
        state.board.place(tile, side)
        hand.remove(tile)
        winner = None
        if not hand:
            state.running = False
            state.winner = player_id
            winner = player_id
            logger.info(f"{player_id} 出完手牌，对局结束")
        state.advance_turn()
        return ActionResult.ok(winner=winner)

    def _draw(self, player_id: str) -> ActionResult:
        state = self.state
        if state.boneyard:
            tile = state.boneyard.pop()
            state.hands.setdefault(player_id, []).append(tile)
            state.boneyard_count = len(state.boneyard)
            logger.debug(f"{player_id} 摸牌, 牌堆剩余 {state.boneyard_count}")
        state.advance_turn()
        return ActionResult.ok()

    def _pass(self, player_id: str) -> ActionResult:
        # 不校验玩家是否确实无牌可出
        self.state.advance_turn()
        return ActionResult.ok()

    # ==================== 查询 ====================

    def legal_plays(self, player_id: str) -> list[tuple[Tile, Side | None]]:
        """列出玩家当前可出的 (骨牌, 端)；不影响过牌的合法性"""
        state = self.state
        hand = state.hand_of(player_id)
        if state.board.is_empty:
            return [(tile, None) for tile in hand]
        left, right = state.board.ends
        plays: list[tuple[Tile, Side | None]] = []
        for tile in hand:
            if tile.touches(left):
                plays.append((tile, Side.LEFT))
            if tile.touches(right):
                plays.append((tile, Side.RIGHT))
        return plays

    def snapshot(self) -> dict:
        return self.state.to_snapshot()
