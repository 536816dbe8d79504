"""
牌面与对局状态测试
"""

import pytest

from game.enums import GamePhase, Side
from game.state import Board, GameState
from game.tile import Tile

# ==================== Board ====================


class TestBoard:
    def test_empty(self):
        board = Board()
        assert board.is_empty
        assert board.ends is None
        assert len(board) == 0

    def test_end_value_on_empty_board(self):
        with pytest.raises(ValueError):
            Board().end_value(Side.LEFT)

    def test_first_tile_ignores_side(self):
        board = Board()
        board.place(Tile(3, 5), Side.RIGHT)
        assert board.tiles == [(3, 5)]
        assert board.ends == (3, 5)

    def test_place_right_orients_tile(self):
        board = Board([(3, 5)])
        board.place(Tile(5, 6), Side.RIGHT)
        assert board.tiles == [(3, 5), (5, 6)]
        assert board.ends == (3, 6)

    def test_place_left_orients_tile(self):
        board = Board([(3, 5)])
        board.place(Tile(1, 3), Side.LEFT)
        assert board.tiles == [(1, 3), (3, 5)]
        assert board.ends == (1, 5)

    def test_reversed_tile_on_right(self):
        board = Board([(6, 6)])
        board.place(Tile(2, 6), Side.RIGHT)
        assert board.tiles[-1] == (6, 2)
        assert board.ends == (6, 2)

    def test_adjacent_tiles_match(self):
        board = Board()
        board.place(Tile(4, 4))
        board.place(Tile(1, 4), Side.LEFT)
        board.place(Tile(4, 6), Side.RIGHT)
        board.place(Tile(0, 1), Side.LEFT)
        for left, right in zip(board.tiles, board.tiles[1:]):
            assert left[1] == right[0]
        assert board.ends == (0, 6)

    def test_to_wire(self):
        assert Board([(1, 2), (2, 2)]).to_wire() == [[1, 2], [2, 2]]


# ==================== GameState ====================


def _state() -> GameState:
    return GameState(
        running=True,
        board=Board([(6, 6)]),
        hands={"h": [Tile(0, 1)], "a": [Tile(2, 6), Tile(3, 3)]},
        boneyard=[Tile(4, 5), Tile(1, 1)],
        boneyard_count=2,
        turn_order=["h", "a"],
        current_turn_index=1,
    )


class TestGameState:
    def test_defaults(self):
        state = GameState()
        assert not state.running
        assert state.phase is GamePhase.NOT_RUNNING
        assert state.current_player_id is None
        assert state.ends is None

    def test_phase(self):
        state = _state()
        assert state.phase is GamePhase.RUNNING
        state.running = False
        state.winner = "a"
        assert state.phase is GamePhase.FINISHED

    def test_current_player(self):
        assert _state().current_player_id == "a"

    def test_advance_turn_wraps(self):
        state = _state()
        state.advance_turn()
        assert state.current_turn_index == 0
        state.advance_turn()
        assert state.current_turn_index == 1

    def test_hand_of_unknown(self):
        assert _state().hand_of("nobody") == []

    def test_tile_count(self):
        assert _state().tile_count() == 1 + 2 + 1 + 2


class TestSnapshot:
    def test_keys(self):
        snap = _state().to_snapshot()
        assert set(snap) == {
            "running", "board", "ends", "hands", "boneyard_count",
            "turn_order", "current_turn_index", "winner",
        }

    def test_boneyard_tiles_never_included(self):
        snap = _state().to_snapshot()
        assert "boneyard" not in snap
        assert snap["boneyard_count"] == 2
        assert [4, 5] not in [t for hand in snap["hands"].values() for t in hand]

    def test_values(self):
        snap = _state().to_snapshot()
        assert snap["board"] == [[6, 6]]
        assert snap["ends"] == [6, 6]
        assert snap["hands"]["a"] == [[2, 6], [3, 3]]
        assert snap["current_turn_index"] == 1

    def test_empty_board_ends_none(self):
        assert GameState().to_snapshot()["ends"] is None

    def test_from_snapshot(self):
        original = _state()
        view = GameState.from_snapshot(original.to_snapshot())
        assert view.running
        assert view.board.tiles == original.board.tiles
        assert view.hands == original.hands
        assert view.boneyard == []
        assert view.boneyard_count == 2
        assert view.turn_order == ["h", "a"]
        assert view.current_player_id == "a"

    def test_copy_is_deep(self):
        original = _state()
        clone = original.copy()
        clone.hands["a"].pop()
        clone.board.tiles.append((6, 1))
        assert len(original.hands["a"]) == 2
        assert original.board.tiles == [(6, 6)]
