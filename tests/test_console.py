"""Tests for the rich console view and command parsing."""

import io

import pytest
from rich.console import Console

from game.enums import ActionType, Side
from game.state import Board, GameState
from game.tile import Tile
from i18n import get_locale, set_locale
from i18n import t as _t
from net.broadcast import Projection
from ui.console import ConsoleView, parse_command


@pytest.fixture(autouse=True)
def _english():
    original = get_locale()
    set_locale("en_US")
    yield
    set_locale(original)


def _view(local_id: str = "g1") -> tuple[ConsoleView, io.StringIO]:
    buf = io.StringIO()
    console = Console(file=buf, width=120, force_terminal=False, color_system=None)
    return ConsoleView(local_id, "room42", console), buf


def _projection(turn: int = 1, running: bool = True, winner=None) -> Projection:
    state = GameState(
        running=running,
        board=Board([(2, 6), (6, 6)]),
        hands={"h": [Tile(0, 1)], "g1": [Tile(3, 5), Tile(1, 1)]},
        boneyard_count=9,
        turn_order=["h", "g1"],
        current_turn_index=turn,
        winner=winner,
    )
    return Projection(state=state, players=[{"id": "h", "name": "Host"}, {"id": "g1", "name": "Ana"}])


class TestParseCommand:
    def test_play_with_side(self):
        cmd = parse_command("play 6 2 right")
        assert cmd.name == "play"
        assert cmd.action.action_type is ActionType.PLAY
        assert cmd.action.tile == Tile(2, 6)
        assert cmd.action.side is Side.RIGHT

    def test_play_without_side(self):
        assert parse_command("PLAY 1 1").action.side is None

    @pytest.mark.parametrize("line", ["play 7 1", "play a b", "play 1", "play 1 2 up", "dance"])
    def test_invalid(self, line):
        cmd = parse_command(line)
        assert cmd.name == "invalid"
        assert cmd.action is None

    def test_draw_pass(self):
        assert parse_command("draw").action.action_type is ActionType.DRAW
        assert parse_command(" pass ").action.action_type is ActionType.PASS

    def test_start_quit(self):
        assert parse_command("start").name == "start"
        assert parse_command("quit").name == "quit"
        assert parse_command("exit").name == "quit"

    def test_empty(self):
        assert parse_command("   ").name == "empty"


class TestConsoleView:
    def test_running_game(self):
        view, buf = _view()
        view.show(_projection())
        out = buf.getvalue()
        assert "room42" in out
        assert "[2|6] [6|6]" in out
        assert "2 / 6" in out
        assert "9" in out
        assert _t("ui.your_turn") in out
        assert "[3|5]" in out

    def test_other_players_turn(self):
        view, buf = _view()
        view.show(_projection(turn=0))
        assert _t("ui.player_turn", player="Host") in buf.getvalue()

    def test_not_running_with_winner(self):
        view, buf = _view()
        view.show(_projection(running=False, winner="h"))
        out = buf.getvalue()
        assert _t("ui.not_running") in out
        assert _t("ui.winner", player="Host") in out

    def test_log_tail(self):
        view, buf = _view()
        projection = _projection()
        projection.log.extend(f"line {i}" for i in range(20))
        view.show(projection)
        out = buf.getvalue()
        assert "line 19" in out
        assert "line 7" not in out

    def test_error(self):
        view, buf = _view()
        view.show_error("bad")
        assert "bad" in buf.getvalue()
