# -*- coding: utf-8 -*-
"""
Rich terminal view
Renders a participant's local projection and parses typed commands.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.box import ROUNDED
from rich.columns import Columns
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from game.actions import Action
from game.enums import Side
from game.exceptions import InvalidTileError
from game.tile import Tile
from i18n import t as _t
from i18n import tile_label

if TYPE_CHECKING:
    from net.broadcast import Projection


@dataclass
class Command:
    """A parsed line of user input"""
    name: str
    action: Action | None = None


def parse_command(line: str) -> Command:
    """Parse ``start``, ``play <a> <b> [left|right]``, ``draw``, ``pass``, ``quit``"""
    parts = line.strip().lower().split()
    if not parts:
        return Command("empty")
    head, args = parts[0], parts[1:]
    if head in ("start", "quit", "exit"):
        return Command("quit" if head == "exit" else head)
    if head == "draw":
        return Command("draw", Action.draw())
    if head == "pass":
        return Command("pass", Action.pass_turn())
    if head == "play" and len(args) in (2, 3):
        try:
            tile = Tile.from_pips(int(args[0]), int(args[1]))
            side = Side(args[2]) if len(args) == 3 else None
        except (ValueError, InvalidTileError):
            return Command("invalid")
        return Command("play", Action.play(tile, side))
    return Command("invalid")


class ConsoleView:
    """
    Rich view of a Projection
    Nothing here mutates game state; it only reads the local projection.
    """

    def __init__(self, local_id: str, room_id: str, console: Console | None = None):
        self.console = console or Console(highlight=False)
        self.local_id = local_id
        self.room_id = room_id
        self.max_log_lines = 12

    def _ids_panel(self) -> Panel:
        table = Table(box=None, show_header=False)
        table.add_row(_t("ui.peer_id"), Text(self.local_id, style="bold cyan"))
        table.add_row(_t("ui.room_id"), Text(self.room_id or "—", style="bold cyan"))
        return Panel(table, title=_t("ui.title"), box=ROUNDED)

    def _players_panel(self, view: Projection) -> Panel:
        table = Table(box=None, show_header=False)
        for p in view.players:
            name = p.get("name", "")
            pid = p.get("id", "")
            style = "bold green" if pid == self.local_id else ""
            table.add_row(Text(name, style=style), Text(f"({pid[:6]})", style="dim"))
        return Panel(table, title=_t("ui.players"), box=ROUNDED)

    def _game_panel(self, view: Projection) -> Panel:
        state = view.state
        if not state.running:
            lines = [Text(_t("ui.not_running"), style="dim")]
            if state.winner is not None:
                lines.append(Text(_t("ui.winner", player=view.player_name(state.winner)),
                                  style="bold yellow"))
            return Panel(Group(*lines), title=_t("ui.game"), box=ROUNDED)

        board = " ".join(tile_label(t) for t in state.board.tiles) or "—"
        ends = f"{state.ends[0]} / {state.ends[1]}" if state.ends else "—"
        current = state.current_player_id
        if current == self.local_id:
            turn = Text(_t("ui.your_turn"), style="bold green")
        else:
            turn = Text(_t("ui.player_turn", player=view.player_name(current)))

        table = Table(box=None, show_header=False)
        table.add_row(_t("ui.board"), board)
        table.add_row(_t("ui.ends"), ends)
        table.add_row(_t("ui.boneyard"), str(state.boneyard_count))
        table.add_row(_t("ui.turn"), turn)
        return Panel(table, title=_t("ui.game"), box=ROUNDED)

    def _hand_panel(self, view: Projection) -> Panel:
        hand = view.state.hand_of(self.local_id)
        tiles = [Text(str(t), style="bold") for t in hand]
        return Panel(Columns(tiles) if tiles else Text("—"), title=_t("ui.hand"), box=ROUNDED)

    def _log_panel(self, view: Projection) -> Panel:
        lines = list(view.log)[-self.max_log_lines:]
        return Panel(Text("\n".join(lines), style="dim"), title=_t("ui.log"), box=ROUNDED)

    def render(self, view: Projection) -> Group:
        return Group(
            Columns([self._ids_panel(), self._players_panel(view)]),
            self._game_panel(view),
            self._hand_panel(view),
            self._log_panel(view),
            Text(_t("ui.hint"), style="italic"),
        )

    def show(self, view: Projection) -> None:
        self.console.print(self.render(view))

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]{message}[/red]")
