"""English translation table."""

STRINGS: dict[str, str] = {
    # ── exceptions ──
    "exc.invalid_tile": "Invalid tile",
    "exc.not_running": "Game is not running",
    "exc.not_enough_players": "Need at least {required} players to start (have {count})",
    "exc.turn_violation": "Not your turn: {player}",
    "exc.invalid_move": "Invalid move",
    "exc.protocol": "Malformed message",
    "exc.capacity": "Room full",

    # ── sides ──
    "side.left": "left",
    "side.right": "right",

    # ── diagnostic feed: connection ──
    "feed.peer_created": "Peer created: {id}",
    "feed.room_created": "Room created. Room ID (share this with friends to join): {id}",
    "feed.client_connected": "Client connected: {peer}",
    "feed.client_disconnected": "Client disconnected: {peer}",
    "feed.rejected_full": "Rejected connection (room full)",
    "feed.rejected_duplicate": "Rejected connection (peer id already in use): {peer}",
    "feed.joined": "{name} joined ({peer})",
    "feed.connected_host": "Connected to host: {host}",
    "feed.disconnected_host": "Disconnected from host",
    "feed.room_full": "Host says: room full",
    "feed.not_connected": "Not connected to host",
    "feed.dropped": "Dropped message from {peer}: {reason}",

    # ── diagnostic feed: game ──
    "feed.need_players": "Need at least {count} players to start",
    "feed.host_started": "Host started the game",
    "feed.game_started": "Game started",
    "feed.not_running": "Ignored action from {player}: game not running",
    "feed.not_your_turn": "Ignored action from {player}: not your turn",
    "feed.not_in_hand": "Invalid play: tile {tile} not in hand",
    "feed.no_fit": "Tile {tile} does not fit on either end",
    "feed.wrong_side": "Tile {tile} does not fit on the {side} end",
    "feed.winner": "Player {player} wins!",

    # ── terminal view ──
    "ui.title": "Domino",
    "ui.peer_id": "Your ID",
    "ui.room_id": "Room (host) ID",
    "ui.players": "Players",
    "ui.game": "Game",
    "ui.not_running": "Game not running",
    "ui.board": "Board",
    "ui.ends": "Ends",
    "ui.boneyard": "Boneyard",
    "ui.turn": "Turn",
    "ui.your_turn": "Your turn",
    "ui.player_turn": "Player {player}",
    "ui.hand": "Your hand",
    "ui.log": "Log",
    "ui.winner": "Winner: {player}",
    "ui.hint": "Commands: start | play <a> <b> [left|right] | draw | pass | quit",
    "ui.invalid_command": "Unknown command: {command}",
    "ui.only_host": "Only host can start",
    "ui.prompt": "> ",
}
