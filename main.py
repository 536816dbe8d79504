# -*- coding: utf-8 -*-
"""
多米诺 - 联机终端版
主程序入口

使用方法:
    python main.py host --name Ana --port 8765
    python main.py join --server ws://192.168.1.10:8765 --name Bo

对局命令:
    start | play <a> <b> [left|right] | draw | pass | quit
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console

from i18n import get_available_locales, set_locale
from i18n import t as _t
from logging_config import setup_logging
from net.broadcast import Projection
from net.client import GuestClient
from net.host import HostSession
from ui.console import ConsoleView, parse_command

logger = logging.getLogger(__name__)


class _StateRenderer:
    """只在快照或名册变化时重绘，日志追加不触发重绘"""

    def __init__(self, view: ConsoleView):
        self.view = view
        self._last: tuple[int, int] | None = None

    def __call__(self, projection: Projection) -> None:
        key = (projection.seq, len(projection.players))
        if key != self._last:
            self._last = key
            self.view.show(projection)


async def _read_line(console: Console) -> str:
    return await asyncio.to_thread(console.input, _t("ui.prompt"))


async def run_host(args: argparse.Namespace, console: Console) -> None:
    """房主: 启动服务并在本地终端参与对局"""
    session = HostSession(name=args.name, host=args.host, port=args.port)
    view = ConsoleView(session.local_id, session.local_id, console)
    renderer = _StateRenderer(view)
    session.projector.subscribe(renderer)

    session.start_actor()
    server = asyncio.create_task(session.start())
    await asyncio.sleep(0)
    renderer(session.projection)

    try:
        while not server.done():
            line = await _read_line(console)
            cmd = parse_command(line)
            if cmd.name == "quit":
                break
            if cmd.name == "start":
                if not await session.start_game(args.seed):
                    view.show(session.projection)
            elif cmd.action is not None:
                result = await session.submit_local_action(cmd.action)
                if not result.accepted:
                    # 快照未变，重绘以显示拒绝原因
                    view.show(session.projection)
            elif cmd.name == "invalid":
                view.show_error(_t("ui.invalid_command", command=line.strip()))
            else:
                view.show(session.projection)
    finally:
        session.stop()
    # 监听失败 (如端口被占用) 时在这里抛出
    await server


async def run_join(args: argparse.Namespace, console: Console) -> None:
    """客户端: 连接房主，收到快照即重绘"""
    client = GuestClient(host_url=args.server, name=args.name)
    view = ConsoleView(client.local_id, args.server, console)
    client.on_update(_StateRenderer(view))

    receiver = asyncio.create_task(client.run())
    await asyncio.sleep(0)

    try:
        while not receiver.done():
            line = await _read_line(console)
            cmd = parse_command(line)
            if cmd.name == "quit":
                break
            if cmd.name == "start":
                view.show_error(_t("ui.only_host"))
            elif cmd.action is not None:
                await client.send_action(cmd.action)
            elif cmd.name == "invalid":
                view.show_error(_t("ui.invalid_command", command=line.strip()))
    finally:
        if not receiver.done():
            receiver.cancel()
            try:
                await receiver
            except asyncio.CancelledError:
                pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="多米诺联机对局 (房主权威)")
    parser.add_argument("-v", "--verbose", action="store_true", help="详细日志并输出到终端")
    parser.add_argument("--locale", choices=get_available_locales(), help="界面语言")
    sub = parser.add_subparsers(dest="mode", required=True)

    host = sub.add_parser("host", help="创建房间并作为房主参与")
    host.add_argument("--name", default="Host", help="显示名称")
    host.add_argument("--host", default=None, help="监听地址")
    host.add_argument("--port", type=int, default=None, help="监听端口")
    host.add_argument("--seed", type=int, default=None, help="洗牌随机种子")

    join = sub.add_parser("join", help="加入房主的房间")
    join.add_argument("--server", default="ws://localhost:8765", help="房主地址")
    join.add_argument("--name", default="Player", help="显示名称")
    return parser


def main(argv: list[str] | None = None) -> int:
    """程序入口"""
    args = build_parser().parse_args(argv)
    setup_logging(
        level="DEBUG" if args.verbose else "INFO",
        enable_console=args.verbose,
        console_level="DEBUG" if args.verbose else "WARNING",
    )
    if args.locale:
        set_locale(args.locale)

    console = Console(highlight=False)
    runner = run_host if args.mode == "host" else run_join
    try:
        asyncio.run(runner(args, console))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt - exiting")
        return 0
    except Exception as e:
        logger.exception("Unhandled exception")
        console.print(f"[red]{e}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
