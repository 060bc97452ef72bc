#!/usr/bin/env python3
"""
Pinboard viewer — terminal entry point

Browses published boards from a Supabase project, read-only.

Usage:
    pinboard                              # board list, interactive
    pinboard '#/b/demo'                   # open one board
    pinboard '#/b/demo' --once            # print once and exit
    pinboard --url https://x.supabase.co  # override the datastore URL

Commands at the prompt:
    #/b/<slug>        go to a fragment
    open <slug>       open a board
    home | back       board list
    filter <id|all>   filter cards by category
    search <text>     filter the board list
    card <id>         open a card's link in the browser
    refresh           reload the current view
    quit
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from .config import ConfigError, ViewerConfig
from .render import render
from .schema import ALL
from .service import RestBoardService
from .viewer import BoardViewer, Location

logger = logging.getLogger(__name__)

HELP = """\
Commands:
    #/b/<slug>        go to a fragment
    open <slug>       open a board
    home | back       board list
    filter <id|all>   filter cards by category
    search <text>     filter the board list
    card <id>         open a card's link in the browser
    refresh           reload the current view
    quit"""


def _find(items, text: str):
    for item in items:
        if str(item.id) == text:
            return item
    return None


async def handle_command(viewer: BoardViewer, line: str) -> bool:
    """Run one prompt line. Returns False when the session should end."""
    line = line.strip()
    if not line:
        return True
    if line.startswith("#"):
        if not viewer.location.assign(line):
            await viewer.navigate()
        return True

    cmd, _, arg = line.partition(" ")
    arg = arg.strip()

    if cmd in ("quit", "exit", "q"):
        return False
    elif cmd in ("home", "back"):
        viewer.go_home()
    elif cmd == "open" and arg:
        viewer.open_board(arg)
    elif cmd == "refresh":
        await viewer.navigate()
    elif cmd == "filter":
        if not arg or arg == ALL:
            viewer.set_filter(ALL)
        else:
            category = _find(viewer.state.categories, arg)
            # An unknown id simply filters everything out
            viewer.set_filter(category.id if category else arg)
    elif cmd == "search":
        viewer.set_query(arg)
    elif cmd == "card" and arg:
        card = _find(viewer.state.cards, arg)
        if card is None:
            print(f"No card {arg} on this board.")
        elif viewer.select_card(card) is None:
            print("No link")
    else:
        print(HELP)
    return True


async def run(cfg: ViewerConfig, fragment: str, once: bool = False) -> int:
    service = RestBoardService(cfg.supabase_url, cfg.anon_key, timeout=cfg.timeout)
    opener = None if cfg.open_links else (lambda url: print(f"Link: {url}"))
    location = Location(fragment)

    try:
        with BoardViewer(service, location=location, opener=opener) as viewer:
            viewer.backdrop.subscribe(
                lambda ref: logger.info(f"Background → {ref or 'none'}")
            )
            await viewer.navigate()
            print(render(viewer.state, viewer.backdrop.current))
            if once:
                return 0

            while True:
                try:
                    line = await asyncio.to_thread(input, "\n> ")
                except EOFError:
                    break
                if not await handle_command(viewer, line):
                    break
                await viewer.settle()
                print(render(viewer.state, viewer.backdrop.current))
    finally:
        service.close()
    return 0


def main(argv: Optional[list] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Read-only viewer for published boards"
    )
    ap.add_argument(
        "fragment", nargs="?", default="#/",
        help="Start fragment, e.g. '#/b/<slug>' (default: board list)",
    )
    ap.add_argument(
        "--config", default=None,
        help="Path to config.yaml (default: ~/.config/pinboard/config.yaml)",
    )
    ap.add_argument(
        "--url", default=None,
        help="Supabase project URL (overrides config and PINBOARD_URL)",
    )
    ap.add_argument(
        "--once", action="store_true",
        help="Print the view once and exit",
    )
    ap.add_argument(
        "-v", "--verbose", action="store_true",
        help="Debug logging",
    )
    args = ap.parse_args(argv)

    cfg = ViewerConfig.load(args.config)
    if args.url:
        cfg.supabase_url = args.url

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, cfg.log_level.upper(), logging.INFO),
        format="%(asctime)s [pinboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        cfg.validate()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        return asyncio.run(run(cfg, args.fragment, once=args.once))
    except KeyboardInterrupt:
        print("\nStopping...")
        return 0


if __name__ == "__main__":
    sys.exit(main())
