"""Entry point for the web version: python -m deckclicker.web"""

import argparse
import logging
from pathlib import Path

from deckclicker.data.cards import resolve_card_pool
from deckclicker.engine.errors import GameError
from deckclicker.web.server import run_server


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Stacked Deck Clicker: Web Version")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    parser.add_argument("--cards", type=Path, help="Card details JSON (name, detailsId, dropWeight)")
    parser.add_argument("--prices", type=Path, help="Card prices JSON (detailsId, chaosValue)")
    args = parser.parse_args(argv)

    try:
        pool = resolve_card_pool(args.cards, args.prices)
    except (OSError, ValueError, KeyError, GameError) as exc:
        parser.error(f"cannot load card pool: {exc}")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"\n  🂠 Stacked Deck Clicker (Web Edition)")
    print(f"  ➜ http://{args.host}:{args.port}/api/state\n")

    run_server(host=args.host, port=args.port, debug=args.debug, pool=pool)


if __name__ == "__main__":
    main()
