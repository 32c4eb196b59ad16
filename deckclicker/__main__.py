"""Entry point for Stacked Deck Clicker."""

import argparse
import logging
from pathlib import Path

from deckclicker.app import DeckClickerApp
from deckclicker.data.cards import resolve_card_pool
from deckclicker.data.modes import ALL_MODES
from deckclicker.engine import save
from deckclicker.engine.errors import GameError


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Stacked Deck Clicker")
    parser.add_argument("--mode", choices=sorted(ALL_MODES), help="Game mode for a new game")
    parser.add_argument("--new", action="store_true", help="Discard the saved game and start over")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--save-dir", type=Path, help="Directory for the save file and log")
    parser.add_argument("--cards", type=Path, help="Card details JSON (name, detailsId, dropWeight)")
    parser.add_argument("--prices", type=Path, help="Card prices JSON (detailsId, chaosValue)")
    args = parser.parse_args(argv)

    try:
        pool = resolve_card_pool(args.cards, args.prices)
    except (OSError, ValueError, KeyError, GameError) as exc:
        parser.error(f"cannot load card pool: {exc}")

    if args.save_dir is not None:
        save.set_save_dir(args.save_dir)

    # Log to a file: anything on stderr would tear the TUI
    save.SAVE_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=save.SAVE_DIR / "deckclicker.log",
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = DeckClickerApp(mode_id=args.mode, new_game=args.new, pool=pool)
    app.run()


if __name__ == "__main__":
    main()
