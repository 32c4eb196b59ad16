"""Tests for the command-line entry points and their card pool flags."""

import json
from unittest.mock import patch

import pytest

from deckclicker import __main__ as tui_main
from deckclicker.data.cards import default_card_pool
from deckclicker.engine import save
from deckclicker.web import __main__ as web_main


def _write_card_files(tmp_path):
    cards = tmp_path / "cards.json"
    prices = tmp_path / "prices.json"
    cards.write_text(json.dumps([
        {"name": "The Doctor", "detailsId": "the-doctor", "dropWeight": 4},
        {"name": "Rain of Chaos", "detailsId": "rain-of-chaos", "dropWeight": 121400},
    ]))
    prices.write_text(json.dumps([
        {"detailsId": "the-doctor", "chaosValue": 1300},
        {"detailsId": "rain-of-chaos", "chaosValue": 0.5},
    ]))
    return cards, prices


@pytest.fixture
def save_dir(tmp_path, monkeypatch):
    # Register the current paths so monkeypatch restores them afterwards
    monkeypatch.setattr(save, "SAVE_DIR", save.SAVE_DIR)
    monkeypatch.setattr(save, "SAVE_FILE", save.SAVE_FILE)
    return tmp_path / "saves"


# ── TUI ──────────────────────────────────────────────────────────────────────

def test_tui_passes_loaded_pool_to_app(tmp_path, save_dir):
    cards, prices = _write_card_files(tmp_path)
    argv = ["--cards", str(cards), "--prices", str(prices), "--save-dir", str(save_dir)]

    with patch.object(tui_main, "DeckClickerApp") as app_cls, \
            patch.object(tui_main.logging, "basicConfig"):
        tui_main.main(argv)

    pool = app_cls.call_args.kwargs["pool"]
    assert [c.name for c in pool.items] == ["The Doctor", "Rain of Chaos"]
    app_cls.return_value.run.assert_called_once()
    assert save.SAVE_DIR == save_dir


def test_tui_defaults_to_bundled_pool(save_dir):
    with patch.object(tui_main, "DeckClickerApp") as app_cls, \
            patch.object(tui_main.logging, "basicConfig"):
        tui_main.main(["--save-dir", str(save_dir)])

    assert len(app_cls.call_args.kwargs["pool"]) == len(default_card_pool())


def test_tui_rejects_cards_without_prices(tmp_path):
    cards, _ = _write_card_files(tmp_path)
    with patch.object(tui_main, "DeckClickerApp") as app_cls:
        with pytest.raises(SystemExit) as info:
            tui_main.main(["--cards", str(cards)])
    assert info.value.code == 2
    app_cls.assert_not_called()


def test_tui_rejects_unreadable_cards(tmp_path):
    with pytest.raises(SystemExit):
        tui_main.main(["--cards", str(tmp_path / "nope.json"), "--prices", str(tmp_path / "nope2.json")])


# ── Web ──────────────────────────────────────────────────────────────────────

def test_web_passes_loaded_pool_to_server(tmp_path):
    cards, prices = _write_card_files(tmp_path)

    with patch.object(web_main, "run_server") as run, \
            patch.object(web_main.logging, "basicConfig"):
        web_main.main(["--cards", str(cards), "--prices", str(prices), "--port", "6001"])

    kwargs = run.call_args.kwargs
    assert kwargs["port"] == 6001
    assert {c.name for c in kwargs["pool"].items} == {"The Doctor", "Rain of Chaos"}


def test_web_rejects_prices_without_cards(tmp_path):
    _, prices = _write_card_files(tmp_path)
    with patch.object(web_main, "run_server") as run:
        with pytest.raises(SystemExit):
            web_main.main(["--prices", str(prices)])
    run.assert_not_called()
