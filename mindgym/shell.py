"""Memory Match on a Stream Deck.

HUD on the top row (keys 0-7), tiles on keys 8-31, so the deck board holds
up to 12 pairs. Key 6 starts a game from the menu, restarts one in progress
and deals a new one after a win or loss; key 7 goes back to the menu once a
game is over. Key 5 shows the time bonus after a win.

Usage:
    mindgym-deck --config config.yaml
"""

import argparse
import sys
import threading
from pathlib import Path

from PIL import Image
from StreamDeck.DeviceManager import DeviceManager
from StreamDeck.ImageHelpers import PILHelper

from mindgym import renderer
from mindgym.board import InvalidConfiguration
from mindgym.config import load_config
from mindgym.memory import MemorySession, Phase, Snapshot
from mindgym.timers import ThreadScheduler

HUD_KEYS = list(range(0, 8))
GAME_KEYS = list(range(8, 32))
BONUS_KEY = 5
START_KEY = 6
MENU_KEY = 7
MAX_PAIRS = len(GAME_KEYS) // 2

GAME_OVER = (Phase.WON, Phase.LOST)


def find_deck():
    """Find first visual Stream Deck device."""
    decks = DeviceManager().enumerate()
    for deck in decks:
        if deck.is_visual():
            return deck
    return None


def key_layout(snap: Snapshot) -> dict[int, tuple]:
    """What each key should show, as a hashable signature."""
    layout: dict[int, tuple] = {
        0: ("title",),
        1: ("score", snap.score),
        2: ("time", snap.remaining_time, snap.phase == Phase.PLAYING),
        3: ("left", snap.cards_left),
        4: ("status", snap.phase),
        BONUS_KEY: ("bonus", snap.bonus) if snap.phase == Phase.WON else ("empty",),
        MENU_KEY: ("menu",) if snap.phase in GAME_OVER else ("empty",),
    }
    for idx, key in enumerate(GAME_KEYS):
        if idx < len(snap.tiles):
            layout[key] = ("tile", snap.tiles[idx])
        else:
            layout[key] = ("blank",)

    if snap.phase == Phase.MENU:
        layout[START_KEY] = ("start", "START")
    elif snap.phase in GAME_OVER:
        layout[START_KEY] = ("start", "AGAIN")
    else:
        layout[START_KEY] = ("restart",)
    return layout


def render_signature(sig: tuple) -> Image.Image:
    kind = sig[0]
    if kind == "title":
        return renderer.render_hud_title()
    if kind == "score":
        return renderer.render_hud_score(sig[1])
    if kind == "time":
        return renderer.render_hud_time(sig[1], sig[2])
    if kind == "left":
        return renderer.render_hud_cards_left(sig[1])
    if kind == "status":
        return renderer.render_status(sig[1])
    if kind == "menu":
        return renderer.render_menu()
    if kind == "tile":
        return renderer.render_tile(sig[1])
    if kind == "start":
        return renderer.render_start(sig[1])
    if kind == "restart":
        return renderer.render_restart()
    if kind == "bonus":
        return renderer.render_hud_bonus(sig[1])
    return renderer.render_hud_empty()


class MemoryDeck:
    """Binds a MemorySession to the deck: draws snapshots, forwards presses."""

    def __init__(self, deck, session: MemorySession, verbose: bool = False):
        self.deck = deck
        self.session = session
        self.verbose = verbose
        self._drawn: dict[int, tuple] = {}
        self._last_phase: Phase | None = None
        session.on_change = self.render

    def set_key(self, pos: int, img: Image.Image):
        native = PILHelper.to_native_key_format(self.deck, img)
        with self.deck:
            self.deck.set_key_image(pos, native)

    def render(self, snap: Snapshot):
        if self.verbose and snap.phase != self._last_phase:
            print(f"Phase: {snap.phase.value} (score {snap.score}, "
                  f"time {renderer.format_time(snap.remaining_time)})")
        self._last_phase = snap.phase

        for key, sig in key_layout(snap).items():
            if self._drawn.get(key) == sig:
                continue
            self.set_key(key, render_signature(sig))
            self._drawn[key] = sig

    def on_key(self, _deck, key: int, pressed: bool):
        if not pressed:
            return
        phase = self.session.snapshot().phase

        if key == START_KEY and phase == Phase.MENU:
            self.session.on_start_requested()
        elif key == START_KEY:
            self.session.on_restart_requested()
        elif key == MENU_KEY and phase in GAME_OVER:
            self.session.on_menu_requested()
        elif key in GAME_KEYS:
            accepted = self.session.on_tile_selected(GAME_KEYS.index(key))
            if self.verbose and not accepted:
                print(f"Key {key} ignored ({phase.value})")


def main():
    parser = argparse.ArgumentParser(description="Memory Match for Stream Deck")
    parser.add_argument("--config", default="config.yaml", help="Config file path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    args = parser.parse_args()

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Config not found: {config_path}")
        sys.exit(1)

    try:
        config = load_config(config_path)
    except InvalidConfiguration as e:
        print(f"Bad config: {e}")
        sys.exit(1)

    if config.memory.pairs > MAX_PAIRS:
        print(f"memory.pairs={config.memory.pairs} does not fit the deck (max {MAX_PAIRS})")
        sys.exit(1)

    deck = find_deck()
    if deck is None:
        print("No Stream Deck found. Is it plugged in?")
        sys.exit(1)

    deck.open()
    deck.reset()
    deck.set_brightness(config.deck.brightness)
    print(f"Connected: {deck.deck_type()} ({deck.key_count()} keys)")
    print("MEMORY MASTER! Press START on the top row to begin.")

    scheduler = ThreadScheduler()
    session = MemorySession(config.memory, scheduler)
    app = MemoryDeck(deck, session, verbose=args.verbose)
    app.render(session.snapshot())
    deck.set_key_callback(app.on_key)

    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        print(f"\nBye! Last score: {session.score}")
    finally:
        scheduler.shutdown()
        deck.reset()
        deck.close()


if __name__ == "__main__":
    main()
