"""Memory Match — game state machine.

Phases run Menu -> Preview -> Playing -> Won/Lost. The session owns the
board, the selection, score, remaining time and every timer; the shell only
ever sees a Snapshot.

All entry points take the session lock, so key presses and timer callbacks
never interleave. Each (re)start bumps `generation`; deferred callbacks
carry the generation they were scheduled in and do nothing once it changes.
"""

from __future__ import annotations

import random
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from mindgym.board import TOKENS, Board, generate_board
from mindgym.config import MemoryConfig
from mindgym.resolver import resolve
from mindgym.timers import GameTimer, PreviewTimer, Scheduler, ThreadScheduler, TimerHandle


class Phase(str, Enum):
    MENU = "menu"
    PREVIEW = "preview"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class TileView:
    position: int
    token: str
    revealed: bool
    matched: bool


@dataclass(frozen=True)
class Snapshot:
    phase: Phase
    tiles: tuple[TileView, ...]
    score: int
    remaining_time: int
    locked: bool
    selection: tuple[int, ...] = ()
    bonus: int = 0  # time bonus included in score, set on Won

    @property
    def cards_left(self) -> int:
        return sum(1 for t in self.tiles if not t.matched)

    @property
    def pairs_found(self) -> int:
        return (len(self.tiles) - self.cards_left) // 2


class MemorySession:
    def __init__(self, config: MemoryConfig | None = None,
                 scheduler: Scheduler | None = None,
                 tokens: Iterable[str] | None = None,
                 rng: random.Random | None = None,
                 on_change: Callable[[Snapshot], None] | None = None):
        self.config = config or MemoryConfig()
        self.scheduler = scheduler or ThreadScheduler()
        self.tokens = tuple(tokens) if tokens is not None else TOKENS[:self.config.pairs]
        self.rng = rng
        self.on_change = on_change
        self.lock = threading.RLock()

        self.phase = Phase.MENU
        self.board: Board = []
        self.selection: list[int] = []
        self.score = 0
        self.bonus = 0
        self.remaining_time = self.config.game_duration
        self.locked = True
        self.generation = 0

        self._preview_timer: PreviewTimer | None = None
        self._game_timer: GameTimer | None = None
        self._settle: TimerHandle | None = None

    # ── projection ───────────────────────────────────────────────────

    def snapshot(self) -> Snapshot:
        with self.lock:
            return Snapshot(
                phase=self.phase,
                tiles=tuple(TileView(t.position, t.token, t.revealed, t.matched)
                            for t in self.board),
                score=self.score,
                remaining_time=self.remaining_time,
                locked=self.locked,
                selection=tuple(self.selection),
                bonus=self.bonus,
            )

    def _notify(self):
        if self.on_change:
            self.on_change(self.snapshot())

    # ── phase requests ───────────────────────────────────────────────

    def on_start_requested(self) -> bool:
        with self.lock:
            if self.phase != Phase.MENU:
                return False
            self._begin()
            return True

    def on_restart_requested(self) -> bool:
        with self.lock:
            if self.phase == Phase.MENU:
                return False
            self._begin()
            return True

    def on_menu_requested(self) -> bool:
        with self.lock:
            if self.phase == Phase.MENU:
                return False
            self._cancel_timers()
            self.generation += 1
            self.phase = Phase.MENU
            self.board = []
            self.selection = []
            self.score = 0
            self.bonus = 0
            self.remaining_time = self.config.game_duration
            self.locked = True
            self._notify()
            return True

    def _begin(self):
        """Deal a fresh board and enter Preview."""
        # Generate first: a bad token set must leave the current session intact
        board = generate_board(self.tokens, rng=self.rng)

        self._cancel_timers()
        self.generation += 1
        gen = self.generation

        self.board = board
        self.selection = []
        self.score = 0
        self.bonus = 0
        self.remaining_time = self.config.game_duration
        self.locked = True
        self.phase = Phase.PREVIEW

        self._preview_timer = PreviewTimer(
            self.scheduler, lambda: self._on_preview_expired(gen))
        self._game_timer = GameTimer(
            self.scheduler,
            on_tick=lambda remaining: self._on_tick(gen, remaining),
            on_expired=lambda: self._on_game_expired(gen),
        )
        self._preview_timer.start(self.config.preview_duration)
        self._notify()

    def _cancel_timers(self):
        if self._preview_timer:
            self._preview_timer.cancel()
        if self._game_timer:
            self._game_timer.cancel()
        if self._settle:
            self._settle.cancel()
        self._preview_timer = None
        self._game_timer = None
        self._settle = None

    # ── timer callbacks ──────────────────────────────────────────────

    def _on_preview_expired(self, gen: int):
        with self.lock:
            if gen != self.generation or self.phase != Phase.PREVIEW:
                return
            for tile in self.board:
                tile.revealed = False
            self.locked = False
            self.phase = Phase.PLAYING
            self._game_timer.start(self.config.game_duration)
            self._notify()

    def _on_tick(self, gen: int, remaining: int):
        with self.lock:
            if gen != self.generation or self.phase != Phase.PLAYING:
                return
            self.remaining_time = remaining
            self._notify()

    def _on_game_expired(self, gen: int):
        with self.lock:
            if gen != self.generation or self.phase != Phase.PLAYING:
                return
            self.remaining_time = 0
            self._stop_play()
            self.phase = Phase.LOST
            self._notify()

    def _on_settled(self, gen: int, positions: tuple[int, int]):
        with self.lock:
            if gen != self.generation or self.phase != Phase.PLAYING:
                return
            for pos in positions:
                if not self.board[pos].matched:
                    self.board[pos].revealed = False
            self.selection = []
            self.locked = False
            self._settle = None
            self._notify()

    def _stop_play(self):
        """Freeze the board: no more ticks, no pending flip-back."""
        self.locked = True
        if self._game_timer:
            self._game_timer.cancel()
        if self._settle:
            self._settle.cancel()
            self._settle = None

    # ── input ────────────────────────────────────────────────────────

    def on_tile_selected(self, position: int) -> bool:
        """Reveal a tile. Returns False when the click is ignored."""
        with self.lock:
            if self.phase != Phase.PLAYING or self.locked:
                return False
            if len(self.selection) >= 2:
                return False
            if not 0 <= position < len(self.board):
                return False
            tile = self.board[position]
            if tile.revealed or tile.matched:
                return False

            tile.revealed = True
            self.selection.append(position)
            if len(self.selection) == 2:
                self._resolve_selection()
            self._notify()
            return True

    def _resolve_selection(self):
        self.locked = True
        verdict = resolve(self.board, tuple(self.selection), self.config.match_award)

        if not verdict.matched:
            gen = self.generation
            self._settle = self.scheduler.call_later(
                self.config.settle_delay,
                lambda: self._on_settled(gen, verdict.positions),
            )
            return

        self.score += verdict.score_delta
        self.selection = []
        self.locked = False
        if verdict.board_cleared:
            self.bonus = self.remaining_time * self.config.time_bonus_multiplier
            self.score += self.bonus
            self._stop_play()
            self.phase = Phase.WON
