"""High level round orchestration: commands, pacing timers and notifications."""
from __future__ import annotations

import json
import logging
import random
import threading
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional

from .cards import Deck
from .errors import EmptyDeckError, GameError, IllegalActionError, InsufficientFundsForSplitError, InvalidBetError
from .game import (
    ACCEPT_SPLIT,
    BANKRUPT_MESSAGE,
    DECLINE_SPLIT,
    HIT,
    PLACE_BET,
    STAND,
    Phase,
    RoundState,
)
from .scheduler import Scheduler, ThreadingScheduler, TimerHandle
from .snapshot import TableSnapshot, take_snapshot

LOGGER = logging.getLogger(__name__)

DATA_PATH = Path(__file__).resolve().parent.parent / "data"

Listener = Callable[[TableSnapshot], None]


@dataclass
class GameConfig:
    name: str = "Blackjack Table"
    starting_balance: int = 2000
    dealer_tick_seconds: float = 1.0
    result_delay_seconds: float = 2.0
    seed: Optional[int] = None

    def validate(self) -> None:
        if self.starting_balance < 1:
            raise ValueError("starting_balance must be at least 1")
        if self.dealer_tick_seconds < 0 or self.result_delay_seconds < 0:
            raise ValueError("delays must not be negative")


def load_game_config(path: Path | str) -> GameConfig:
    """Read a table configuration from a JSON file."""

    data = json.loads(Path(path).read_text())
    defaults = GameConfig()
    config = GameConfig(
        name=data.get("table_name", defaults.name),
        starting_balance=int(data.get("starting_balance", defaults.starting_balance)),
        dealer_tick_seconds=float(data.get("dealer_tick_seconds", defaults.dealer_tick_seconds)),
        result_delay_seconds=float(data.get("result_delay_seconds", defaults.result_delay_seconds)),
        seed=data.get("seed"),
    )
    config.validate()
    return config


@dataclass(frozen=True)
class ActionResult:
    accepted: bool
    message: str = ""
    error: Optional[GameError] = None


class RoundManager:
    """Owns the round state and serializes every change to it.

    Commands and timer callbacks all run under one re-entrant lock. Timers
    are tagged with the generation of the round that scheduled them and do
    nothing once that round has been replaced.
    """

    def __init__(
        self,
        config: GameConfig,
        scheduler: Optional[Scheduler] = None,
        *,
        deck_factory: Optional[Callable[[], Deck]] = None,
    ) -> None:
        config.validate()
        self.config = config
        self.scheduler = scheduler or ThreadingScheduler()
        self._rng = random.Random(config.seed)
        self._deck_factory = deck_factory or (lambda: Deck(rng=self._rng))
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._timers: List[TimerHandle] = []
        self._dealer_timer: Optional[TimerHandle] = None
        self._reset_timer: Optional[TimerHandle] = None
        self._message_timer: Optional[TimerHandle] = None
        self._generation = 0
        self._closed = False
        self.state = RoundState(balance=config.starting_balance)
        self._start_round()

    # -- queries -----------------------------------------------------------

    def snapshot(self) -> TableSnapshot:
        with self._lock:
            return take_snapshot(self.state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for snapshots; returns a function that unregisters it."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # -- commands ----------------------------------------------------------

    def place_bet(self, amount: int) -> ActionResult:
        return self._perform(PLACE_BET, lambda: self.state.place_bet(amount))

    def hit(self) -> ActionResult:
        return self._perform(HIT, lambda: self.state.hit())

    def stand(self) -> ActionResult:
        return self._perform(STAND, lambda: self.state.stand())

    def accept_split(self) -> ActionResult:
        return self._perform(ACCEPT_SPLIT, lambda: self.state.accept_split())

    def decline_split(self) -> ActionResult:
        return self._perform(DECLINE_SPLIT, lambda: self.state.decline_split())

    def reset_round(self) -> None:
        """Abandon the current round, refunding open bets, and deal a new one."""

        with self._lock:
            if self._closed:
                return
            if self.state.phase != Phase.BETTING:
                self.state.abort_round("Round reset")
            self._start_round()
            self._notify()

    def close(self) -> None:
        """Cancel every pending timer; the manager ignores all later input."""

        with self._lock:
            self._closed = True
            self._cancel_timers()
            LOGGER.debug("Table %r closed", self.config.name)

    # -- internals ---------------------------------------------------------

    def _perform(self, action: str, operation: Callable[[], None]) -> ActionResult:
        with self._lock:
            if self._closed:
                return ActionResult(False, "The table is closed", IllegalActionError("The table is closed"))
            try:
                operation()
            except EmptyDeckError as exc:
                self._abort(exc)
                return ActionResult(False, str(exc), exc)
            except InsufficientFundsForSplitError as exc:
                LOGGER.info("Split refused: %s", exc)
                self.state.decline_split()
                self._flash(str(exc))
                self._after_transition()
                return ActionResult(False, str(exc), exc)
            except InvalidBetError as exc:
                LOGGER.info("Rejected bet: %s", exc)
                self._flash(str(exc))
                self._notify()
                return ActionResult(False, str(exc), exc)
            except IllegalActionError as exc:
                LOGGER.info("Rejected %s: %s", action, exc)
                return ActionResult(False, str(exc), exc)
            LOGGER.debug("%s accepted, phase now %s", action, self.state.phase.name)
            self._after_transition()
            return ActionResult(True, self.state.message)

    def _after_transition(self) -> None:
        phase = self.state.phase
        if phase == Phase.DEALER_TURN and self._dealer_timer is None:
            self._dealer_timer = self._schedule(self.config.dealer_tick_seconds, self._dealer_tick)
        elif phase == Phase.SETTLEMENT and self._reset_timer is None:
            self._reset_timer = self._schedule(self.config.result_delay_seconds, self._next_round)
        self._notify()

    def _dealer_tick(self) -> None:
        self._dealer_timer = None
        try:
            drew = self.state.dealer_step()
        except EmptyDeckError as exc:
            self._abort(exc)
            return
        if drew:
            LOGGER.debug("Dealer draws to %d", self.state.dealer_total)
        else:
            results = self.state.settle()
            LOGGER.info(
                "Round %d settled against dealer %d: %s",
                self.state.round_number,
                self.state.dealer_total,
                ", ".join(result.describe() for result in results),
            )
        self._after_transition()

    def _next_round(self) -> None:
        self._reset_timer = None
        self._start_round()
        self._notify()

    def _start_round(self) -> None:
        self._cancel_timers()
        self._generation += 1
        try:
            self.state.new_round(self._deck_factory())
        except EmptyDeckError as exc:
            LOGGER.error("Deck factory produced an unusable deck (%s); using a fresh deck", exc)
            self.state.new_round(Deck(rng=self._rng))
        if self.state.is_bankrupt:
            LOGGER.warning("Round %d: player is bankrupt", self.state.round_number)
        else:
            LOGGER.debug("Round %d started with balance %d", self.state.round_number, self.state.balance)

    def _abort(self, exc: EmptyDeckError) -> None:
        LOGGER.error("Aborting round %d: %s", self.state.round_number, exc)
        self.state.abort_round(f"Round aborted: {exc}")
        if self._dealer_timer is not None:
            self._dealer_timer.cancel()
            self._dealer_timer = None
        self._after_transition()

    def _flash(self, text: str) -> None:
        """Show ``text`` for the result delay, then fall back to the resting message."""

        self.state.message = text
        if self._message_timer is not None:
            self._message_timer.cancel()
        self._message_timer = self._schedule(self.config.result_delay_seconds, partial(self._clear_message, text))

    def _clear_message(self, text: str) -> None:
        self._message_timer = None
        if self.state.message != text:
            return
        self.state.message = BANKRUPT_MESSAGE if self.state.is_bankrupt else ""
        self._notify()

    def _schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = self.scheduler.call_later(delay, partial(self._fire, self._generation, callback))
        self._timers.append(handle)
        return handle

    def _fire(self, generation: int, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._closed or generation != self._generation:
                LOGGER.debug("Ignoring timer from superseded round")
                return
            callback()

    def _cancel_timers(self) -> None:
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()
        self._dealer_timer = None
        self._reset_timer = None
        self._message_timer = None

    def _notify(self) -> None:
        snapshot = take_snapshot(self.state)
        for listener in list(self._listeners):
            listener(snapshot)


def create_default_game(scheduler: Optional[Scheduler] = None) -> RoundManager:
    default_config_path = DATA_PATH / "table.json"
    if default_config_path.exists():
        return create_game_from_file(default_config_path, scheduler)
    return RoundManager(GameConfig(), scheduler)


def create_game_from_file(path: Path | str, scheduler: Optional[Scheduler] = None) -> RoundManager:
    return RoundManager(load_game_config(path), scheduler)


__all__ = [
    "RoundManager",
    "GameConfig",
    "ActionResult",
    "load_game_config",
    "create_default_game",
    "create_game_from_file",
]
