from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .board import CardState, Icon, Position
from .deal import DEFAULT_ICONS
from .moves import Outcome, SelectResult, new_game, resolve_mismatch, select_card
from .state import GameState, Phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WinEvent:
    move_count: int
    generation: int


WinListener = Callable[[WinEvent], None]


class MemoryGame:
    """
    Owns the current GameState and is the only place it changes.

    Input events become ``select_card`` calls returning a SelectResult; the
    caller decides when to call ``resolve_mismatch``. Starting a new game
    bumps ``generation`` so callbacks scheduled for an earlier game can be
    recognised and dropped.
    """

    def __init__(
        self,
        icons: Optional[Iterable[Icon]] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        order: Optional[Sequence[Icon]] = None,
    ) -> None:
        self._rng = rng or random.Random(seed)
        self._icons: Tuple[Icon, ...] = DEFAULT_ICONS
        self._listeners: List[WinListener] = []
        self._generation = 0
        self._state: GameState
        self.new_game(icons, order=order)

    # ---------- commands ----------

    def new_game(self, icons: Optional[Iterable[Icon]] = None, order: Optional[Sequence[Icon]] = None) -> GameState:
        """
        Discards the current game and deals a new one. Icons default to the previous set.

        With ``order`` the board is laid out as given; ``icons``, when also
        passed, must name exactly the icons of that order.
        """
        icon_set = tuple(icons) if icons is not None else self._icons
        if order is not None and icons is not None and set(icon_set) != set(order):
            raise ValueError(f'icons {sorted(set(icon_set))} do not match board order {sorted(set(order))}')
        state = new_game(icon_set, rng=self._rng, order=order, generation=self._generation + 1)
        # Only commit once dealing succeeded so a bad icon set leaves the old game intact.
        self._icons = icon_set if order is None else tuple(dict.fromkeys(order))
        self._generation = state.generation
        self._state = state
        logger.info('new game %d with %d pairs', state.generation, state.pairs)
        return state

    def select_card(self, position: Position) -> SelectResult:
        next_state, result = select_card(self._state, position)
        self._state = next_state
        if result.outcome is Outcome.IGNORED:
            logger.debug('ignored selection of %d in phase %s', position, next_state.phase.value)
        elif result.outcome is Outcome.WON:
            self._notify_win(WinEvent(move_count=next_state.move_count, generation=next_state.generation))
        return result

    def resolve_mismatch(self, generation: Optional[int] = None) -> bool:
        """Hides a pending mismatched pair. Returns False when stale or nothing is pending."""
        if generation is not None and generation != self._generation:
            logger.debug('dropping resolve for stale game %d (current %d)', generation, self._generation)
            return False
        before = self._state
        self._state = resolve_mismatch(before)
        return self._state is not before

    def on_win(self, listener: WinListener) -> Callable[[], None]:
        """Registers a win listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify_win(self, event: WinEvent) -> None:
        logger.info('game %d won in %d moves', event.generation, event.move_count)
        for listener in list(self._listeners):
            listener(event)

    # ---------- queries ----------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def icons(self) -> Tuple[Icon, ...]:
        return self._icons

    @property
    def move_count(self) -> int:
        return self._state.move_count

    @property
    def matched_count(self) -> int:
        return self._state.matched_count

    @property
    def phase(self) -> Phase:
        return self._state.phase

    def card_states(self) -> Tuple[CardState, ...]:
        return self._state.board.states()

    def pretty(self, columns: int = 4, show_icons: bool = False) -> str:
        return self._state.board.pretty(columns=columns, show_icons=show_icons)
