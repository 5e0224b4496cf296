from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

from .board import CardState, Icon, Position
from .deal import DEFAULT_ICONS, board_from_order, deal_board
from .state import GameState, Phase


class Outcome(str, Enum):
    IGNORED = 'ignored'
    REVEALED = 'revealed'
    MATCHED = 'matched'
    MISMATCHED = 'mismatched'
    WON = 'won'


@dataclass(frozen=True)
class SelectResult:
    """What a selection did, for the renderer to decide what to draw."""
    outcome: Outcome
    positions: Tuple[Position, ...]  # cards whose visual state changed
    phase: Phase
    move_count: int
    matched_count: int

    @property
    def changed(self) -> bool:
        return self.outcome is not Outcome.IGNORED


def new_game(
    icons: Iterable[Icon] = DEFAULT_ICONS,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    order: Optional[Sequence[Icon]] = None,
    generation: int = 0,
) -> GameState:
    """Deals a fresh game. ``order`` forces the board layout instead of shuffling."""
    board = board_from_order(order) if order is not None else deal_board(icons, seed=seed, rng=rng)
    return GameState(board=board, generation=generation)


def _result(state: GameState, outcome: Outcome, positions: Tuple[Position, ...]) -> SelectResult:
    return SelectResult(
        outcome=outcome,
        positions=positions,
        phase=state.phase,
        move_count=state.move_count,
        matched_count=state.matched_count,
    )


def can_select(state: GameState, position: Position) -> bool:
    """True when selecting ``position`` would change the state. Raises on invalid positions."""
    card = state.board.at(position)
    return len(state.selection) < 2 and card.state is CardState.HIDDEN


def select_card(state: GameState, position: Position) -> Tuple[GameState, SelectResult]:
    """Applies one card selection and returns the new state with the transition result."""
    if not can_select(state, position):
        return state, _result(state, Outcome.IGNORED, ())

    board = state.board.with_states([position], CardState.REVEALED)
    selection = state.selection + (position,)
    if len(selection) < 2:
        next_state = state.evolve(board=board, selection=selection)
        return next_state, _result(next_state, Outcome.REVEALED, (position,))

    first, second = selection
    move_count = state.move_count + 1
    if board.at(first).icon != board.at(second).icon:
        # Both stay face up until resolve_mismatch.
        next_state = state.evolve(board=board, selection=selection, move_count=move_count)
        return next_state, _result(next_state, Outcome.MISMATCHED, selection)

    next_state = state.evolve(
        board=board.with_states(selection, CardState.MATCHED),
        selection=(),
        matched_count=state.matched_count + 1,
        move_count=move_count,
    )
    outcome = Outcome.WON if next_state.is_won else Outcome.MATCHED
    return next_state, _result(next_state, outcome, selection)


def pending_mismatch(state: GameState) -> bool:
    return len(state.selection) == 2


def resolve_mismatch(state: GameState) -> GameState:
    """Flips a pending mismatched pair back face down. No-op when nothing is pending."""
    if not pending_mismatch(state):
        return state
    return state.evolve(board=state.board.with_states(state.selection, CardState.HIDDEN), selection=())
