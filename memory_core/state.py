from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from .board import Board, CardState, Position


class Phase(str, Enum):
    IDLE = 'idle'
    ONE_REVEALED = 'one_revealed'
    EVALUATING = 'evaluating'
    WON = 'won'


@dataclass(frozen=True)
class GameState:
    """Represents the dynamic state of one game: the board, the cards under evaluation and the counters."""
    board: Board
    selection: Tuple[Position, ...] = ()  # 0..2 positions, in selection order
    matched_count: int = 0
    move_count: int = 0
    generation: int = 0  # identifies the game; delayed callbacks carry it

    @property
    def pairs(self) -> int:
        return self.board.pairs

    @property
    def is_won(self) -> bool:
        return self.matched_count == self.pairs

    @property
    def phase(self) -> Phase:
        if self.is_won:
            return Phase.WON
        if len(self.selection) == 2:
            return Phase.EVALUATING
        if len(self.selection) == 1:
            return Phase.ONE_REVEALED
        return Phase.IDLE

    def card_state(self, position: Position) -> CardState:
        return self.board.at(position).state

    def evolve(self, **changes) -> 'GameState':
        return replace(self, **changes)
