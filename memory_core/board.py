from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Tuple

Icon = str  # 'guitar', 'piano', ...
Position = int


class CardState(str, Enum):
    HIDDEN = 'hidden'
    REVEALED = 'revealed'
    MATCHED = 'matched'


@dataclass(frozen=True)
class Card:
    """A single card on the board: where it sits, what it shows and whether it is face up."""
    position: Position
    icon: Icon
    state: CardState = CardState.HIDDEN

    @property
    def face_up(self) -> bool:
        return self.state is not CardState.HIDDEN

    def with_state(self, state: CardState) -> 'Card':
        return replace(self, state=state)


@dataclass(frozen=True)
class Board:
    """Represents the dealt cards in board order. Length is fixed for the whole game."""
    cards: Tuple[Card, ...]

    @classmethod
    def from_icons(cls, icons: Iterable[Icon]) -> 'Board':
        """Builds an all-hidden board from icons already in board order."""
        return cls(tuple(Card(position=i, icon=icon) for i, icon in enumerate(icons)))

    def __len__(self) -> int:
        return len(self.cards)

    @property
    def pairs(self) -> int:
        return len(self.cards) // 2

    def check_position(self, position: Position) -> Position:
        """Validates a caller-supplied position. No wrap-around: negative indices are rejected."""
        if isinstance(position, bool) or not isinstance(position, int):
            raise TypeError(f'position must be an int, got {type(position).__name__}')
        if not 0 <= position < len(self.cards):
            raise IndexError(f'position {position} out of range 0..{len(self.cards) - 1}')
        return position

    def at(self, position: Position) -> Card:
        return self.cards[self.check_position(position)]

    def icons(self) -> Tuple[Icon, ...]:
        return tuple(card.icon for card in self.cards)

    def states(self) -> Tuple[CardState, ...]:
        return tuple(card.state for card in self.cards)

    def positions_in(self, state: CardState) -> List[Position]:
        return [card.position for card in self.cards if card.state is state]

    def with_states(self, positions: Iterable[Position], state: CardState) -> 'Board':
        """Returns a new board with the given positions moved to ``state``."""
        targets = set(positions)
        return Board(tuple(card.with_state(state) if card.position in targets else card for card in self.cards))

    def pretty(self, columns: int = 4, show_icons: bool = False) -> str:
        """Generates a human-readable grid. Hidden cards show their position unless ``show_icons``."""
        if columns <= 0:
            raise ValueError('columns must be positive')
        cell = max([len(str(len(self.cards) - 1))] + [len(c.icon) for c in self.cards]) + 2
        lines: List[str] = []
        for start in range(0, len(self.cards), columns):
            row: List[str] = []
            for card in self.cards[start:start + columns]:
                if card.state is CardState.MATCHED:
                    text = f'[{card.icon}]'
                elif card.state is CardState.REVEALED:
                    text = f'<{card.icon}>'
                elif show_icons:
                    text = f'({card.icon})'
                else:
                    text = str(card.position)
                row.append(text.center(cell))
            lines.append(' '.join(row).rstrip())
        return '\n'.join(lines)
