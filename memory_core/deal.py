from __future__ import annotations

import random
from collections import Counter
from typing import Iterable, List, MutableSequence, Optional, Sequence, Tuple, TypeVar

from .board import Board, Icon

T = TypeVar('T')

# Default icon set of the birthday edition (8 pairs, 16 cards).
DEFAULT_ICONS: Tuple[Icon, ...] = (
    'guitar', 'piano', 'drum', 'sax', 'note', 'mic', 'headphone', 'vinyl',
)


def shuffle_in_place(items: MutableSequence[T], rng: Optional[random.Random] = None) -> None:
    """Fisher-Yates: walk from the last index down to 1, swapping with a uniform index in [0, i]."""
    rng = rng or random.Random()
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def validate_icons(icons: Iterable[Icon]) -> List[Icon]:
    """Checks that the icon set is non-empty and free of duplicates."""
    if isinstance(icons, str):
        raise ValueError('icons must be a collection of identifiers, not a single string')
    icon_list = list(icons)
    if not icon_list:
        raise ValueError('Invalid icon set: expected at least one icon')
    dupes = sorted(str(icon) for icon, n in Counter(icon_list).items() if n > 1)
    if dupes:
        raise ValueError(f'Invalid icon set: duplicate icons {dupes}')
    return icon_list


def deal_board(
    icons: Iterable[Icon] = DEFAULT_ICONS,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Board:
    """Creates and deals a board holding each icon exactly twice, shuffled uniformly."""
    icon_list = validate_icons(icons)
    rng = rng or random.Random(seed)
    deck: List[Icon] = icon_list + icon_list
    shuffle_in_place(deck, rng)
    return Board.from_icons(deck)


def board_from_order(order: Sequence[Icon]) -> Board:
    """Builds a board from an explicit card order. Every icon must appear exactly twice."""
    if isinstance(order, str):
        raise ValueError('order must be a sequence of icons, not a single string')
    if not order:
        raise ValueError('Invalid board order: expected at least one pair')
    unpaired = sorted(str(icon) for icon, n in Counter(order).items() if n != 2)
    if unpaired:
        raise ValueError(f'Invalid board order: icons not appearing exactly twice {unpaired}')
    return Board.from_icons(order)
