from __future__ import annotations

# Facade module that re-exports Memory Match core functionality.
# The Flask app and tests import from here; single-responsibility modules
# live under memory_core/*.

import sys

from memory_core.board import Board, Card, CardState, Icon, Position
from memory_core.state import GameState, Phase
from memory_core.deal import (
    DEFAULT_ICONS,
    board_from_order,
    deal_board,
    shuffle_in_place,
    validate_icons,
)
from memory_core.moves import (
    Outcome,
    SelectResult,
    can_select,
    new_game,
    pending_mismatch,
    resolve_mismatch,
    select_card,
)
from memory_core.engine import MemoryGame, WinEvent
from memory_core.pacing import PacedGame, PendingTask, thread_timer_scheduler
from memory_core.assets import AssetResolver, CardFace, BACK_GLYPH, PLACEHOLDER_GLYPH
from memory_core.config import GameConfig, parse_icons, setup_logging


def main() -> None:
    # CLI driver delegated to memory_core.cli
    from memory_core.cli import main as _main
    sys.exit(_main())


if __name__ == '__main__':
    main()
