from __future__ import annotations

import argparse
import time
from typing import Callable, List, Optional

from .config import GameConfig, parse_icons, setup_logging
from .engine import MemoryGame, WinEvent
from .moves import Outcome


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Memory Match in the terminal')
    parser.add_argument('--pairs', type=int, default=None, help='Play with the first N icons of the icon set')
    parser.add_argument('--icons', default=None, help='Comma-separated icon set (default: MEMORY_ICONS or built-in set)')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the deal')
    parser.add_argument('--columns', type=int, default=4, help='Cards per row when printing the board')
    parser.add_argument('--mismatch-delay-ms', type=int, default=None, help='How long a mismatched pair stays face up')
    parser.add_argument('--show-icons', action='store_true', help='Print hidden icons too (debugging)')
    parser.add_argument('--log-level', default=None, help='Logging level (DEBUG, INFO, WARNING)')
    return parser


def main(
    argv: Optional[List[str]] = None,
    input_fn: Callable[[str], str] = input,
    sleep_fn: Callable[[float], None] = time.sleep,
) -> int:
    args = build_arg_parser().parse_args(argv)
    config = GameConfig.from_env()
    setup_logging(args.log_level or config.log_level)

    if args.columns <= 0:
        print('error: --columns must be positive')
        return 2
    icons = parse_icons(args.icons) if args.icons else config.icons
    if args.pairs is not None:
        if not 1 <= args.pairs <= len(icons):
            print(f'error: --pairs must be between 1 and {len(icons)}')
            return 2
        icons = icons[:args.pairs]
    delay_ms = args.mismatch_delay_ms if args.mismatch_delay_ms is not None else config.mismatch_delay_ms
    seed = args.seed if args.seed is not None else config.seed

    game = MemoryGame(icons, seed=seed)
    wins: List[WinEvent] = []
    game.on_win(wins.append)

    def show() -> None:
        print(game.pretty(columns=args.columns, show_icons=args.show_icons))
        print(f'Moves: {game.move_count}')

    def prompt_position() -> Optional[int]:
        while True:
            try:
                text = input_fn(f'Pick a card 0-{len(game.state.board) - 1} (r = reset, q = quit): ').strip().lower()
            except EOFError:
                return None
            if text in ('q', 'quit'):
                return None
            if text in ('r', 'reset'):
                game.new_game()
                show()
                continue
            try:
                position = int(text)
                game.state.board.check_position(position)
            except (ValueError, IndexError):
                print('Not a card position. Try again.')
                continue
            return position

    print(f'Find the {game.state.pairs} pairs.')
    show()
    while not wins:
        position = prompt_position()
        if position is None:
            print('Bye.')
            return 1
        result = game.select_card(position)
        if result.outcome is Outcome.IGNORED:
            print('That card is already face up.')
            continue
        show()
        if result.outcome is Outcome.MATCHED:
            print('Match!')
        elif result.outcome is Outcome.MISMATCHED:
            print('No match.')
            sleep_fn(delay_ms / 1000.0)
            game.resolve_mismatch(game.generation)
            show()

    print(f'You completed the game in {wins[0].move_count} moves!')
    return 0
