"""
Game configuration and logging setup.

Settings come from the environment so the Flask app and the CLI share the
same defaults. Delays are presentation pacing only; the engine works the
same with both set to zero.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from .board import Icon
from .deal import DEFAULT_ICONS, validate_icons

MISMATCH_DELAY_MS = 1000  # time a mismatched pair stays face up
WIN_DELAY_MS = 500  # pause before the win message so the last match registers

DEFAULT_STATIC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'static'))

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(module)s: %(message)s'


def _env_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f'{name} must be an integer, got {raw!r}') from None


def parse_icons(text: str) -> Tuple[Icon, ...]:
    """Parses a comma-separated icon list such as ``'guitar,piano,drum'``."""
    return tuple(validate_icons(part.strip() for part in text.split(',') if part.strip()))


@dataclass(frozen=True)
class GameConfig:
    icons: Tuple[Icon, ...] = DEFAULT_ICONS
    mismatch_delay_ms: int = MISMATCH_DELAY_MS
    win_delay_ms: int = WIN_DELAY_MS
    seed: Optional[int] = None
    log_level: str = 'INFO'
    static_dir: str = field(default=DEFAULT_STATIC_DIR)

    def __post_init__(self) -> None:
        if self.mismatch_delay_ms < 0 or self.win_delay_ms < 0:
            raise ValueError('delays must be non-negative')

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'GameConfig':
        env = os.environ if env is None else env
        icons_raw = env.get('MEMORY_ICONS')
        return cls(
            icons=parse_icons(icons_raw) if icons_raw else DEFAULT_ICONS,
            mismatch_delay_ms=_env_int(env, 'MEMORY_MISMATCH_DELAY_MS', MISMATCH_DELAY_MS),
            win_delay_ms=_env_int(env, 'MEMORY_WIN_DELAY_MS', WIN_DELAY_MS),
            seed=_env_int(env, 'MEMORY_SEED', None),
            log_level=env.get('MEMORY_LOG_LEVEL', 'INFO'),
            static_dir=env.get('MEMORY_STATIC_DIR') or DEFAULT_STATIC_DIR,
        )


def setup_logging(level: str = 'INFO') -> logging.Logger:
    """Configures the ``memory_core`` logger with a console handler."""
    lvl = getattr(logging, str(level).upper(), logging.INFO)
    logger = logging.getLogger('memory_core')
    logger.setLevel(lvl)
    logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setLevel(lvl)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    logger.addHandler(handler)
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    return logger
