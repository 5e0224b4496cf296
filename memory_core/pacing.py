from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Protocol, Sequence

from .board import Icon, Position
from .engine import MemoryGame, WinEvent
from .moves import Outcome, SelectResult
from .state import GameState

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> Any: ...


Scheduler = Callable[[float, Callable[[], None]], Cancellable]


def thread_timer_scheduler(delay: float, callback: Callable[[], None]) -> Cancellable:
    """Default scheduler: a daemon threading.Timer."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


@dataclass
class PendingTask:
    kind: str  # 'resolve' or 'announce'
    generation: int
    handle: Optional[Cancellable] = None
    done: bool = False


@dataclass
class PacedGame:
    """
    Adds presentation pacing on top of MemoryGame.

    A mismatch is flipped back ``mismatch_delay_ms`` after it happens and a
    win is announced ``win_delay_ms`` after the last match. Every task is
    tagged with the game generation it was scheduled for; ``new_game``
    cancels outstanding tasks and a task that still fires for an older
    generation does nothing.
    """
    game: MemoryGame
    mismatch_delay_ms: int = 1000
    win_delay_ms: int = 500
    scheduler: Scheduler = thread_timer_scheduler
    on_announce: Optional[Callable[[WinEvent], None]] = None
    on_resolved: Optional[Callable[[GameState], None]] = None
    _pending: List[PendingTask] = field(default_factory=list, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.mismatch_delay_ms < 0 or self.win_delay_ms < 0:
            raise ValueError('delays must be non-negative')
        self.game.on_win(self._schedule_announce)

    def new_game(self, icons: Optional[Iterable[Icon]] = None, order: Optional[Sequence[Icon]] = None) -> GameState:
        with self._lock:
            self.cancel_pending()
            return self.game.new_game(icons, order=order)

    def select_card(self, position: Position) -> SelectResult:
        with self._lock:
            result = self.game.select_card(position)
            if result.outcome is Outcome.MISMATCHED:
                self._schedule('resolve', self.mismatch_delay_ms, self._fire_resolve)
            return result

    def resolve_now(self) -> bool:
        """Resolves a pending mismatch without waiting for its timer."""
        with self._lock:
            self._drop_kind('resolve')
            return self.game.resolve_mismatch(self.game.generation)

    @property
    def pending(self) -> List[PendingTask]:
        return [task for task in self._pending if not task.done]

    def cancel_pending(self) -> None:
        for task in self._pending:
            if not task.done and task.handle is not None:
                task.handle.cancel()
            task.done = True
        self._pending.clear()

    # ---------- internals ----------

    def _schedule(self, kind: str, delay_ms: int, fire: Callable[[PendingTask], None]) -> PendingTask:
        task = PendingTask(kind=kind, generation=self.game.generation)
        self._pending.append(task)
        task.handle = self.scheduler(delay_ms / 1000.0, lambda: fire(task))
        return task

    def _schedule_announce(self, event: WinEvent) -> None:
        self._schedule('announce', self.win_delay_ms, lambda task: self._fire_announce(task, event))

    def _drop_kind(self, kind: str) -> None:
        for task in self._pending:
            if task.kind == kind and not task.done:
                if task.handle is not None:
                    task.handle.cancel()
                task.done = True
        self._pending = [task for task in self._pending if not task.done]

    def _claim(self, task: PendingTask) -> bool:
        if task.done:
            return False
        task.done = True
        if task in self._pending:
            self._pending.remove(task)
        if task.generation != self.game.generation:
            logger.debug('stale %s task for game %d ignored', task.kind, task.generation)
            return False
        return True

    def _fire_resolve(self, task: PendingTask) -> None:
        with self._lock:
            if not self._claim(task):
                return
            if self.game.resolve_mismatch(task.generation) and self.on_resolved:
                self.on_resolved(self.game.state)

    def _fire_announce(self, task: PendingTask, event: WinEvent) -> None:
        with self._lock:
            if not self._claim(task):
                return
            if self.on_announce:
                self.on_announce(event)
