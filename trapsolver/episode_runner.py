"""
Episode Runner Module for the Circuit Trap Solver

Drives repeated puzzle episodes against an oracle: open the puzzle, let
the strategy pick moves, submit them, integrate the outcomes, then rest
before the next episode. Everything runs on the calling thread.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .difficulty import DifficultyHint
from .oracle import InteractionHandle, Oracle, OracleError, OracleTimeout, SubmitResult
from .solver import EpisodeStatus, Move, Outcome, SolverStrategy, format_moves


# Configure module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EpisodeTiming:
    """
    Delays and bounded waits, in seconds.

    Attributes:
        cooldown_sec: Idle time between episodes
        fail_wait_sec: Wait after a failed episode (trap reset animation)
        success_wait_sec: Wait after a solve (new trap being armed)
        unavailable_retry_sec: Wait before retrying a failed open()
        open_timeout_sec: Bounded wait for open()
        submit_timeout_sec: Bounded wait for each submit()
    """
    cooldown_sec: float = 0.25
    fail_wait_sec: float = 3.5
    success_wait_sec: float = 8.5
    unavailable_retry_sec: float = 3.0
    open_timeout_sec: float = 5.0
    submit_timeout_sec: float = 1.0

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "EpisodeTiming":
        """Build timing from the "timing" section of the settings (milliseconds)."""
        timing = settings.get("timing", {})
        defaults = cls()
        return cls(
            cooldown_sec=timing.get("cooldown_ms", defaults.cooldown_sec * 1000) / 1000,
            fail_wait_sec=timing.get("fail_wait_ms", defaults.fail_wait_sec * 1000) / 1000,
            success_wait_sec=timing.get("success_wait_ms", defaults.success_wait_sec * 1000) / 1000,
            unavailable_retry_sec=timing.get("unavailable_retry_ms", defaults.unavailable_retry_sec * 1000) / 1000,
            open_timeout_sec=timing.get("open_timeout_ms", defaults.open_timeout_sec * 1000) / 1000,
            submit_timeout_sec=timing.get("submit_timeout_ms", defaults.submit_timeout_sec * 1000) / 1000,
        )

    @classmethod
    def instant(cls) -> "EpisodeTiming":
        """No delays between episodes (simulators and tests)."""
        return cls(cooldown_sec=0.0, fail_wait_sec=0.0, success_wait_sec=0.0, unavailable_retry_sec=0.0)


@dataclass
class EpisodeReport:
    """
    Result of one episode.

    Attributes:
        status: Terminal status (SOLVED, REJECTED or EXHAUSTED)
        moves: Moves submitted, in order
        outcomes: Oracle outcome for each submitted move
        duration_ms: Wall time of the episode
    """
    status: EpisodeStatus
    moves: List[Move] = field(default_factory=list)
    outcomes: List[Outcome] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def interaction_lost(self) -> bool:
        return bool(self.outcomes) and self.outcomes[-1] is Outcome.INTERACTION_LOST

    @property
    def submitted(self) -> int:
        return len(self.moves)


@dataclass
class SessionStats:
    """Cumulative tallies for the running process."""
    episodes: int = 0
    solved: int = 0
    rejected: int = 0
    lost: int = 0
    exhausted: int = 0
    unavailable: int = 0
    errors: int = 0  # episodes aborted by an exception
    moves_submitted: int = 0

    @property
    def failed(self) -> int:
        """Episodes that ended without a solve."""
        return self.rejected + self.lost + self.exhausted

    @property
    def success_rate(self) -> float:
        """Solved episodes as a percentage of finished episodes."""
        total = self.solved + self.failed
        return 100.0 * self.solved / total if total else 0.0

    def record(self, report: EpisodeReport) -> None:
        self.episodes += 1
        self.moves_submitted += report.submitted
        if report.status is EpisodeStatus.SOLVED:
            self.solved += 1
        elif report.status is EpisodeStatus.EXHAUSTED:
            self.exhausted += 1
        elif report.interaction_lost:
            self.lost += 1
        else:
            self.rejected += 1

    def summary(self) -> str:
        return f"Solved={self.solved} Failed={self.failed} ({round(self.success_rate)}% success)"


class EpisodeRunner:
    """
    Episode loop for one oracle and one strategy.

    The strategy's belief store lives as long as the runner; attempt state
    is rebuilt at every episode by the strategy itself.

    Example:
        runner = EpisodeRunner(oracle, create_strategy("library"),
                               hint=SkillDifficultyHint(85.0))
        runner.run(max_episodes=20)
        print(runner.stats.summary())
    """

    def __init__(self, oracle: Oracle, strategy: SolverStrategy,
                 hint: Optional[DifficultyHint] = None,
                 timing: Optional[EpisodeTiming] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the runner.

        Args:
            oracle: Puzzle oracle
            strategy: Solving strategy (owns the belief store)
            hint: Difficulty hint passed to every episode
            timing: Delays and timeouts (default: game timings)
            sleep: Sleep function, injectable for tests
        """
        self.oracle = oracle
        self.strategy = strategy
        self.hint = hint
        self.timing = timing or EpisodeTiming()
        self._sleep = sleep
        self._running = False

        self.stats = SessionStats()
        self.last_report: Optional[EpisodeReport] = None

    def run(self, max_episodes: Optional[int] = None) -> SessionStats:
        """
        Run episodes until stopped.

        Args:
            max_episodes: Stop after this many finished episodes (None: run
                until request_stop() or interruption)

        Returns:
            Session statistics
        """
        self._running = True
        logger.info(f"Episode runner started (strategy={self.strategy.name}, oracle={self.oracle.name})")

        while self._running:
            if max_episodes is not None and self.stats.episodes >= max_episodes:
                break

            try:
                self.run_episode()
            except Exception:
                logger.exception("Error in episode cycle")

            logger.debug("Cooling down...")
            self._sleep(self.timing.cooldown_sec)

        self._running = False
        logger.info(f"Episode runner stopped: {self.stats.summary()}")
        return self.stats

    def request_stop(self) -> None:
        """
        Request the loop to stop.

        The current episode always runs to completion first.
        """
        logger.info("Stop requested")
        self._running = False

    def is_running(self) -> bool:
        return self._running

    def run_episode(self) -> Optional[EpisodeReport]:
        """
        Run a single episode from open() to a terminal status.

        Returns:
            EpisodeReport, or None if the oracle could not be opened
        """
        handle = self._open()
        if handle is None:
            self.stats.unavailable += 1
            logger.warning("Puzzle not available, retrying later")
            self._sleep(self.timing.unavailable_retry_sec)
            return None

        start = time.perf_counter()
        self.strategy.begin_episode(self.hint)
        report = EpisodeReport(status=EpisodeStatus.CONTINUE)

        status = EpisodeStatus.CONTINUE
        try:
            while not status.is_terminal:
                move = self.strategy.select_move()
                if move is None:
                    status = EpisodeStatus.EXHAUSTED
                    break

                result = self._submit(handle, move)
                report.moves.append(move)
                report.outcomes.append(result.outcome)
                handle = result.handle
                status = self.strategy.integrate(move, result.outcome)
        except Exception:
            self.stats.errors += 1
            self.stats.moves_submitted += report.submitted
            raise
        finally:
            self.oracle.close(handle)

        report.status = status
        report.duration_ms = (time.perf_counter() - start) * 1000
        self.stats.record(report)
        self.last_report = report

        logger.info(
            f"Episode {self.stats.episodes}: {status.name} after {report.submitted} move(s) "
            f"[{format_moves(report.moves)}]"
        )
        logger.info(self.stats.summary())

        if status is EpisodeStatus.SOLVED:
            self._sleep(self.timing.success_wait_sec)
        else:
            self._sleep(self.timing.fail_wait_sec)
        return report

    def _open(self) -> Optional[InteractionHandle]:
        try:
            return self.oracle.open(self.timing.open_timeout_sec)
        except OracleError as e:
            logger.warning(f"Oracle open failed: {e}")
            return None

    def _submit(self, handle: Optional[InteractionHandle], move: Move) -> SubmitResult:
        if handle is None:
            return SubmitResult(Outcome.INTERACTION_LOST, None, "No open puzzle")

        logger.debug(f"-> {move}")
        try:
            return self.oracle.submit(handle, move, self.timing.submit_timeout_sec)
        except OracleTimeout as e:
            logger.warning(f"Submit timed out: {e}")
        except OracleError as e:
            logger.warning(f"Submit failed: {e}")
        return SubmitResult(Outcome.INTERACTION_LOST, None)
