"""Countdown state machine.

Pure transitions over an explicit CycleState value; the async driver in
``cycle_predictor.cycle.runner`` owns the timer and the side effects.

    IDLE --(value in firing window)--> FIRING --(firing done)--> FIRED
      ^                                                            |
      +------------(rollover, or value <= EARLY_RESET_AT)----------+

The consecutive read-error counter runs alongside the phase.
"""

from dataclasses import dataclass, replace
from enum import Enum

from cycle_predictor.config import Settings
from cycle_predictor.errors import InvalidCountdownValue


class Phase(str, Enum):
    IDLE = "idle"
    FIRING = "firing"
    FIRED = "fired"


@dataclass(frozen=True)
class CycleState:
    phase: Phase = Phase.IDLE
    last_seconds: int | None = None
    error_count: int = 0
    last_error_at: float | None = None
    last_reset_at: float | None = None


@dataclass(frozen=True)
class TickResult:
    state: CycleState
    fire: bool = False
    refresh: bool = False
    rollover: bool = False


def validate_countdown(seconds, settings: Settings) -> int:
    """Return the reading as an int or raise InvalidCountdownValue."""
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise InvalidCountdownValue(f"countdown is not an integer: {seconds!r}")
    if not 0 <= seconds <= settings.COUNTDOWN_MAX:
        raise InvalidCountdownValue(
            f"countdown {seconds} outside [0, {settings.COUNTDOWN_MAX}]"
        )
    return seconds


def in_firing_window(seconds: int, settings: Settings) -> bool:
    return settings.FIRE_WINDOW_LOW <= seconds <= settings.FIRE_WINDOW_HIGH


def is_rollover(last_seconds: int | None, seconds: int, settings: Settings) -> bool:
    return (
        last_seconds is not None
        and last_seconds <= settings.ROLLOVER_FLOOR
        and seconds > settings.ROLLOVER_THRESHOLD
    )


def decay_errors(state: CycleState, now: float, settings: Settings) -> CycleState:
    """Forget an old error burst after ERROR_DECAY_SECONDS without errors."""
    if (
        state.error_count
        and state.last_error_at is not None
        and now - state.last_error_at >= settings.ERROR_DECAY_SECONDS
    ):
        return replace(state, error_count=0)
    return state


def on_reading(
    state: CycleState,
    seconds: int,
    now: float,
    settings: Settings,
    in_flight: bool = False,
) -> TickResult:
    """Advance on a valid countdown reading."""
    state = decay_errors(state, now, settings)
    rollover = is_rollover(state.last_seconds, seconds, settings)

    if seconds != state.last_seconds:
        # The source is still advancing
        state = replace(state, last_seconds=seconds, error_count=0)

    if rollover:
        state = replace(state, phase=Phase.IDLE, error_count=0, last_reset_at=now)

    fire = False
    if state.phase is Phase.IDLE and not in_flight and in_firing_window(seconds, settings):
        state = replace(state, phase=Phase.FIRING)
        fire = True

    if seconds <= settings.EARLY_RESET_AT and state.phase is Phase.FIRED:
        state = replace(state, phase=Phase.IDLE, last_reset_at=now)

    return TickResult(state=state, fire=fire, rollover=rollover)


def on_read_error(state: CycleState, now: float, settings: Settings) -> TickResult:
    """Count a failed or invalid read; request a source refresh at the threshold."""
    state = decay_errors(state, now, settings)
    state = replace(state, error_count=state.error_count + 1, last_error_at=now)
    if state.error_count >= settings.ERROR_THRESHOLD:
        return TickResult(state=replace(state, error_count=0), refresh=True)
    return TickResult(state=state)


def on_fire_complete(state: CycleState) -> CycleState:
    """FIRING -> FIRED whether the firing succeeded or not."""
    if state.phase is Phase.FIRING:
        return replace(state, phase=Phase.FIRED)
    return state
