"""Latest-value-wins debouncing for scenario recomputation."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar

from analytics.scenario import calculate_scenario
from config import get_settings
from core.models import BaselineMetrics, CalculatedMetrics, ScenarioFactors

__all__ = ["Debouncer", "DebouncedScenario"]

T = TypeVar("T")


class _Timer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], _Timer]


def _thread_timer(interval: float, function: Callable[[], None]) -> _Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class Debouncer(Generic[T]):
    """Defer ``callback`` until submissions have been quiet for ``wait_seconds``.

    Only the most recent value is kept; each :meth:`submit` replaces the
    pending value and restarts the quiescence window.
    """

    def __init__(
        self,
        callback: Callable[[T], Any],
        wait_seconds: float,
        *,
        timer_factory: TimerFactory = _thread_timer,
    ) -> None:
        if wait_seconds < 0:
            raise ValueError("wait_seconds must not be negative")
        self._callback = callback
        self._wait = wait_seconds
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Optional[_Timer] = None
        self._pending: Optional[tuple[T]] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def submit(self, value: T) -> None:
        with self._lock:
            self._pending = (value,)
            self._generation += 1
            generation = self._generation
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._timer_factory(self._wait, lambda: self._fire(generation))
            self._timer.start()

    def flush(self) -> bool:
        """Run the callback now if a value is pending; return whether it ran."""

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            slot, self._pending = self._pending, None
        if slot is None:
            return False
        self._callback(slot[0])
        return True

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A newer submit superseded this timer.
            if generation != self._generation or self._pending is None:
                return
            slot, self._pending = self._pending, None
            self._timer = None
        self._callback(slot[0])


class DebouncedScenario:
    """Keep a scenario result current while factors change rapidly."""

    def __init__(
        self,
        baseline: BaselineMetrics,
        *,
        wait_seconds: Optional[float] = None,
        on_result: Optional[Callable[[CalculatedMetrics], Any]] = None,
        timer_factory: TimerFactory = _thread_timer,
    ) -> None:
        if wait_seconds is None:
            wait_seconds = get_settings().scenario_debounce_seconds
        self.baseline = baseline
        self._factors = ScenarioFactors()
        self._result = CalculatedMetrics.unchanged(baseline)
        self._on_result = on_result
        self._lock = threading.Lock()
        self._debouncer: Debouncer[ScenarioFactors] = Debouncer(
            self._recompute, wait_seconds, timer_factory=timer_factory
        )

    @property
    def factors(self) -> ScenarioFactors:
        with self._lock:
            return self._factors

    @property
    def result(self) -> CalculatedMetrics:
        with self._lock:
            return self._result

    def submit(self, factors: ScenarioFactors) -> None:
        with self._lock:
            self._factors = factors
        self._debouncer.submit(factors)

    def update(self, **changes: float) -> ScenarioFactors:
        """Change individual factors, e.g. ``update(food_prices=12.5)``."""

        with self._lock:
            factors = replace(self._factors, **changes)
            self._factors = factors
        self._debouncer.submit(factors)
        return factors

    def flush(self) -> CalculatedMetrics:
        self._debouncer.flush()
        return self.result

    def cancel(self) -> None:
        self._debouncer.cancel()

    def _recompute(self, factors: ScenarioFactors) -> None:
        result = calculate_scenario(self.baseline, factors)
        with self._lock:
            self._result = result
        if self._on_result is not None:
            self._on_result(result)
