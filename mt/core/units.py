import weakref
from dataclasses import dataclass
from enum import Enum
from mt.common.logger import log
from mt.core.ticker import DEFAULT_INTERVAL_MS
from mt.util import format_unit_time, duration_from_inputs


class UnitKind(Enum):
    STOPWATCH = "stopwatch"
    COUNTDOWN = "countdown"

class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


# Icon the toggle button should show for a given run state. Derived, never stored.
def toggle_icon(run_state):
    return "pause" if run_state is RunState.RUNNING else "play"


# Immutable view of one unit, handed to subscribers after every change.
@dataclass(frozen=True)
class UnitSnapshot:
    id: int
    kind: UnitKind
    name: str
    progress: int
    run_state: RunState
    configured_duration: int = 0

    @property
    def display(self):
        return format_unit_time(self.kind, self.progress)

    @property
    def icon(self):
        return toggle_icon(self.run_state)

    @property
    def is_running(self):
        return self.run_state is RunState.RUNNING

    @property
    def is_paused(self):
        return self.run_state is RunState.PAUSED


# Common state machine shared by stopwatches and countdowns. Subclasses only decide what a tick does and
# whether there is anything to start.
class TimeUnit:
    kind = None

    def __init__(self, unit_id, scheduler, name="", interval_ms=DEFAULT_INTERVAL_MS):
        self._id = unit_id
        self._scheduler = scheduler
        self._interval_ms = interval_ms
        self._name = name
        self._progress = 0
        self._run_state = RunState.IDLE
        self._ticker = None
        self._subscribers = []

    #region === Read-only state ===

    @property
    def id(self):
        return self._id

    @property
    def name(self):
        return self._name

    @property
    def progress(self):
        return self._progress

    @property
    def configured_duration(self):
        return 0

    @property
    def run_state(self):
        return self._run_state

    @property
    def active_ticker(self):
        return self._ticker

    @property
    def is_running(self):
        return self._run_state is RunState.RUNNING

    @property
    def is_paused(self):
        return self._run_state is RunState.PAUSED

    def snapshot(self):
        return UnitSnapshot(
            id=self._id,
            kind=self.kind,
            name=self._name,
            progress=self._progress,
            run_state=self._run_state,
            configured_duration=self.configured_duration,
        )

    def __repr__(self):
        return f"<{type(self).__name__} id={self._id} name={self._name!r} {self._run_state.value} progress={self._progress}>"

    #endregion === Read-only state ===

    #region === Change notification ===

    # Registers a callback that receives a UnitSnapshot after every change. Returns a function that unsubscribes it.
    def subscribe(self, callback):
        self._subscribers.append(callback)
        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _notify(self):
        if not self._subscribers:
            return
        snap = self.snapshot()
        for callback in list(self._subscribers):
            callback(snap)

    #endregion === Change notification ===

    #region === Lifecycle ===

    def _can_start(self):
        return True

    def start(self):
        if self.is_running:
            return
        if not self._can_start():
            log.debug(f"Ignored start on {self!r}, nothing to run")
            return

        # The callback only holds a weak reference back to the unit, and only acts while the ticker that fired is
        # still the unit's live one. A tick already in flight when the unit is paused, stopped or deleted is a no-op.
        unit_ref = weakref.ref(self)
        ticker = None
        def on_timeout():
            unit = unit_ref()
            if unit is not None and ticker is not None and unit._ticker is ticker:
                unit.tick()
        ticker = self._scheduler.schedule(on_timeout, self._interval_ms)
        self._ticker = ticker
        self._run_state = RunState.RUNNING
        log.debug(f"Started {self!r}")
        self._notify()

    def pause(self):
        if not self.is_running:
            return
        self._release_ticker()
        self._run_state = RunState.PAUSED
        log.debug(f"Paused {self!r}")
        self._notify()

    def resume(self):
        if not self.is_paused:
            return
        self.start()

    def toggle(self):
        if self.is_paused:
            self.resume()
        elif self.is_running:
            self.pause()
        else:
            self.start()

    def stop(self):
        self._release_ticker()
        self._run_state = RunState.STOPPED
        self._progress = 0
        log.debug(f"Stopped {self!r}")
        self._notify()

    def tick(self):
        raise NotImplementedError

    def rename(self, name):
        name = "" if name is None else str(name)
        if name == self._name:
            return
        self._name = name
        self._notify()

    def _release_ticker(self):
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    #endregion === Lifecycle ===


# Counts elapsed seconds upward, with no upper bound.
class StopwatchUnit(TimeUnit):
    kind = UnitKind.STOPWATCH

    def tick(self):
        if not self.is_running:
            return
        self._progress += 1
        self._notify()


# Counts remaining seconds down from a configured duration, stopping itself once it hits zero.
class CountdownUnit(TimeUnit):
    kind = UnitKind.COUNTDOWN

    def __init__(self, unit_id, scheduler, name="", duration=0, interval_ms=DEFAULT_INTERVAL_MS):
        super().__init__(unit_id, scheduler, name=name, interval_ms=interval_ms)
        self._configured_duration = max(0, int(duration))
        self._progress = self._configured_duration

    @property
    def configured_duration(self):
        return self._configured_duration

    # A countdown with nothing left on it can't be started.
    def _can_start(self):
        return self._progress > 0

    def tick(self):
        if not self.is_running:
            return
        if self._progress > 0:
            self._progress -= 1
        if self._progress == 0:
            log.debug(f"Countdown {self._id} expired")
            self.stop()
        else:
            self._notify()

    # Sets a new duration. Ignored while running, negative values clamp to zero.
    def set_duration(self, seconds):
        if self.is_running:
            log.debug(f"Ignored set_duration({seconds}) on running {self!r}")
            return
        seconds = max(0, int(seconds))
        self._configured_duration = seconds
        self._progress = seconds
        log.debug(f"Set duration of {self!r} to {seconds}s")
        self._notify()

    # Puts a stopped countdown back to its full configured duration so it can be started again.
    def rearm(self):
        if self.is_running or self.is_paused:
            return
        self.set_duration(self._configured_duration)

    # Same as set_duration, but straight from the minutes/seconds text fields. Garbage input counts as 0.
    def set_duration_input(self, minutes_text, seconds_text):
        self.set_duration(duration_from_inputs(minutes_text, seconds_text))


# Builds a unit of the given kind. Countdowns take the duration, stopwatches ignore it.
def create_unit(kind, unit_id, scheduler, name="", duration=0, interval_ms=DEFAULT_INTERVAL_MS):
    kind = UnitKind(kind)
    if kind is UnitKind.COUNTDOWN:
        return CountdownUnit(unit_id, scheduler, name=name, duration=duration, interval_ms=interval_ms)
    return StopwatchUnit(unit_id, scheduler, name=name, interval_ms=interval_ms)
