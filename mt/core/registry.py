import itertools
from mt.common.logger import log
from mt.core.ticker import DEFAULT_INTERVAL_MS, ManualScheduler
from mt.core.units import UnitKind, create_unit

DEFAULT_COUNTDOWN_SECONDS = 60


class UnitIndexError(IndexError):
    pass

class UnknownUnitError(KeyError):
    pass


# Ordered collection of every live stopwatch and countdown. Insertion order is display order. The registry owns its
# units: it creates them, hands out ids, and always stops a unit before letting go of it so no ticker outlives it.
class TimeUnitRegistry:

    def __init__(self, scheduler=None, interval_ms=DEFAULT_INTERVAL_MS,
                 default_countdown_seconds=DEFAULT_COUNTDOWN_SECONDS):
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.interval_ms = interval_ms
        self.default_countdown_seconds = default_countdown_seconds
        self._units = []
        # Ids are never reused, even after the unit holding them is removed.
        self._ids = itertools.count()
        self._subscribers = []

    #region === Collection access ===

    def __len__(self):
        return len(self._units)

    def __iter__(self):
        return iter(list(self._units))

    def __contains__(self, unit_id):
        return any(u.id == unit_id for u in self._units)

    def units(self):
        return list(self._units)

    def snapshots(self):
        return [u.snapshot() for u in self._units]

    def get(self, position):
        self._check_position(position)
        return self._units[position]

    def get_by_id(self, unit_id):
        return self._units[self.index_of(unit_id)]

    # Resolves a unit id to its current position. Positions shift on every removal, so callers should resolve right
    # before they act rather than holding on to an index.
    def index_of(self, unit_id):
        for position, unit in enumerate(self._units):
            if unit.id == unit_id:
                return position
        raise UnknownUnitError(unit_id)

    def _check_position(self, position):
        # Negative positions are rejected rather than counted from the end.
        if not isinstance(position, int) or not 0 <= position < len(self._units):
            raise UnitIndexError(f"Position {position} out of range for registry of {len(self._units)} unit(s)")

    #endregion === Collection access ===

    #region === Adding and removing ===

    def add(self, kind, name="", duration=0):
        unit = create_unit(
            kind,
            next(self._ids),
            self.scheduler,
            name=name,
            duration=duration,
            interval_ms=self.interval_ms,
        )
        self._units.append(unit)
        log.info(f"Added {unit.kind.value} {unit.id} '{unit.name}' at position {len(self._units) - 1}")
        self._notify("added", unit)
        return unit

    def add_stopwatch(self, name=""):
        return self.add(UnitKind.STOPWATCH, name)

    def add_countdown(self, name="", duration=None):
        if duration is None:
            duration = self.default_countdown_seconds
        return self.add(UnitKind.COUNTDOWN, name, duration)

    # Stops the unit at the given position, then drops it.
    def remove_at(self, position):
        self._check_position(position)
        unit = self._units[position]
        unit.stop()
        del self._units[position]
        log.info(f"Removed {unit.kind.value} {unit.id} '{unit.name}' from position {position}")
        self._notify("removed", unit)
        return unit

    def remove(self, unit_id):
        return self.remove_at(self.index_of(unit_id))

    def stop_all(self):
        for unit in self._units:
            if unit.is_running or unit.is_paused:
                unit.stop()

    def clear(self):
        while self._units:
            self.remove_at(len(self._units) - 1)

    #endregion === Adding and removing ===

    #region === Change notification ===

    # Registers a callback(event, unit) for "added"/"removed" events. Returns a function that unsubscribes it.
    def subscribe(self, callback):
        self._subscribers.append(callback)
        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _notify(self, event, unit):
        for callback in list(self._subscribers):
            callback(event, unit)

    #endregion === Change notification ===
