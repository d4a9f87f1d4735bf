"""Tests for the ordered collection of time units.

Covers: mt.core.registry
"""

import unittest

from mt.core.registry import TimeUnitRegistry, UnitIndexError, UnknownUnitError
from mt.core.ticker import ManualScheduler
from mt.core.units import CountdownUnit, RunState, StopwatchUnit, UnitKind


class TestRegistryAdd(unittest.TestCase):

    def setUp(self):
        self.scheduler = ManualScheduler()
        self.registry = TimeUnitRegistry(self.scheduler)

    def test_add_appends_idle_units_in_order(self):
        a = self.registry.add(UnitKind.STOPWATCH, "a")
        b = self.registry.add(UnitKind.COUNTDOWN, "b", 30)
        self.assertEqual(len(self.registry), 2)
        self.assertIs(self.registry.get(0), a)
        self.assertIs(self.registry.get(1), b)
        self.assertEqual([u.name for u in self.registry], ["a", "b"])
        self.assertEqual(a.run_state, RunState.IDLE)
        self.assertEqual(b.run_state, RunState.IDLE)
        self.assertEqual(b.progress, 30)

    def test_mixed_kinds(self):
        sw = self.registry.add_stopwatch("sw")
        cd = self.registry.add_countdown("cd", 10)
        self.assertIsInstance(sw, StopwatchUnit)
        self.assertIsInstance(cd, CountdownUnit)

    def test_countdown_default_duration(self):
        self.assertEqual(self.registry.add_countdown().progress, 60)
        registry = TimeUnitRegistry(self.scheduler, default_countdown_seconds=300)
        self.assertEqual(registry.add_countdown().progress, 300)

    def test_ids_unique_and_never_reused(self):
        ids = [self.registry.add_stopwatch().id for _ in range(3)]
        self.assertEqual(len(set(ids)), 3)
        self.registry.remove(ids[-1])
        new = self.registry.add_stopwatch()
        self.assertNotIn(new.id, ids)

    def test_default_scheduler_is_manual(self):
        registry = TimeUnitRegistry()
        self.assertIsInstance(registry.scheduler, ManualScheduler)

    def test_interval_passed_to_tickers(self):
        registry = TimeUnitRegistry(self.scheduler, interval_ms=250)
        unit = registry.add_stopwatch()
        unit.start()
        self.assertEqual(unit.active_ticker.interval_ms, 250)


class TestRegistryLookup(unittest.TestCase):

    def setUp(self):
        self.registry = TimeUnitRegistry(ManualScheduler())
        self.units = [self.registry.add_stopwatch(str(i)) for i in range(3)]

    def test_get_out_of_range(self):
        for bad in (3, -1, 100):
            with self.subTest(position=bad):
                with self.assertRaises(UnitIndexError):
                    self.registry.get(bad)

    def test_unit_index_error_is_an_index_error(self):
        with self.assertRaises(IndexError):
            self.registry.get(5)

    def test_lookup_by_id(self):
        target = self.units[1]
        self.assertIs(self.registry.get_by_id(target.id), target)
        self.assertEqual(self.registry.index_of(target.id), 1)
        self.assertIn(target.id, self.registry)

    def test_unknown_id(self):
        with self.assertRaises(UnknownUnitError):
            self.registry.get_by_id(999)
        with self.assertRaises(KeyError):
            self.registry.remove(999)
        self.assertNotIn(999, self.registry)

    def test_snapshots_follow_order(self):
        self.assertEqual([s.name for s in self.registry.snapshots()], ["0", "1", "2"])

    def test_units_returns_copy(self):
        units = self.registry.units()
        units.clear()
        self.assertEqual(len(self.registry), 3)


class TestRegistryRemove(unittest.TestCase):

    def setUp(self):
        self.scheduler = ManualScheduler()
        self.registry = TimeUnitRegistry(self.scheduler)

    def test_remove_at_shifts_later_units(self):
        units = [self.registry.add_stopwatch(str(i)) for i in range(5)]
        removed = self.registry.remove_at(1)
        self.assertIs(removed, units[1])
        self.assertEqual(self.registry.units(), [units[0], units[2], units[3], units[4]])
        self.assertNotIn(units[1].id, self.registry)
        self.assertEqual(removed.run_state, RunState.STOPPED)

    def test_remove_at_out_of_range(self):
        self.registry.add_stopwatch()
        for bad in (1, -1):
            with self.subTest(position=bad):
                with self.assertRaises(UnitIndexError):
                    self.registry.remove_at(bad)
        self.assertEqual(len(self.registry), 1)

    def test_remove_at_on_empty(self):
        with self.assertRaises(UnitIndexError):
            self.registry.remove_at(0)

    def test_removing_running_unit_stops_it(self):
        unit = self.registry.add_stopwatch()
        unit.start()
        self.scheduler.advance(2)
        ticker = unit.active_ticker
        self.registry.remove_at(0)
        self.assertEqual(unit.run_state, RunState.STOPPED)
        self.assertIsNone(unit.active_ticker)
        self.assertFalse(ticker.active)
        self.assertEqual(self.scheduler.active_tickers(), [])

    def test_tick_in_flight_after_removal_is_harmless(self):
        doomed = self.registry.add_stopwatch("doomed")
        survivor = self.registry.add_countdown("survivor", 10)
        doomed.start()
        survivor.start()
        self.scheduler.advance(1)
        in_flight = doomed.active_ticker.callback

        self.registry.remove(doomed.id)
        in_flight()

        self.assertEqual(doomed.progress, 0)
        self.assertEqual(doomed.run_state, RunState.STOPPED)
        self.assertEqual(survivor.progress, 9)
        self.scheduler.advance(1)
        self.assertEqual(survivor.progress, 8)

    def test_remove_by_id_after_earlier_deletion(self):
        units = [self.registry.add_stopwatch(str(i)) for i in range(4)]
        self.registry.remove(units[0].id)
        # Position of the last unit shifted from 3 to 2, the id still finds it
        self.registry.remove(units[3].id)
        self.assertEqual(self.registry.units(), [units[1], units[2]])

    def test_remove_paused_unit(self):
        unit = self.registry.add_countdown("cd", 20)
        unit.start()
        self.scheduler.advance(5)
        unit.pause()
        self.registry.remove(unit.id)
        self.assertEqual(unit.run_state, RunState.STOPPED)
        self.assertEqual(len(self.registry), 0)

    def test_stop_all(self):
        a = self.registry.add_stopwatch()
        b = self.registry.add_countdown(duration=5)
        c = self.registry.add_stopwatch()
        a.start()
        b.start()
        b.pause()
        self.registry.stop_all()
        self.assertEqual(a.run_state, RunState.STOPPED)
        self.assertEqual(b.run_state, RunState.STOPPED)
        self.assertEqual(c.run_state, RunState.IDLE)
        self.assertEqual(self.scheduler.active_tickers(), [])

    def test_clear_stops_everything(self):
        units = [self.registry.add_stopwatch() for _ in range(3)]
        for unit in units:
            unit.start()
        self.registry.clear()
        self.assertEqual(len(self.registry), 0)
        self.assertTrue(all(u.run_state is RunState.STOPPED for u in units))
        self.assertEqual(self.scheduler.active_tickers(), [])


class TestRegistryNotification(unittest.TestCase):

    def setUp(self):
        self.registry = TimeUnitRegistry(ManualScheduler())
        self.events = []
        self.unsubscribe = self.registry.subscribe(lambda event, unit: self.events.append((event, unit.id)))

    def test_add_and_remove_events(self):
        unit = self.registry.add_stopwatch()
        self.registry.remove(unit.id)
        self.assertEqual(self.events, [("added", unit.id), ("removed", unit.id)])

    def test_removed_unit_already_stopped_when_notified(self):
        states = []
        self.registry.subscribe(lambda event, unit: states.append(unit.run_state))
        unit = self.registry.add_stopwatch()
        unit.start()
        self.registry.remove(unit.id)
        self.assertEqual(states, [RunState.IDLE, RunState.STOPPED])

    def test_unsubscribe(self):
        self.unsubscribe()
        self.registry.add_stopwatch()
        self.assertEqual(self.events, [])


if __name__ == "__main__":
    unittest.main()
