import json
import unittest
from datetime import datetime, timezone

from core.errors import DuplicateIdError, MalformedPersistedRecordWarning
from core.workout import CyclingWorkout, RunningWorkout, WorkoutIdGenerator, build_workout
from core.workout_store import WorkoutStore, workout_to_dict


CREATED = datetime(2026, 4, 14, 9, 30, tzinfo=timezone.utc)


def _running_entry(**overrides):
    entry = {
        "id": "1000",
        "createdAt": "2026-04-14T09:30:00+00:00",
        "coordinates": [51.505, -0.09],
        "distanceKm": 5.2,
        "durationMin": 24,
        "description": "Running on April 14",
        "kind": "running",
        "cadenceSpm": 178,
        "paceMinPerKm": 24 / 5.2,
    }
    entry.update(overrides)
    return entry


def _cycling_entry(**overrides):
    entry = {
        "id": "2000",
        "createdAt": "2026-04-15T17:00:00+00:00",
        "coordinates": [51.51, -0.1],
        "distanceKm": 27,
        "durationMin": 95,
        "description": "Cycling on April 15",
        "kind": "cycling",
        "elevationGainM": 0,
        "speedKmPerH": 27 / (95 / 60),
    }
    entry.update(overrides)
    return entry


class WorkoutStoreTests(unittest.TestCase):
    def setUp(self):
        ids = WorkoutIdGenerator(clock=lambda: 1700000000.0)
        self.running = build_workout("running", (51.505, -0.09), 5.2, 24, 178, id_generator=ids, now=CREATED)
        self.cycling = build_workout("cycling", (51.51, -0.1), 27, 95, 120, id_generator=ids, now=CREATED)
        self.store = WorkoutStore([self.running, self.cycling])

    def test_append_preserves_insertion_order(self):
        self.assertEqual([w.id for w in self.store.all()], [self.running.id, self.cycling.id])
        self.assertEqual(len(self.store), 2)
        self.assertIn(self.running.id, self.store)

    def test_append_rejects_duplicate_id(self):
        with self.assertRaises(DuplicateIdError) as ctx:
            self.store.append(self.running)
        self.assertEqual(ctx.exception.workout_id, self.running.id)
        self.assertEqual(len(self.store), 2)

    def test_find_by_id_returns_same_record(self):
        for workout in self.store.all():
            self.assertIs(self.store.find_by_id(workout.id), workout)
        self.assertIsNone(self.store.find_by_id("missing"))

    def test_all_is_a_read_only_snapshot(self):
        snapshot = self.store.all()
        self.assertIsInstance(snapshot, tuple)
        self.store.clear()
        self.assertEqual(len(snapshot), 2)
        self.assertEqual(len(self.store), 0)

    def test_serialize_shape(self):
        running, cycling = self.store.serialize()
        self.assertEqual(running["kind"], "running")
        self.assertEqual(running["coordinates"], [51.505, -0.09])
        self.assertEqual(running["createdAt"], "2026-04-14T09:30:00+00:00")
        self.assertIn("paceMinPerKm", running)
        self.assertNotIn("speedKmPerH", running)
        self.assertEqual(cycling["elevationGainM"], 120.0)
        self.assertIn("speedKmPerH", cycling)
        self.assertNotIn("cadenceSpm", cycling)
        json.dumps(self.store.serialize())

    def test_round_trip_keeps_ids_order_and_derived_fields(self):
        payload = json.loads(json.dumps(self.store.serialize()))
        restored, warnings = WorkoutStore.restore(payload)

        self.assertEqual(warnings, [])
        self.assertEqual([w.id for w in restored.all()], [w.id for w in self.store.all()])
        for original, copy in zip(self.store.all(), restored.all()):
            self.assertEqual(copy, original)
            self.assertEqual(type(copy), type(original))
        self.assertEqual(restored.all()[0].pace_min_per_km, self.running.pace_min_per_km)
        self.assertEqual(restored.all()[1].speed_km_per_h, self.cycling.speed_km_per_h)


class RestoreTests(unittest.TestCase):
    def test_missing_key_payload_is_empty_store(self):
        store, warnings = WorkoutStore.restore(None)
        self.assertEqual(len(store), 0)
        self.assertEqual(warnings, [])

    def test_restore_does_not_recompute_derived_fields(self):
        store, _ = WorkoutStore.restore([_running_entry(paceMinPerKm=9.99, description="Morning jog")])
        workout = store.all()[0]
        self.assertIsInstance(workout, RunningWorkout)
        self.assertEqual(workout.pace_min_per_km, 9.99)
        self.assertEqual(workout.description, "Morning jog")

    def test_malformed_entry_is_dropped_with_warning(self):
        broken = _running_entry(id="3000")
        del broken["distanceKm"]
        store, warnings = WorkoutStore.restore([_running_entry(), broken, _cycling_entry()])

        self.assertEqual(len(store), 2)
        self.assertEqual([w.id for w in store.all()], ["1000", "2000"])
        self.assertEqual(len(warnings), 1)
        self.assertIsInstance(warnings[0], MalformedPersistedRecordWarning)
        self.assertEqual(warnings[0].index, 1)
        self.assertIn("distanceKm", warnings[0].reason)

    def test_out_of_invariant_values_are_dropped(self):
        bad_entries = [
            _running_entry(id="a", distanceKm=-5),
            _running_entry(id="b", durationMin=0),
            _running_entry(id="c", cadenceSpm=0),
            _running_entry(id="d", coordinates=[200, 0]),
            _running_entry(id="e", kind="swimming"),
            _running_entry(id="f", createdAt="yesterday"),
            _running_entry(id="g", distanceKm="5"),
            _running_entry(id="h", distanceKm=True),
            _cycling_entry(id="i", elevationGainM=-1),
            _cycling_entry(id="j", speedKmPerH=None),
            _running_entry(id=""),
            "not an object",
        ]
        store, warnings = WorkoutStore.restore(bad_entries + [_cycling_entry()])
        self.assertEqual([w.id for w in store.all()], ["2000"])
        self.assertEqual(len(warnings), len(bad_entries))
        self.assertEqual(store.all()[0].elevation_gain_m, 0.0)

    def test_duplicate_ids_keep_first(self):
        store, warnings = WorkoutStore.restore([_running_entry(), _running_entry(durationMin=30)])
        self.assertEqual(len(store), 1)
        self.assertEqual(store.all()[0].duration_min, 24.0)
        self.assertEqual(len(warnings), 1)
        self.assertIn("duplicate", warnings[0].reason)

    def test_non_list_payload_loads_empty_with_warning(self):
        store, warnings = WorkoutStore.restore({"workouts": []})
        self.assertEqual(len(store), 0)
        self.assertEqual(len(warnings), 1)

    def test_legacy_browser_entries_are_accepted(self):
        legacy = {
            "date": "2024-04-14T10:22:33.123Z",
            "id": "1713090153123",
            "coords": [51.5, -0.09],
            "distance": 5.2,
            "duration": 24,
            "type": "running",
            "cadence": 178,
            "pace": 4.615384615384615,
            "description": "Running on April 14",
        }
        legacy_cycling = {
            "date": "2024-04-15T08:00:00.000Z",
            "id": "1713168000000",
            "coords": [51.5, -0.1],
            "distance": 27,
            "duration": 95,
            "type": "cycling",
            "elevationGain": 0,
            "speed": 17.05,
            "description": "Cycling on April 15",
        }
        store, warnings = WorkoutStore.restore([legacy, legacy_cycling])
        self.assertEqual(warnings, [])
        running, cycling = store.all()
        self.assertEqual(running.pace_min_per_km, 4.615384615384615)
        self.assertEqual(running.created_at.year, 2024)
        self.assertEqual(running.created_at.utcoffset().total_seconds(), 0)
        self.assertIsInstance(cycling, CyclingWorkout)
        self.assertEqual(cycling.speed_km_per_h, 17.05)

    def test_epoch_millisecond_created_at(self):
        store, warnings = WorkoutStore.restore([_running_entry(createdAt="1713090153123")])
        self.assertEqual(warnings, [])
        self.assertEqual(store.all()[0].created_at.year, 2024)

    def test_restored_record_serializes_back_to_current_shape(self):
        store, _ = WorkoutStore.restore([_running_entry()])
        data = workout_to_dict(store.all()[0])
        self.assertEqual(data["cadenceSpm"], 178.0)
        self.assertEqual(data["kind"], "running")
        self.assertNotIn("coords", data)


if __name__ == "__main__":
    unittest.main()
