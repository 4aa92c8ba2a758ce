import unittest
from datetime import datetime, timezone

from constants import MONTHS
from core.description import format_description
from core.errors import ValidationError
from core.metrics import calc_pace, calc_speed
from core.workout import (
    CyclingWorkout,
    RunningWorkout,
    WorkoutIdGenerator,
    WorkoutKind,
    build_workout,
    extra_metric,
    normalize_coordinates,
    primary_metric,
)


APRIL_14 = datetime(2026, 4, 14, 9, 30, tzinfo=timezone.utc)


class MetricTests(unittest.TestCase):
    def test_pace_is_duration_over_distance(self):
        self.assertAlmostEqual(calc_pace(24, 5.2), 4.615, places=3)
        self.assertEqual(calc_pace(50, 10), 5.0)

    def test_speed_is_distance_over_hours(self):
        self.assertAlmostEqual(calc_speed(95, 27), 17.05, places=2)
        self.assertEqual(calc_speed(30, 15), 30.0)


class DescriptionTests(unittest.TestCase):
    def test_running_description(self):
        self.assertEqual(format_description(WorkoutKind.RUNNING, APRIL_14), "Running on April 14")

    def test_cycling_description_accepts_plain_string_kind(self):
        created = datetime(2026, 12, 1, 18, 0)
        self.assertEqual(format_description("cycling", created), "Cycling on December 1")

    def test_month_table_has_twelve_entries(self):
        self.assertEqual(len(MONTHS), 12)
        self.assertEqual(MONTHS[0], "January")
        self.assertEqual(MONTHS[11], "December")


class IdGeneratorTests(unittest.TestCase):
    def test_ids_increase_when_clock_stalls(self):
        generator = WorkoutIdGenerator(clock=lambda: 1700000000.0)
        ids = [generator.next_id() for _ in range(3)]
        self.assertEqual(ids, ["1700000000000", "1700000000001", "1700000000002"])

    def test_seed_keeps_new_ids_above_existing(self):
        generator = WorkoutIdGenerator(clock=lambda: 1.0)
        generator.seed(["5000", "not-a-number", "42"])
        self.assertEqual(generator.next_id(), "5001")


class BuildWorkoutTests(unittest.TestCase):
    def setUp(self):
        self.ids = WorkoutIdGenerator(clock=lambda: 1700000000.0)

    def test_running_scenario(self):
        workout = build_workout(
            "running", (51.505, -0.09), 5.2, 24, 178,
            id_generator=self.ids, now=APRIL_14,
        )
        self.assertIsInstance(workout, RunningWorkout)
        self.assertIs(workout.kind, WorkoutKind.RUNNING)
        self.assertAlmostEqual(workout.pace_min_per_km, 4.615, places=3)
        self.assertEqual(workout.pace_min_per_km, 24 / 5.2)
        self.assertEqual(workout.description, "Running on April 14")
        self.assertEqual(workout.coordinates, (51.505, -0.09))
        self.assertEqual(workout.id, "1700000000000")
        self.assertEqual(workout.created_at, APRIL_14)

    def test_cycling_scenario_with_zero_elevation(self):
        workout = build_workout(
            WorkoutKind.CYCLING, [51.505, -0.09], 27, 95, 0,
            id_generator=self.ids, now=APRIL_14,
        )
        self.assertIsInstance(workout, CyclingWorkout)
        self.assertAlmostEqual(workout.speed_km_per_h, 17.05, places=2)
        self.assertEqual(workout.elevation_gain_m, 0.0)
        self.assertEqual(workout.description, "Cycling on April 14")

    def test_default_creation_time_is_now(self):
        workout = build_workout("running", (0, 0), 1, 5, 160, id_generator=self.ids)
        today = datetime.now().astimezone()
        self.assertTrue(workout.description.startswith("Running on "))
        self.assertEqual(workout.created_at.date(), today.date())
        self.assertTrue(workout.description.endswith(f"{MONTHS[today.month - 1]} {today.day}"))

    def test_records_are_frozen(self):
        workout = build_workout("running", (0, 0), 5, 25, 170, id_generator=self.ids)
        with self.assertRaises(AttributeError):
            workout.distance_km = 10

    def test_invariants_are_enforced(self):
        bad_calls = [
            ("running", (0, 0), 0, 25, 170),
            ("running", (0, 0), 5, -1, 170),
            ("running", (0, 0), 5, 25, 0),
            ("running", (0, 0), float("nan"), 25, 170),
            ("cycling", (0, 0), 5, 25, -3),
            ("cycling", (91, 0), 5, 25, 10),
            ("cycling", (0, float("inf")), 5, 25, 10),
            ("swimming", (0, 0), 5, 25, 10),
        ]
        for args in bad_calls:
            with self.subTest(args=args):
                with self.assertRaises(ValidationError):
                    build_workout(*args, id_generator=self.ids)

    def test_metric_helpers_dispatch_on_kind(self):
        running = build_workout("running", (0, 0), 10, 50, 170, id_generator=self.ids)
        cycling = build_workout("cycling", (0, 0), 30, 60, 250, id_generator=self.ids)
        self.assertEqual(primary_metric(running), (5.0, "min/km"))
        self.assertEqual(extra_metric(running), (170.0, "spm"))
        self.assertEqual(primary_metric(cycling), (30.0, "km/h"))
        self.assertEqual(extra_metric(cycling), (250.0, "m"))


class CoordinateTests(unittest.TestCase):
    def test_rejects_non_pairs_and_booleans(self):
        for value in (None, (1,), (1, 2, 3), "51,0", (True, 0)):
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    normalize_coordinates(value)

    def test_returns_float_tuple(self):
        self.assertEqual(normalize_coordinates([10, 20]), (10.0, 20.0))


if __name__ == "__main__":
    unittest.main()
