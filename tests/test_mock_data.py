import os
import sys
import datetime
import unittest

import numpy as np

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import MockDataGenerator
from db import SettingsRepository, WorkoutEntryRepository
from mock_data_service import MockDataService
from models import WorkoutDraft
from settings_schema import DebugSettings


class MockDataGeneratorTest(unittest.TestCase):
    def setUp(self) -> None:
        self.now = datetime.datetime(2024, 5, 15, 18, 45)

    def test_generated_entries_are_well_formed(self) -> None:
        entries = MockDataGenerator.generate_entries(
            60, self.now, np.random.default_rng(7)
        )
        self.assertLessEqual(len(entries), 60)
        self.assertGreater(len(entries), 0)
        for entry in entries:
            self.assertTrue(entry.is_synthetic)
            self.assertIsNone(entry.id)
            self.assertIn(entry.duration_minutes, MockDataGenerator.DURATIONS)
            self.assertTrue(15 <= entry.duration_minutes <= 120)
            self.assertTrue(67.0 <= entry.body_weight_kg <= 73.0)
            self.assertIn(entry.notes, MockDataGenerator.NOTES)
            self.assertLessEqual(entry.date, self.now)
            self.assertGreater(entry.date, self.now - datetime.timedelta(days=60))
            self.assertEqual(entry.date.time(), self.now.time())
        dates = [e.date for e in entries]
        self.assertEqual(dates, sorted(dates))
        self.assertEqual(len(set(dates)), len(dates))

    def test_seeded_generation_is_repeatable(self) -> None:
        first = MockDataGenerator.generate_entries(30, self.now, np.random.default_rng(3))
        second = MockDataGenerator.generate_entries(30, self.now, np.random.default_rng(3))
        self.assertEqual(first, second)

    def test_zero_and_negative_count(self) -> None:
        self.assertEqual(MockDataGenerator.generate_entries(0, self.now), [])
        with self.assertRaises(ValueError):
            MockDataGenerator.generate_entries(-1, self.now)


class MockDataServiceTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_mock_data.db"
        self.yaml_path = "test_mock_data.yaml"
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)
        self.entries = WorkoutEntryRepository(self.db_path)
        self.settings = SettingsRepository(self.db_path, self.yaml_path)
        self.service = MockDataService(
            self.entries, self.settings, rng=np.random.default_rng(11)
        )
        self.now = datetime.datetime(2024, 5, 15, 18, 45)

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def _add_real(self) -> int:
        draft = WorkoutDraft(
            date=self.now - datetime.timedelta(days=2),
            duration_minutes=45,
            body_weight_kg=72.0,
            notes="real",
        )
        return self.entries.add(draft.to_entry())

    def test_regeneration_keeps_real_entries(self) -> None:
        real_id = self._add_real()
        first = self.service.populate(30, now=self.now)
        second = self.service.populate(30, now=self.now)

        stored = self.entries.fetch_all_entries()
        real = [e for e in stored if not e.is_synthetic]
        synthetic = [e for e in stored if e.is_synthetic]
        self.assertEqual([e.id for e in real], [real_id])
        self.assertEqual(real[0].notes, "real")
        self.assertEqual(sorted(e.id for e in synthetic), sorted(e.id for e in second))
        self.assertFalse({e.id for e in first} & {e.id for e in synthetic})

    def test_populate_uses_configured_count(self) -> None:
        self.settings.save_debug_settings(DebugSettings(mock_data_count=10))
        batch = self.service.populate(now=self.now)
        self.assertLessEqual(len(batch), 10)
        self.assertTrue(all(e.id is not None for e in batch))
        self.assertEqual(self.entries.counts()["synthetic"], len(batch))

    def test_populate_without_settings_defaults_to_thirty(self) -> None:
        service = MockDataService(self.entries, rng=np.random.default_rng(5))
        batch = service.populate(now=self.now)
        self.assertLessEqual(len(batch), 30)
        for entry in batch:
            self.assertGreater(entry.date, self.now - datetime.timedelta(days=30))

    def test_clear_mock_data(self) -> None:
        self._add_real()
        batch = self.service.populate(20, now=self.now)
        self.assertEqual(self.service.clear_mock_data(), len(batch))
        self.assertEqual(self.entries.counts(), {"real": 1, "synthetic": 0, "total": 1})

    def test_clear_all_data(self) -> None:
        self._add_real()
        batch = self.service.populate(20, now=self.now)
        self.assertEqual(self.service.clear_all_data(), len(batch) + 1)
        self.assertEqual(self.entries.fetch_all_entries(), [])


if __name__ == "__main__":
    unittest.main()
