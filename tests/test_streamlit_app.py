import os
import sys
import unittest
import warnings
from altair.utils.deprecation import AltairDeprecationWarning

warnings.simplefilter("ignore", AltairDeprecationWarning)

from streamlit.testing.v1 import AppTest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import SettingsRepository, WorkoutEntryRepository

APP_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "streamlit_app.py")


def _find_by_key(elements, key):
    for idx, elem in enumerate(elements):
        if getattr(elem, "key", None) == key:
            return idx
    raise AssertionError(f"Element with key '{key}' not found")


class StreamlitAppTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = os.path.abspath("test_gui.db")
        self.yaml_path = os.path.abspath("test_gui_settings.yaml")
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)
        os.environ["DB_PATH"] = self.db_path
        os.environ["YAML_PATH"] = self.yaml_path
        self.at = AppTest.from_file(APP_PATH, default_timeout=20)
        self.at.run(timeout=20)

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)

    def test_tabs_render(self) -> None:
        self.assertEqual(len(self.at.exception), 0)
        labels = [t.label for t in self.at.tabs]
        self.assertEqual(labels, ["Home", "Charts", "History", "Debug"])

    def test_log_workout_from_home(self) -> None:
        idx = _find_by_key(self.at.text_input, "home_log_weight")
        self.at.text_input[idx].input("72.5")
        submit = _find_by_key(self.at.button, "FormSubmitter:home_log-Save Workout")
        self.at.button[submit].click().run()
        entries = WorkoutEntryRepository(self.db_path).fetch_all_entries()
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].body_weight_kg, 72.5)
        self.assertEqual(entries[0].duration_minutes, 30)
        self.assertFalse(entries[0].is_synthetic)

    def test_invalid_weight_not_saved(self) -> None:
        idx = _find_by_key(self.at.text_input, "home_log_weight")
        self.at.text_input[idx].input("heavy")
        submit = _find_by_key(self.at.button, "FormSubmitter:home_log-Save Workout")
        self.at.button[submit].click().run()
        self.assertEqual(WorkoutEntryRepository(self.db_path).fetch_all_entries(), [])
        self.assertTrue(self.at.warning)

    def test_debug_generate_and_reset(self) -> None:
        idx = _find_by_key(self.at.button, "dbg_generate")
        self.at.button[idx].click().run()
        counts = WorkoutEntryRepository(self.db_path).counts()
        self.assertEqual(counts["real"], 0)
        self.assertGreater(counts["synthetic"], 0)

        toggle = _find_by_key(self.at.toggle, "dbg_show_all")
        self.at.toggle[toggle].set_value(True).run()
        settings = SettingsRepository(self.db_path, self.yaml_path).debug_settings()
        self.assertTrue(settings.show_all_data)

        idx = _find_by_key(self.at.button, "dbg_reset")
        self.at.button[idx].click().run()
        settings = SettingsRepository(self.db_path, self.yaml_path).debug_settings()
        self.assertFalse(settings.show_all_data)


if __name__ == "__main__":
    unittest.main()
