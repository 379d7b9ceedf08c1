import os
import sys
import datetime
import unittest
from fastapi.testclient import TestClient

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from rest_api import ForceAPI


class APITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_workout.db"
        self.yaml_path = "test_settings.yaml"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)
        self.api = ForceAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.client = TestClient(self.api.app)

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)

    def _log(self, **params):
        data = {"body_weight_kg": 72.5, "duration_minutes": 45, "notes": "legs"}
        data.update(params)
        return self.client.post("/workouts", params=data)

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_workout_crud(self) -> None:
        response = self._log()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"id": 1})

        response = self.client.get("/workouts")
        self.assertEqual(response.status_code, 200)
        items = response.json()
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["duration_minutes"], 45)
        self.assertEqual(items[0]["notes"], "legs")
        self.assertFalse(items[0]["is_synthetic"])

        response = self.client.put(
            "/workouts/1",
            params={
                "body_weight_kg": 71.0,
                "duration_minutes": 60,
                "date": "2024-05-15T07:30:00",
                "notes": "edited",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "updated"})
        item = self.client.get("/workouts/1").json()
        self.assertEqual(item["duration_minutes"], 60)
        self.assertEqual(item["date"], "2024-05-15T07:30:00")
        self.assertEqual(item["body_weight_kg"], 71.0)

        response = self.client.delete("/workouts/1")
        self.assertEqual(response.json(), {"status": "deleted"})
        self.assertEqual(self.client.get("/workouts").json(), [])

    def test_workouts_listed_newest_first(self) -> None:
        self._log(date="2024-05-01")
        self._log(date="2024-05-10T08:00:00")
        dates = [w["date"] for w in self.client.get("/workouts").json()]
        self.assertEqual(dates, ["2024-05-10T08:00:00", "2024-05-01T00:00:00"])

    def test_invalid_workout_input(self) -> None:
        self.assertEqual(self._log(duration_minutes=3).status_code, 400)
        self.assertEqual(self._log(duration_minutes=200).status_code, 400)
        self.assertEqual(self._log(body_weight_kg=0).status_code, 400)
        self.assertEqual(self._log(body_weight_kg="nan").status_code, 400)
        self.assertEqual(self._log(body_weight_kg="inf").status_code, 400)
        self.assertEqual(self._log(date="yesterday").status_code, 400)
        self.assertEqual(self.client.get("/workouts").json(), [])

    def test_offset_dates_mix_with_local_dates(self) -> None:
        utc_now = datetime.datetime.now(datetime.timezone.utc)
        self.assertEqual(
            self._log(date=utc_now.isoformat(timespec="seconds")).status_code, 200
        )
        self.assertEqual(self._log().status_code, 200)

        response = self.client.get("/stats/home")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["week_count"], 2)
        self.assertEqual(
            self.client.get("/stats/charts", params={"time_range": "week"}).status_code,
            200,
        )
        items = self.client.get("/workouts").json()
        self.assertEqual(len(items), 2)
        for item in items:
            self.assertIsNone(datetime.datetime.fromisoformat(item["date"]).tzinfo)

    def test_missing_workout(self) -> None:
        self.assertEqual(self.client.get("/workouts/99").status_code, 404)
        self.assertEqual(self.client.delete("/workouts/99").status_code, 404)
        response = self.client.put(
            "/workouts/99", params={"body_weight_kg": 70, "duration_minutes": 30}
        )
        self.assertEqual(response.status_code, 404)

    def test_stats_endpoints(self) -> None:
        self._log()
        today = datetime.date.today().isoformat()

        home = self.client.get("/stats/home").json()
        self.assertEqual(home["streak"], 1)
        self.assertEqual(home["week_minutes"], 45)
        self.assertEqual(home["message"], "✨ Great Work Today!")

        charts = self.client.get("/stats/charts", params={"time_range": "week"}).json()
        self.assertEqual(charts["total_minutes"], 45)
        self.assertEqual(charts["average_weight"], 72.5)
        self.assertEqual(
            self.client.get("/stats/charts", params={"time_range": "decade"}).status_code,
            400,
        )

        daily = self.client.get("/stats/daily_totals").json()
        self.assertEqual(daily, [{"date": today, "minutes": 45}])
        weekly = self.client.get(
            "/stats/weekly_totals", params={"time_range": "year"}
        ).json()
        self.assertEqual(len(weekly), 1)
        self.assertEqual(weekly[0]["minutes"], 45)

        streak = self.client.get("/stats/streak", params={"weeks": 4}).json()
        self.assertEqual(streak, {"current": 1, "longest": 1})
        self.assertEqual(
            self.client.get("/stats/streak", params={"weeks": 0}).status_code, 400
        )

        heatmap = self.client.get("/stats/heatmap", params={"weeks": 4}).json()
        self.assertEqual(len(heatmap["weeks"]), 4)
        self.assertEqual(heatmap["weeks"][-1][-1], {"date": today, "minutes": 45, "level": 2})
        self.assertEqual(heatmap["active_days"], 1)
        self.assertEqual(
            self.client.get("/stats/heatmap", params={"weeks": 0}).status_code, 400
        )

        history = self.client.get("/history").json()
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0]["date"], today)

    def test_debug_settings(self) -> None:
        response = self.client.get("/settings/debug")
        self.assertEqual(
            response.json(),
            {"use_mock_data": False, "mock_data_count": 30, "show_all_data": False},
        )

        response = self.client.put(
            "/settings/debug", params={"mock_data_count": 50, "use_mock_data": True}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["mock_data_count"], 50)
        self.assertTrue(self.client.get("/settings/debug").json()["use_mock_data"])

        response = self.client.put("/settings/debug", params={"mock_data_count": 35})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get("/settings/debug").json()["mock_data_count"], 50)

        response = self.client.post("/settings/debug/reset")
        self.assertEqual(
            response.json(),
            {"use_mock_data": False, "mock_data_count": 30, "show_all_data": False},
        )

    def test_mock_data_lifecycle(self) -> None:
        self._log()
        response = self.client.post("/debug/mock_data", params={"count": 20})
        self.assertEqual(response.status_code, 200)
        generated = response.json()["generated"]
        self.assertLessEqual(generated, 20)

        summary = self.client.get("/debug/summary").json()
        self.assertEqual(summary["real"], 1)
        self.assertEqual(summary["synthetic"], generated)
        self.assertEqual(summary["mode"], "real_only")
        self.assertEqual(len(self.client.get("/workouts").json()), 1)

        self.client.put("/settings/debug", params={"show_all_data": True})
        self.assertEqual(len(self.client.get("/workouts").json()), generated + 1)

        again = self.client.post("/debug/mock_data", params={"count": 20}).json()
        summary = self.client.get("/debug/summary").json()
        self.assertEqual(summary["real"], 1)
        self.assertEqual(summary["synthetic"], again["generated"])

        response = self.client.delete("/debug/mock_data")
        self.assertEqual(response.json(), {"deleted": again["generated"]})
        response = self.client.delete("/debug/all_data")
        self.assertEqual(response.json(), {"deleted": 1})

        self.assertEqual(
            self.client.post("/debug/mock_data", params={"count": -1}).status_code, 400
        )


if __name__ == "__main__":
    unittest.main()
