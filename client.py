import requests
from typing import Optional

class ForceClient:
    """Simple REST client for the workout API."""

    def __init__(self, base_url: str = "http://localhost:8000", session=None) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def log_workout(
        self,
        body_weight_kg: float,
        duration_minutes: int = 30,
        date: Optional[str] = None,
        notes: str = "",
    ) -> int:
        params = {
            "body_weight_kg": body_weight_kg,
            "duration_minutes": duration_minutes,
            "notes": notes,
        }
        if date is not None:
            params["date"] = date
        resp = self.session.post(f"{self.base_url}/workouts", params=params)
        resp.raise_for_status()
        return resp.json()["id"]

    def list_workouts(self):
        resp = self.session.get(f"{self.base_url}/workouts")
        resp.raise_for_status()
        return resp.json()

    def delete_workout(self, entry_id: int) -> None:
        resp = self.session.delete(f"{self.base_url}/workouts/{entry_id}")
        resp.raise_for_status()

    def home(self) -> dict:
        resp = self.session.get(f"{self.base_url}/stats/home")
        resp.raise_for_status()
        return resp.json()

    def charts(self, time_range: str = "month") -> dict:
        resp = self.session.get(
            f"{self.base_url}/stats/charts", params={"time_range": time_range}
        )
        resp.raise_for_status()
        return resp.json()

    def heatmap(self, weeks: int = 26) -> dict:
        resp = self.session.get(f"{self.base_url}/stats/heatmap", params={"weeks": weeks})
        resp.raise_for_status()
        return resp.json()

    def generate_mock_data(self, count: Optional[int] = None) -> int:
        params = {} if count is None else {"count": count}
        resp = self.session.post(f"{self.base_url}/debug/mock_data", params=params)
        resp.raise_for_status()
        return resp.json()["generated"]
