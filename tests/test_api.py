import unittest

from fastapi.testclient import TestClient

from app.main import app as fastapi_app


def _spot(**overrides):
    spot = {
        "difficultyBaseline": "INTERMEDIATE",
        "breakType": "BEACH",
        "coastFacingDeg": 270,
        "swellWindow": {"direction": "SW"},
    }
    spot.update(overrides)
    return spot


def _forecast(**overrides):
    forecast = {
        "waveHeight": 1.15,
        "wavePeriod": 12,
        "waveDirection": 225,
        "swellDirection": 225,
        "windSpeed": 3,
        "windGusts": 5,
        "windDirection": 90,
    }
    forecast.update(overrides)
    return forecast


class TestApi(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(fastapi_app)

    def test_health(self):
        resp = self.client.get("/v1/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})

    def test_rating_returns_camel_case_payload(self):
        resp = self.client.post(
            "/v1/ratings",
            json={"spot": _spot(), "forecast": _forecast(), "user": {"surfLevel": "INTERMEDIATE"}},
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        rating = data["rating"]
        self.assertEqual(rating["surfRating"], 9.0)
        self.assertEqual(rating["levelFit"]["INTERMEDIATE"], "PASS")
        self.assertEqual(rating["detail"]["waveFit"], 10.0)
        self.assertEqual(rating["safetyReasons"], [])
        self.assertNotIn("findings", rating)
        self.assertEqual(data["hints"]["tags"], ["GOOD_SWELL", "LONG_PERIOD", "GREAT_CONDITION"])
        self.assertEqual(data["condition"]["overall"], "good")

    def test_rating_includes_board_tip_for_known_user(self):
        resp = self.client.post(
            "/v1/ratings",
            json={
                "spot": _spot(),
                "forecast": _forecast(waveHeight=0.9),
                "user": {"surfLevel": "INTERMEDIATE", "boardType": "LONGBOARD"},
            },
        )
        self.assertEqual(resp.status_code, 200)
        self.assertIn("LONGBOARD_TIP", resp.json()["hints"]["tags"])

    def test_incomplete_forecast_is_unprocessable(self):
        forecast = _forecast()
        forecast.pop("waveHeight")
        resp = self.client.post(
            "/v1/ratings",
            json={"spot": _spot(), "forecast": forecast, "user": {"surfLevel": "BEGINNER"}},
        )
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["detail"]["missing"], ["wave_height"])

    def test_unknown_fields_are_rejected(self):
        resp = self.client.post(
            "/v1/ratings",
            json={"spot": _spot(), "forecast": _forecast(surfScore=10), "user": {"surfLevel": "BEGINNER"}},
        )
        self.assertEqual(resp.status_code, 422)

    def test_public_rating_uses_default_level(self):
        resp = self.client.post("/v1/ratings/public", json={"spot": _spot(), "forecast": _forecast(waveHeight=0.9)})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["rating"]["userLevel"], "INTERMEDIATE")
        self.assertNotIn("LONGBOARD_TIP", data["hints"]["tags"])

    def test_public_rating_reports_beginner_block(self):
        resp = self.client.post(
            "/v1/ratings/public",
            json={"spot": _spot(breakType="REEF"), "forecast": _forecast(waveHeight=0.8), "surfLevel": "BEGINNER"},
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["rating"]["levelFit"]["BEGINNER"], "BLOCKED")
        self.assertEqual(data["hints"]["tags"][0], "SAFETY_WARNING")

    def test_dashboard_orders_spots(self):
        resp = self.client.post(
            "/v1/dashboard",
            json={
                "spots": [
                    {"spotId": "nodata", "spot": _spot()},
                    {"spotId": "perfect", "name": "Perfect", "spot": _spot(), "sample": _forecast()},
                ]
            },
        )
        self.assertEqual(resp.status_code, 200)
        reports = resp.json()
        self.assertEqual([r["spotId"] for r in reports], ["perfect", "nodata"])
        self.assertIsNone(reports[1]["rating"])
        self.assertEqual(reports[1]["hints"]["message"], "No forecast data available.")

    def test_dashboard_rejects_oversized_batches(self):
        from app.config import settings

        original = settings.max_batch_spots
        settings.max_batch_spots = 1
        try:
            resp = self.client.post(
                "/v1/dashboard",
                json={"spots": [{"spotId": "a", "spot": _spot()}, {"spotId": "b", "spot": _spot()}]},
            )
        finally:
            settings.max_batch_spots = original
        self.assertEqual(resp.status_code, 413)


if __name__ == "__main__":
    unittest.main()
