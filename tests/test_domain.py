import math
import unittest

from pydantic import ValidationError

from app.domain import (
    BoardType,
    BreakType,
    ForecastSample,
    FrozenBaseModel,
    SpotProfile,
    StrictBaseModel,
    SwellWindow,
    TideStatus,
    UserContext,
)
from app.hints import HintsInput
from app.spot_report import SpotForecast


class TestForecastSample(unittest.TestCase):
    def test_non_finite_readings_become_missing(self):
        sample = ForecastSample(wave_height=math.nan, wind_speed=math.inf, swell_direction=math.nan)
        self.assertIsNone(sample.wave_height)
        self.assertIsNone(sample.wind_speed)
        self.assertIsNone(sample.swell_direction)

    def test_noisy_values_are_clamped(self):
        sample = ForecastSample(wave_height=-0.4, wave_period=99, wind_speed=-3, wind_gusts=900)
        self.assertEqual(sample.wave_height, 0.0)
        self.assertEqual(sample.wave_period, 30.0)
        self.assertEqual(sample.wind_speed, 0.0)
        self.assertEqual(sample.wind_gusts, 250.0)

    def test_directions_are_wrapped(self):
        sample = ForecastSample(wind_direction=370, swell_direction=-45)
        self.assertEqual(sample.wind_direction, 10)
        self.assertEqual(sample.swell_direction, 315)

    def test_accepts_camel_case_wire_names(self):
        sample = ForecastSample.model_validate(
            {"waveHeight": 1.2, "wavePeriod": 9, "windSpeed": 12, "tideStatus": "LOW"}
        )
        self.assertEqual(sample.wave_height, 1.2)
        self.assertEqual(sample.tide_status, TideStatus.LOW)

    def test_rejects_unknown_fields(self):
        with self.assertRaises(ValidationError):
            ForecastSample.model_validate({"waveHeight": 1.0, "surfQuality": 9})

    def test_is_immutable(self):
        sample = ForecastSample(wave_height=1.0)
        with self.assertRaises(ValidationError):
            sample.wave_height = 2.0


class TestSpotAndUser(unittest.TestCase):
    def test_swell_window_accepts_compass_label(self):
        window = SwellWindow(direction="SW")
        self.assertEqual(window.direction, 225)
        self.assertIsNone(window.spread_deg)

    def test_swell_window_rejects_unknown_label(self):
        with self.assertRaises(ValidationError):
            SwellWindow(direction="up")

    def test_spot_defaults(self):
        spot = SpotProfile()
        self.assertEqual(spot.break_type, BreakType.BEACH)
        self.assertIsNone(spot.coast_facing_deg)

    def test_coast_facing_out_of_range_rejected(self):
        with self.assertRaises(ValidationError):
            SpotProfile(coast_facing_deg=360)

    def test_user_board_defaults_to_unset(self):
        user = UserContext.model_validate({"surfLevel": "ADVANCED"})
        self.assertEqual(user.board_type, BoardType.UNSET)


class TestBaseModels(unittest.TestCase):
    def test_models_outside_domain_share_public_bases(self):
        self.assertTrue(issubclass(HintsInput, FrozenBaseModel))
        self.assertTrue(issubclass(SpotForecast, StrictBaseModel))
        self.assertFalse(issubclass(SpotForecast, FrozenBaseModel))

    def test_frozen_base_rejects_unknown_fields_and_mutation(self):
        with self.assertRaises(ValidationError):
            HintsInput(surfScore=3)
        data = HintsInput()
        with self.assertRaises(ValidationError):
            data.surf_rating = 9.0

    def test_strict_base_accepts_camel_case(self):
        entry = SpotForecast.model_validate({"spotId": "jukdo", "spot": {}})
        self.assertEqual(entry.spot_id, "jukdo")
        self.assertIsNone(entry.sample)


if __name__ == "__main__":
    unittest.main()
