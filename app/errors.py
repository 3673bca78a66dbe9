"""Errors raised by the rating engine."""

from __future__ import annotations

from typing import Sequence


class IncompleteForecastError(ValueError):
    """A forecast sample lacks a measurement the engine cannot score without."""

    def __init__(self, missing_fields: Sequence[str]):
        self.missing_fields = tuple(missing_fields)
        super().__init__(f"Forecast sample missing required fields: {', '.join(self.missing_fields)}")
