"""Tests for the lookup tables and their JSON loader.

Tests cover:
- Built-in defaults
- Hour bands and venue schedules
- Loading partial overrides from a JSON file
- Rejection of malformed files
"""

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from proof_of_place.analyzers.time_analyzer import TimeAnalyzer
from proof_of_place.config.scoring_tables import (
    HourBand,
    ScoringTables,
    VenueSchedule,
    load_scoring_tables,
)
from proof_of_place.data_management.schemas import PointOfInterest, ValidationRequest
from proof_of_place.scoring import ScoringEngine


class TestDefaults:
    def test_load_without_path(self):
        tables = load_scoring_tables(None)

        assert tables == ScoringTables()
        assert tables.version == "1"

    def test_nicknames_case_insensitive(self):
        tables = ScoringTables()

        assert tables.nicknames_for("Madison Square Garden") == ["msg", "the garden"]
        assert tables.nicknames_for("Unknown Venue") == []

    def test_every_venue_type_has_schedule_and_hours(self):
        tables = ScoringTables()
        venue_types = set(tables.venue_type_keywords) | {"general"}

        assert venue_types <= set(tables.venue_schedules)
        assert venue_types <= set(tables.event_hours)

    def test_defaults_not_shared(self):
        """Each instance gets its own copy of the default tables."""
        first = ScoringTables()
        first.city_tokens.append("berlin")

        assert "berlin" not in ScoringTables().city_tokens

    def test_frozen(self):
        with pytest.raises(ValidationError):
            ScoringTables().version = "2"


class TestSchedules:
    def test_hour_band_inclusive(self):
        band = HourBand(start=19, end=23, plausibility=0.9)

        assert band.contains(19)
        assert band.contains(23)
        assert not band.contains(18)

    def test_first_band_wins(self):
        schedule = VenueSchedule(
            bands=[
                HourBand(start=10, end=12, plausibility=0.9),
                HourBand(start=8, end=20, plausibility=0.1),
            ],
            default=0.5,
        )

        assert schedule.plausibility(11) == 0.9
        assert schedule.plausibility(15) == 0.1
        assert schedule.plausibility(22) == 0.5

    def test_invalid_hour_rejected(self):
        with pytest.raises(ValidationError):
            HourBand(start=0, end=24, plausibility=0.5)


class TestLoadFromFile:
    def test_partial_override(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(
            json.dumps(
                {
                    "version": "2026-06",
                    "venue_nicknames": {"the o2 arena": ["o2", "the dome"]},
                    "city_tokens": ["london", "manchester"],
                }
            ),
            encoding="utf-8",
        )

        tables = load_scoring_tables(str(path))

        assert tables.version == "2026-06"
        assert tables.nicknames_for("The O2 Arena") == ["o2", "the dome"]
        assert tables.nicknames_for("Madison Square Garden") == []
        assert tables.city_tokens == ["london", "manchester"]
        assert tables.venue_keywords == ScoringTables().venue_keywords

    def test_schedule_override_changes_time_score(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(
            json.dumps(
                {
                    "event_hours": {"general": [9, 17]},
                    "venue_schedules": {
                        "general": {
                            "bands": [{"start": 18, "end": 23, "plausibility": 0.8}],
                            "default": 0.2,
                        }
                    },
                }
            ),
            encoding="utf-8",
        )
        tables = load_scoring_tables(str(path))
        analyzer = TimeAnalyzer(tables=tables)
        venue = PointOfInterest(name="Madison Square Garden", city="New York")

        assert analyzer.is_within_event_hours(12, "general")
        assert not analyzer.is_within_event_hours(20, "general")
        assert analyzer.plausibility(20, "general") == 0.8
        assert analyzer.plausibility(3, "general") == 0.2
        assert analyzer.infer_venue_type(venue) == "general"

    def test_partial_event_hours_keep_other_venue_types(self, tmp_path):
        """A file listing only some venue types still resolves "general" and the rest."""
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({"event_hours": {"sports_venue": [18, 23]}}), encoding="utf-8")
        tables = load_scoring_tables(str(path))

        assert tables.event_hours["sports_venue"] == (18, 23)
        assert tables.event_hours["general"] == (8, 22)
        assert tables.event_hours["dining"] == (11, 22)

    def test_partial_schedules_keep_other_venue_types(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(
            json.dumps({"venue_schedules": {"dining": {"bands": [], "default": 0.9}}}),
            encoding="utf-8",
        )
        tables = load_scoring_tables(str(path))

        assert tables.venue_schedules["dining"].plausibility(3) == 0.9
        assert tables.venue_schedules["general"].plausibility(12) == 0.8

    @pytest.mark.asyncio
    async def test_partial_override_scores_timestamped_posts(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({"event_hours": {"sports_venue": [18, 23]}}), encoding="utf-8")
        now = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)
        engine = ScoringEngine(tables=load_scoring_tables(str(path)), clock=lambda: now)

        stadium = await engine.validate(
            ValidationRequest(
                text="Game night at Yankee Stadium",
                location=PointOfInterest(name="Yankee Stadium", city="New York"),
                timestamp=datetime(2026, 6, 14, 20, 0, tzinfo=timezone.utc),
            )
        )
        garden = await engine.validate(
            ValidationRequest(
                text="Concert at Madison Square Garden",
                location=PointOfInterest(name="Madison Square Garden", city="New York"),
                timestamp=datetime(2026, 6, 14, 20, 0, tzinfo=timezone.utc),
            )
        )

        assert stadium.signals.time_plausibility == 0.9
        assert garden.signals.time_plausibility == 0.9

    def test_custom_venue_type_without_hours_uses_general(self):
        tables = ScoringTables(venue_type_keywords={"transit": ["station"]})
        analyzer = TimeAnalyzer(tables=tables)
        venue = PointOfInterest(name="Union Station", city="Chicago")

        assert analyzer.infer_venue_type(venue) == "transit"
        assert analyzer.is_within_event_hours(12, "transit")
        assert analyzer.plausibility(3, "transit") == 0.5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_scoring_tables(str(tmp_path / "missing.json"))

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValidationError):
            load_scoring_tables(str(path))

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({"city_tokens": "nyc"}), encoding="utf-8")

        with pytest.raises(ValidationError):
            load_scoring_tables(str(path))
