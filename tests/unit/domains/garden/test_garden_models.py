"""Tests for contact parsing and result serialization."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from tend.domains.garden.domain_logic.errors import ContactParseError, GardenError
from tend.domains.garden.domain_logic.garden_models import (
    AtRiskContact,
    Contact,
    ForecastResult,
    importance_rank,
    severity_rank,
)


class TestContactFromDict:
    def test_parses_iso_date(self):
        contact = Contact.from_dict({
            "id": "c1",
            "name": "Ada",
            "last_interaction_date": "2026-01-15",
            "target_frequency_days": 14,
            "importance": "High",
        })
        assert contact.last_interaction_date == date(2026, 1, 15)
        assert contact.target_frequency_days == 14
        assert contact.importance == "high"

    def test_parses_utc_datetime(self):
        contact = Contact.from_dict({"id": "c1", "last_interaction_date": "2026-01-15T08:30:00Z"})
        assert contact.last_interaction_date == datetime(2026, 1, 15, 8, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_date_means_never_contacted(self, value):
        assert Contact.from_dict({"id": "c1", "last_interaction_date": value}).last_interaction_date is None

    def test_accepts_date_objects(self):
        contact = Contact.from_dict({"id": "c1", "last_interaction_date": date(2026, 2, 1)})
        assert contact.last_interaction_date == date(2026, 2, 1)

    @pytest.mark.parametrize("value", ["yesterday", "2026-13-40", "15/01/2026"])
    def test_malformed_date_is_rejected(self, value):
        with pytest.raises(ContactParseError):
            Contact.from_dict({"id": "c1", "last_interaction_date": value})

    def test_missing_id_is_rejected(self):
        with pytest.raises(ContactParseError):
            Contact.from_dict({"name": "Nobody"})

    @pytest.mark.parametrize("value", ["weekly", 7.5])
    def test_non_integer_target_is_rejected(self, value):
        with pytest.raises(ContactParseError):
            Contact.from_dict({"id": "c1", "target_frequency_days": value})

    def test_numeric_target_strings(self):
        assert Contact.from_dict({"id": "c1", "target_frequency_days": "21"}).target_frequency_days == 21
        assert Contact.from_dict({"id": "c1", "target_frequency_days": 30.0}).target_frequency_days == 30

    @pytest.mark.parametrize("value", [True, False])
    def test_boolean_target_is_treated_as_absent(self, value):
        contact = Contact.from_dict({"id": "c1", "target_frequency_days": value})
        assert contact.target_frequency_days is None

    def test_non_positive_target_is_kept_for_classifier(self):
        assert Contact.from_dict({"id": "c1", "target_frequency_days": 0}).target_frequency_days == 0

    def test_unknown_importance_falls_back_to_medium(self):
        assert Contact.from_dict({"id": "c1", "importance": "vip"}).importance == "medium"
        assert Contact.from_dict({"id": "c1"}).importance == "medium"

    def test_numeric_id_becomes_string(self):
        assert Contact.from_dict({"id": 42}).id == "42"

    def test_parse_error_is_garden_error(self):
        assert issubclass(ContactParseError, GardenError)
        assert issubclass(ContactParseError, ValueError)


class TestRanks:
    def test_severity(self):
        assert [severity_rank(s) for s in ("blooming", "nourished", "thirsty", "fading")] == [0, 1, 2, 3]

    def test_importance(self):
        assert importance_rank("high") > importance_rank("medium") > importance_rank("low")
        assert importance_rank("unknown") == importance_rank("medium")


def test_forecast_as_dict_lists_at_risk():
    result = ForecastResult(
        horizon_days=7,
        current_healthy_count=2,
        velocity_resonance=1.0,
        decay_count=1,
        forecasted_healthy_count=2.0,
        weather_state="sunny",
        at_risk_contacts=[AtRiskContact("c1", 3, "high", "Ada")],
    )
    data = result.as_dict()
    assert data["at_risk_contacts"] == [
        {"contact_id": "c1", "name": "Ada", "days_until_decay": 3, "importance": "high"}
    ]
    assert data["weather_state"] == "sunny"
