"""
Tests for sweeper/retention/rules.py

Covers parsing of the CHANNEL_RETENTION string into a RetentionConfig.
"""

from datetime import timedelta

import pytest

from sweeper.core.errors import InvalidChannelConfig, InvalidDuration
from sweeper.core.models import RetentionRule
from sweeper.retention.rules import parse_channel_retention


class TestParseChannelRetention:
    """Tests for parse_channel_retention function."""

    def test_days_and_weeks(self):
        config = parse_channel_retention("general:7d,logs:2w")

        assert dict(config) == {
            "general": RetentionRule("general", timedelta(days=7)),
            "logs": RetentionRule("logs", timedelta(days=14)),
        }

    def test_single_entry(self):
        config = parse_channel_retention("general:1w")
        assert len(config) == 1
        assert config["general"].max_age == timedelta(weeks=1)

    def test_whitespace_and_trailing_comma(self):
        config = parse_channel_retention(" general : 7d , logs:2w, ")
        assert set(config) == {"general", "logs"}
        assert config["general"].max_age == timedelta(days=7)

    def test_names_are_case_sensitive(self):
        config = parse_channel_retention("General:1d,general:2d")
        assert config["General"].max_age == timedelta(days=1)
        assert config["general"].max_age == timedelta(days=2)
        assert config.overridden == ()

    def test_rule_for_unknown_channel(self):
        config = parse_channel_retention("general:7d")
        assert config.rule_for("random") is None
        assert "random" not in config

    # -------------------------------------------------------------------------
    # Duplicates
    # -------------------------------------------------------------------------

    def test_duplicate_last_entry_wins(self):
        config = parse_channel_retention("general:7d,logs:1d,general:2w")

        assert config["general"].max_age == timedelta(days=14)
        assert len(config) == 2

    def test_duplicate_recorded_as_overridden(self):
        config = parse_channel_retention("general:7d,general:2w,general:1d,logs:1d")
        assert config.overridden == ("general",)

    # -------------------------------------------------------------------------
    # Failures
    # -------------------------------------------------------------------------

    def test_missing_colon(self):
        with pytest.raises(InvalidChannelConfig):
            parse_channel_retention("bad")

    def test_missing_colon_in_later_entry(self):
        with pytest.raises(InvalidChannelConfig):
            parse_channel_retention("general:7d,bad")

    def test_missing_name(self):
        with pytest.raises(InvalidChannelConfig):
            parse_channel_retention(":7d")

    def test_empty_value(self):
        with pytest.raises(InvalidChannelConfig):
            parse_channel_retention(" , ")

    def test_unknown_unit(self):
        with pytest.raises(InvalidDuration):
            parse_channel_retention("a:5x")

    def test_missing_duration(self):
        with pytest.raises(InvalidDuration):
            parse_channel_retention("general:")

    def test_non_numeric_magnitude(self):
        with pytest.raises(InvalidDuration):
            parse_channel_retention("general:abcd")

    def test_magnitude_too_large(self):
        with pytest.raises(InvalidDuration):
            parse_channel_retention("general:7d,logs:99999999999w")

    # -------------------------------------------------------------------------
    # Immutability
    # -------------------------------------------------------------------------

    def test_config_is_read_only(self):
        config = parse_channel_retention("general:7d")
        with pytest.raises(TypeError):
            config["general"] = RetentionRule("general", timedelta(days=1))

    def test_rule_rejects_non_positive_age(self):
        with pytest.raises(ValueError):
            RetentionRule("general", timedelta(0))
