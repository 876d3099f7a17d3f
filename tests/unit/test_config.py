"""Tests for environment-driven configuration."""
import pytest

from neurodent_scheduling import config


class TestGetIntEnv:
    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("NEURODENT_TEST_INT", raising=False)
        assert config.get_int_env("NEURODENT_TEST_INT", 30) == 30

    def test_default_when_blank(self, monkeypatch):
        monkeypatch.setenv("NEURODENT_TEST_INT", "  ")
        assert config.get_int_env("NEURODENT_TEST_INT", 30) == 30

    def test_reads_value(self, monkeypatch):
        monkeypatch.setenv("NEURODENT_TEST_INT", "14")
        assert config.get_int_env("NEURODENT_TEST_INT", 30) == 14

    def test_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("NEURODENT_TEST_INT", "thirty")
        with pytest.raises(ValueError, match="NEURODENT_TEST_INT"):
            config.get_int_env("NEURODENT_TEST_INT", 30)


def test_optional_env(monkeypatch):
    monkeypatch.setenv("NEURODENT_TEST_TZ", " Asia/Kolkata ")
    assert config.get_optional_env("NEURODENT_TEST_TZ") == "Asia/Kolkata"
    monkeypatch.setenv("NEURODENT_TEST_TZ", "")
    assert config.get_optional_env("NEURODENT_TEST_TZ") is None


def test_cutoff_override_changes_window(monkeypatch, now):
    """SAME_DAY_CUTOFF_HOUR is read at call time by the policy."""
    from neurodent_scheduling.booking_window import min_bookable_date

    monkeypatch.setattr(config, "SAME_DAY_CUTOFF_HOUR", 10)
    assert min_bookable_date(now) > now.date()
