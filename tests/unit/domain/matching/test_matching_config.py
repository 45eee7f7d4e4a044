"""
Tests for MatchingConfig.

Covers:
- Defaults
- Validation of ranges
- Policy coercion from string
- from_env() overrides
- Backoff schedule
"""

import pytest

from src.domain.matching.matching_config import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RESWIPE_COOLDOWN_SECONDS,
    MatchingConfig,
    ReswipePolicy,
)


def test_default_config():
    config = MatchingConfig.default()

    assert config.reswipe_policy is ReswipePolicy.FORBID
    assert config.reswipe_cooldown_seconds == DEFAULT_RESWIPE_COOLDOWN_SECONDS
    assert config.max_attempts == DEFAULT_MAX_ATTEMPTS


def test_policy_string_is_coerced():
    config = MatchingConfig(reswipe_policy="allow_after_cooldown")

    assert config.reswipe_policy is ReswipePolicy.ALLOW_AFTER_COOLDOWN


def test_unknown_policy_rejected():
    with pytest.raises(ValueError):
        MatchingConfig(reswipe_policy="sometimes")


@pytest.mark.parametrize(
    "overrides",
    [
        {"reswipe_cooldown_seconds": -1},
        {"lock_wait_timeout_seconds": 0},
        {"lock_ttl_seconds": -2.0},
        {"max_attempts": 0},
        {"backoff_base_seconds": -0.1},
        {"backoff_base_seconds": 1.0, "backoff_max_seconds": 0.5},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValueError):
        MatchingConfig(**overrides)


def test_for_testing_disables_backoff():
    config = MatchingConfig.for_testing(max_attempts=2)

    assert config.backoff_delay(1) == 0.0
    assert config.backoff_delay(4) == 0.0
    assert config.max_attempts == 2


def test_backoff_is_exponential_and_capped():
    config = MatchingConfig(backoff_base_seconds=0.01, backoff_max_seconds=0.05)

    assert config.backoff_delay(1) == pytest.approx(0.01)
    assert config.backoff_delay(2) == pytest.approx(0.02)
    assert config.backoff_delay(3) == pytest.approx(0.04)
    assert config.backoff_delay(4) == pytest.approx(0.05)


def test_from_env(monkeypatch):
    monkeypatch.setenv("MATCH_RESWIPE_POLICY", "allow")
    monkeypatch.setenv("MATCH_RESWIPE_COOLDOWN_SECONDS", "60")
    monkeypatch.setenv("MATCH_LOCK_WAIT_TIMEOUT", "1.5")
    monkeypatch.setenv("MATCH_MAX_ATTEMPTS", "7")

    config = MatchingConfig.from_env()

    assert config.reswipe_policy is ReswipePolicy.ALLOW
    assert config.reswipe_cooldown_seconds == 60
    assert config.lock_wait_timeout_seconds == 1.5
    assert config.max_attempts == 7


def test_from_env_invalid_value(monkeypatch):
    monkeypatch.setenv("MATCH_MAX_ATTEMPTS", "0")

    with pytest.raises(ValueError):
        MatchingConfig.from_env()


def test_to_dict_serializes_policy():
    data = MatchingConfig(reswipe_policy=ReswipePolicy.ALLOW).to_dict()

    assert data["reswipe_policy"] == "allow"
    assert data["max_attempts"] == DEFAULT_MAX_ATTEMPTS
