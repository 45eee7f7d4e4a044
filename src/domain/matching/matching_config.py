"""
Matching Configuration

Configuration constants for MatchEngine concurrency control and the
re-swipe policy.

Business Context:
    A user who rejected someone may later change their mind. Whether that is
    possible is a product decision, so it is configurable:
    - forbid (default): rejection is final for the ordered pair
    - allow: interest reopens the rejected edge immediately
    - allow_after_cooldown: interest reopens the edge once the cooldown passed

    The concurrency settings bound how long a request may wait for the pair
    lock and how often it retries after a lost compare-and-set.

Design Principles:
    - Configuration as code with environment overrides (MATCH_* variables)
    - Type-safe constants
    - Immutable config object injected into MatchEngine
"""

import os
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Final


class ReswipePolicy(str, Enum):
    """What happens when a user shows interest in a pair they rejected."""

    FORBID = "forbid"
    ALLOW = "allow"
    ALLOW_AFTER_COOLDOWN = "allow_after_cooldown"


# ============================================================================
# RE-SWIPE POLICY
# ============================================================================

DEFAULT_RESWIPE_POLICY: Final[ReswipePolicy] = ReswipePolicy.FORBID
DEFAULT_RESWIPE_COOLDOWN_SECONDS: Final[int] = 7 * 24 * 3600  # one week


# ============================================================================
# CONCURRENCY CONTROL
# ============================================================================

# How long a request waits for the pair lock before giving up
DEFAULT_LOCK_WAIT_TIMEOUT_SECONDS: Final[float] = 5.0

# Expiry of a distributed pair lock (guards against crashed holders)
DEFAULT_LOCK_TTL_SECONDS: Final[float] = 10.0

# Attempts per operation before ConflictExhaustedError
DEFAULT_MAX_ATTEMPTS: Final[int] = 5

# Exponential backoff between attempts: base * 2^(attempt-1), capped
DEFAULT_BACKOFF_BASE_SECONDS: Final[float] = 0.01
DEFAULT_BACKOFF_MAX_SECONDS: Final[float] = 0.5


@dataclass(frozen=True)
class MatchingConfig:
    """
    Complete configuration for MatchEngine.

    Attributes:
        reswipe_policy: Behaviour of interest on a rejected edge
        reswipe_cooldown_seconds: Cooldown for ALLOW_AFTER_COOLDOWN
        lock_wait_timeout_seconds: Max wait for the pair lock
        lock_ttl_seconds: Expiry of distributed pair locks
        max_attempts: Attempts per operation (conflicts and transient errors)
        backoff_base_seconds: First backoff delay
        backoff_max_seconds: Upper bound of a single backoff delay

    Usage:
        config = MatchingConfig.from_env()
        engine = MatchEngine(store, lock, publisher, config=config)
    """

    reswipe_policy: ReswipePolicy = DEFAULT_RESWIPE_POLICY
    reswipe_cooldown_seconds: int = DEFAULT_RESWIPE_COOLDOWN_SECONDS
    lock_wait_timeout_seconds: float = DEFAULT_LOCK_WAIT_TIMEOUT_SECONDS
    lock_ttl_seconds: float = DEFAULT_LOCK_TTL_SECONDS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_base_seconds: float = DEFAULT_BACKOFF_BASE_SECONDS
    backoff_max_seconds: float = DEFAULT_BACKOFF_MAX_SECONDS

    def __post_init__(self) -> None:
        """Validate ranges and normalize the policy value."""
        if not isinstance(self.reswipe_policy, ReswipePolicy):
            # frozen dataclass: bypass __setattr__ to coerce "allow" -> ReswipePolicy.ALLOW
            object.__setattr__(self, "reswipe_policy", ReswipePolicy(self.reswipe_policy))

        if self.reswipe_cooldown_seconds < 0:
            raise ValueError(
                f"reswipe_cooldown_seconds must be >= 0, got {self.reswipe_cooldown_seconds}"
            )
        if self.lock_wait_timeout_seconds <= 0:
            raise ValueError(
                f"lock_wait_timeout_seconds must be > 0, got {self.lock_wait_timeout_seconds}"
            )
        if self.lock_ttl_seconds <= 0:
            raise ValueError(f"lock_ttl_seconds must be > 0, got {self.lock_ttl_seconds}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.backoff_base_seconds < 0 or self.backoff_max_seconds < self.backoff_base_seconds:
            raise ValueError(
                f"Invalid backoff range: base={self.backoff_base_seconds}, "
                f"max={self.backoff_max_seconds}"
            )

    @classmethod
    def default(cls) -> "MatchingConfig":
        """
        Get default configuration from module constants.

        Examples:
            >>> MatchingConfig.default().reswipe_policy
            <ReswipePolicy.FORBID: 'forbid'>
        """
        return cls()

    @classmethod
    def from_env(cls) -> "MatchingConfig":
        """
        Build configuration from MATCH_* environment variables.

        Variables (all optional):
            MATCH_RESWIPE_POLICY, MATCH_RESWIPE_COOLDOWN_SECONDS,
            MATCH_LOCK_WAIT_TIMEOUT, MATCH_LOCK_TTL, MATCH_MAX_ATTEMPTS,
            MATCH_BACKOFF_BASE, MATCH_BACKOFF_MAX

        Raises:
            ValueError: If a variable holds an invalid value
        """
        return cls(
            reswipe_policy=ReswipePolicy(
                os.getenv("MATCH_RESWIPE_POLICY", DEFAULT_RESWIPE_POLICY.value)
            ),
            reswipe_cooldown_seconds=int(
                os.getenv("MATCH_RESWIPE_COOLDOWN_SECONDS", str(DEFAULT_RESWIPE_COOLDOWN_SECONDS))
            ),
            lock_wait_timeout_seconds=float(
                os.getenv("MATCH_LOCK_WAIT_TIMEOUT", str(DEFAULT_LOCK_WAIT_TIMEOUT_SECONDS))
            ),
            lock_ttl_seconds=float(os.getenv("MATCH_LOCK_TTL", str(DEFAULT_LOCK_TTL_SECONDS))),
            max_attempts=int(os.getenv("MATCH_MAX_ATTEMPTS", str(DEFAULT_MAX_ATTEMPTS))),
            backoff_base_seconds=float(
                os.getenv("MATCH_BACKOFF_BASE", str(DEFAULT_BACKOFF_BASE_SECONDS))
            ),
            backoff_max_seconds=float(
                os.getenv("MATCH_BACKOFF_MAX", str(DEFAULT_BACKOFF_MAX_SECONDS))
            ),
        )

    @classmethod
    def for_testing(cls, **overrides: Any) -> "MatchingConfig":
        """
        Create configuration with custom overrides for testing.

        Backoff is disabled by default so retry tests run instantly.

        Examples:
            >>> config = MatchingConfig.for_testing(reswipe_policy=ReswipePolicy.ALLOW)
            >>> config.backoff_base_seconds
            0.0
        """
        defaults: dict[str, Any] = {
            "backoff_base_seconds": 0.0,
            "backoff_max_seconds": 0.0,
            "lock_wait_timeout_seconds": 2.0,
        }
        defaults.update(overrides)
        return cls(**defaults)

    def backoff_delay(self, attempt: int) -> float:
        """
        Delay before the next attempt (attempt counts from 1).

        Examples:
            >>> MatchingConfig(backoff_base_seconds=0.01, backoff_max_seconds=0.05).backoff_delay(3)
            0.04
        """
        return min(self.backoff_base_seconds * (2 ** (attempt - 1)), self.backoff_max_seconds)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization/logging."""
        data = asdict(self)
        data["reswipe_policy"] = self.reswipe_policy.value
        return data
