"""
Domain Layer Exceptions

This module defines the exception hierarchy for the Domain Layer.
All domain-specific exceptions inherit from DomainException.

Responsibility:
    - Base exception class for domain errors
    - Type-safe error handling across layers
    - Clear separation between validation, policy and transient failures

Taxonomy:
    Validation (not retried, surfaced immediately):
        - InvalidUserIdError: malformed user identifier
        - InvalidUserPairError: self-pair
        - UnknownUserError: identifier not known to the user directory

    Policy (not retried by the engine):
        - ReswipeForbiddenError: interest on a rejected edge under "forbid"
        - ReswipeCooldownError: interest on a rejected edge before cooldown ends

    Transient (retryable by the caller, nothing was written):
        - TransientStoreError: store unavailable or timed out
        - LockAcquisitionTimeoutError: pair lock not acquired in time
        - ConflictExhaustedError: optimistic retry budget exceeded

Architecture Notes:
    - Part of Shared Domain (used across all subdomains)
    - API Layer maps every class to an HTTP status code
    - Every exception carries a `retryable` flag for callers
"""


class DomainException(Exception):
    """
    Base exception for all domain layer errors.

    This exception serves as the root of the domain exception hierarchy.
    All domain-specific exceptions inherit from this class to enable
    type-safe error handling in Application and API layers.

    Usage:
        - Catch this in Application Layer to handle all domain errors
        - API Layer converts to appropriate HTTP status codes

    Examples:
        >>> raise DomainException("Business rule violation")

        >>> try:
        ...     engine.record_interest("alice", "bob")
        ... except DomainException as e:
        ...     logger.error(f"Domain error: {e}")
    """

    retryable: bool = False

    def __init__(self, message: str) -> None:
        """
        Initialize domain exception with error message.

        Args:
            message: Human-readable error description
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.__class__.__name__}: {self.message}"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r})"


# ============================================================================
# VALIDATION ERRORS
# ============================================================================


class InvalidUserIdError(DomainException):
    """
    Raised when a user identifier is malformed.

    This exception is raised when:
    - Identifier is not a string
    - Identifier is empty or longer than 128 characters
    - Identifier contains characters outside [A-Za-z0-9_.@-]

    Examples:
        >>> raise InvalidUserIdError("User id must not be empty", user_id="")
    """

    def __init__(self, message: str, user_id: object | None = None) -> None:
        """
        Initialize identifier validation error.

        Args:
            message: Error description
            user_id: Offending identifier (optional)
        """
        self.user_id = user_id
        super().__init__(message)


class InvalidUserPairError(DomainException):
    """
    Raised when an action targets an invalid pair of users.

    The only structurally invalid pair is a self-pair: a user cannot record
    interest or disinterest in themselves.

    Examples:
        >>> raise InvalidUserPairError("Self-edges are not allowed", user_id="alice")
    """

    def __init__(self, message: str, user_id: str | None = None) -> None:
        """
        Initialize pair validation error.

        Args:
            message: Error description
            user_id: User that appears on both sides (optional)
        """
        self.user_id = user_id
        super().__init__(message)


class UnknownUserError(DomainException):
    """
    Raised when a well-formed identifier is not known to the system.

    Only raised when the engine is configured with a user directory.

    Examples:
        >>> raise UnknownUserError("User 'ghost' is not registered", user_id="ghost")
    """

    def __init__(self, message: str, user_id: str | None = None) -> None:
        self.user_id = user_id
        super().__init__(message)


# ============================================================================
# POLICY ERRORS
# ============================================================================


class ReswipeForbiddenError(DomainException):
    """
    Raised when a user re-issues interest on a pair they already rejected
    and the re-swipe policy is "forbid".

    Attributes:
        from_user: User who rejected earlier
        to_user: Rejected candidate
    """

    def __init__(self, message: str, from_user: str, to_user: str) -> None:
        self.from_user = from_user
        self.to_user = to_user
        super().__init__(message)


class ReswipeCooldownError(DomainException):
    """
    Raised when a rejected pair is re-swiped before the cooldown elapsed.

    Attributes:
        from_user: User who rejected earlier
        to_user: Rejected candidate
        retry_after_seconds: Seconds until interest would be accepted

    Examples:
        >>> raise ReswipeCooldownError(
        ...     "Cooldown active", from_user="alice", to_user="bob", retry_after_seconds=3600
        ... )
    """

    def __init__(
        self,
        message: str,
        from_user: str,
        to_user: str,
        retry_after_seconds: int,
    ) -> None:
        self.from_user = from_user
        self.to_user = to_user
        self.retry_after_seconds = retry_after_seconds
        super().__init__(f"{message} (retry after {retry_after_seconds}s)")


# ============================================================================
# TRANSIENT ERRORS
# ============================================================================


class TransientStoreError(DomainException):
    """
    Raised when the edge store is unavailable or an operation timed out.

    The caller's action was not recorded and no partial state exists, so the
    caller may resubmit the same action.

    Attributes:
        operation: Store operation that failed (optional)
        original_error: Underlying driver exception (optional)

    Examples:
        >>> raise TransientStoreError(
        ...     "Redis unavailable",
        ...     operation="transition_pair_to_connected",
        ...     original_error=ConnectionError("refused"),
        ... )
    """

    retryable = True

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.operation = operation
        self.original_error = original_error

        detailed_parts = [message]
        if operation:
            detailed_parts.append(f"Operation: {operation}")
        if original_error:
            detailed_parts.append(
                f"Original error: {type(original_error).__name__}: {original_error}"
            )

        super().__init__(" | ".join(detailed_parts))


class LockAcquisitionTimeoutError(TransientStoreError):
    """
    Raised when the pair lock could not be acquired within the wait timeout.

    Attributes:
        pair_key: Canonical pair key that was contended
        timeout_seconds: How long the caller waited
    """

    def __init__(self, pair_key: str, timeout_seconds: float) -> None:
        self.pair_key = pair_key
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Could not acquire lock for pair {pair_key} within {timeout_seconds}s",
            operation="acquire_pair_lock",
        )


class ConflictExhaustedError(TransientStoreError):
    """
    Raised when repeated write conflicts on the same pair exhaust the retry budget.

    Safe for the caller to resubmit: every engine operation is idempotent.

    Attributes:
        pair_key: Canonical pair key under contention
        attempts: Number of attempts made
    """

    def __init__(self, pair_key: str, attempts: int) -> None:
        self.pair_key = pair_key
        self.attempts = attempts
        super().__init__(
            f"Gave up on pair {pair_key} after {attempts} conflicting attempts",
            operation="record_swipe",
        )


# ============================================================================
# ENTITY ERRORS
# ============================================================================


class InvalidEdgeTransitionError(DomainException):
    """
    Raised when an InterestEdge is asked for a status change its lifecycle forbids.

    Allowed transitions:
        pending  -> connected | rejected
        rejected -> pending (re-swipe, policy permitting)
        connected is terminal

    Examples:
        >>> raise InvalidEdgeTransitionError(
        ...     "Cannot move edge alice->bob from connected to rejected",
        ...     current_status="connected",
        ...     requested_status="rejected",
        ... )
    """

    def __init__(
        self,
        message: str,
        current_status: str | None = None,
        requested_status: str | None = None,
    ) -> None:
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(message)
