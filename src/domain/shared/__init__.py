"""
Shared Domain Module

Shared domain concepts used across all subdomains.
Contains the domain exception hierarchy.

This module exports:
    - DomainException: Base exception for all domain errors
    - Validation, policy and transient subclasses (see exceptions.py)
"""

from .exceptions import (
    ConflictExhaustedError,
    DomainException,
    InvalidEdgeTransitionError,
    InvalidUserIdError,
    InvalidUserPairError,
    LockAcquisitionTimeoutError,
    ReswipeCooldownError,
    ReswipeForbiddenError,
    TransientStoreError,
    UnknownUserError,
)

__all__ = [
    "DomainException",
    "InvalidEdgeTransitionError",
    "InvalidUserIdError",
    "InvalidUserPairError",
    "UnknownUserError",
    "ReswipeForbiddenError",
    "ReswipeCooldownError",
    "TransientStoreError",
    "LockAcquisitionTimeoutError",
    "ConflictExhaustedError",
]
