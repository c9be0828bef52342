"""
Base Contracts and Shared Types

These are the foundational types used across all layers of the log
reconstruction core. Errors are data first: every failure is enumerated in
ErrorCode and described by an immutable Error value. The core raises
exceptions only at the mutating call that received a bad argument or was
made in the wrong lifecycle state; both exceptions carry their Error.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- No imports from other layers
- All value types are frozen dataclasses
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple
from enum import Enum, auto


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for deterministic error handling.
    No silent fallbacks - every error state is enumerated.
    """
    # Invalid arguments
    INVALID_TURN_NUMBER = auto()
    INVALID_DAY_NUMBER = auto()
    INVALID_AMOUNT = auto()
    INVALID_RANGE = auto()
    INVALID_VALUE = auto()

    # Invalid lifecycle state
    SUMMARY_NOT_CREATED = auto()
    SUMMARY_ALREADY_CREATED = auto()
    WRONG_INGESTION_MODE = auto()
    EMPTY_TIMELINE = auto()

    # Data quality (collected, never raised by the loader)
    MALFORMED_RECORD = auto()
    UNKNOWN_RECORD_TYPE = auto()

    # Outer surfaces
    LOG_NOT_FOUND = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and reported.
    """
    code: ErrorCode
    message: str
    timestamp: datetime
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @staticmethod
    def create(code: ErrorCode, message: str, **context: object) -> Error:
        """Build an error stamped with the current UTC time."""
        return Error(
            code=code,
            message=message,
            timestamp=datetime.now(timezone.utc),
            context=tuple((key, str(value)) for key, value in context.items())
        )

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )

    def to_dict(self) -> dict:
        return {
            "code": self.code.name,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "context": dict(self.context),
        }


@dataclass(frozen=True)
class Result:
    """
    Generic result type for operations that can fail.
    Either contains a value OR an error, never both.
    """
    value: Optional[object] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> Result:
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: Error) -> Result:
        return Result(value=None, error=error)


# =============================================================================
# EXCEPTIONS (raised synchronously at the offending call)
# =============================================================================

class AscensionLogError(Exception):
    """Base class for all errors raised by the core."""

    def __init__(self, error: Error):
        super().__init__(error.message)
        self.error = error

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class InvalidArgumentError(AscensionLogError, ValueError):
    """A mutating call received an argument outside its contract."""

    @classmethod
    def of(cls, code: ErrorCode, message: str, **context: object) -> InvalidArgumentError:
        return cls(Error.create(code, message, **context))


class InvalidStateError(AscensionLogError, RuntimeError):
    """An operation was called in the wrong lifecycle state."""

    @classmethod
    def of(cls, code: ErrorCode, message: str, **context: object) -> InvalidStateError:
        return cls(Error.create(code, message, **context))


def require_turn_number(turn_number: int, what: str = "Turn number") -> None:
    """Reject negative turn numbers."""
    if turn_number < 0:
        raise InvalidArgumentError.of(
            ErrorCode.INVALID_TURN_NUMBER,
            f"{what} must not be negative.",
            turn_number=turn_number
        )


def require_amount(amount: int, what: str = "Amount") -> None:
    """Reject amounts below 1."""
    if amount < 1:
        raise InvalidArgumentError.of(
            ErrorCode.INVALID_AMOUNT,
            f"{what} must be at least 1.",
            amount=amount
        )
