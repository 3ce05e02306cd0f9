"""Result type for explicit error handling.

Every pipeline stage (parse, validate, generate, write) returns a Result
instead of raising, so the CLI can map each failure to an exit code and a
readable message in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped type


class ResultError(Exception):
    """Raised when unwrapping a Result fails."""

    pass


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Represents a successful result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value. Safe to call since this is Ok."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        """Get the error value. Raises since this is Ok."""
        raise ResultError(f"Called unwrap_err on Ok value: {self.value}")

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        """Transform the success value."""
        return Ok(fn(self.value))

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        """Chain another Result-returning operation."""
        return fn(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """Represents an error result."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Get the success value. Raises since this is Err."""
        raise ResultError(f"Called unwrap on Err value: {self.error}")

    def unwrap_err(self) -> E:
        """Get the error value. Safe to call since this is Err."""
        return self.error

    def map(self, fn: Callable[[T], U]) -> "Err[E]":
        """Transform the success value. No-op for Err."""
        return self

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Err[E]":
        """Chain another Result-returning operation. No-op for Err."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Union[Ok[T], Err[E]]


# Exit codes
class ExitCode:
    """Exit codes for CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    CONFIG_ERROR = 2

    # Input errors (10-19)
    PARSE_FAILED = 10

    # Validation errors (20-29)
    DUPLICATE_IDENTIFIER = 20
    END_STATE_NOT_IN_STATES = 21
    ILLEGAL_IDENTIFIER = 22

    # Generation errors (30-39)
    UNSUPPORTED_FEATURE = 30
    TEMPLATE_ERROR = 31

    # Output errors (40-49)
    WRITE_FAILED = 40


class ValidationErrorKind(Enum):
    """Which structural check rejected the machine."""

    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    END_STATE_NOT_IN_STATES = "end_state_not_in_states"
    ILLEGAL_IDENTIFIER = "illegal_identifier"

    @property
    def exit_code(self) -> int:
        return {
            ValidationErrorKind.DUPLICATE_IDENTIFIER: ExitCode.DUPLICATE_IDENTIFIER,
            ValidationErrorKind.END_STATE_NOT_IN_STATES: ExitCode.END_STATE_NOT_IN_STATES,
            ValidationErrorKind.ILLEGAL_IDENTIFIER: ExitCode.ILLEGAL_IDENTIFIER,
        }[self]


@dataclass(frozen=True)
class ConfigError:
    """Error in configuration."""

    field: str
    message: str

    @property
    def code(self) -> int:
        return ExitCode.CONFIG_ERROR

    def __str__(self) -> str:
        return f"Config error in '{self.field}': {self.message}"


@dataclass(frozen=True)
class ParseError:
    """The input could not be read as exactly one kind of state machine."""

    message: str
    details: str = ""

    @property
    def code(self) -> int:
        return ExitCode.PARSE_FAILED

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


@dataclass(frozen=True)
class ValidationError:
    """A structural check failed.

    Attributes:
        kind: Which check failed
        message: Human-readable description
        identifiers: The offending identifiers, in the order they were found
    """

    kind: ValidationErrorKind
    message: str
    identifiers: tuple[str, ...] = ()

    @property
    def code(self) -> int:
        return self.kind.exit_code

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class UnsupportedFeatureError:
    """The requested generation is not implemented."""

    feature: str
    message: str

    @property
    def code(self) -> int:
        return ExitCode.UNSUPPORTED_FEATURE

    def __str__(self) -> str:
        return f"Unsupported feature '{self.feature}': {self.message}"


@dataclass(frozen=True)
class TemplateError:
    """A template could not be rendered completely."""

    template: str
    message: str
    tokens: tuple[str, ...] = ()

    @property
    def code(self) -> int:
        return ExitCode.TEMPLATE_ERROR

    def __str__(self) -> str:
        if self.tokens:
            return f"Template '{self.template}' {self.message}: {', '.join(self.tokens)}"
        return f"Template '{self.template}' {self.message}"


@dataclass(frozen=True)
class WriteError:
    """Error while persisting generated files."""

    path: str
    message: str
    cause: Exception | None = None

    @property
    def code(self) -> int:
        return ExitCode.WRITE_FAILED

    def __str__(self) -> str:
        if self.cause:
            return f"Failed to write {self.path}: {self.message} ({self.cause})"
        return f"Failed to write {self.path}: {self.message}"


def first_err(results: list[Result[T, E]]) -> Result[list[T], E]:
    """
    Collect a list of Results, returning the first error if any.

    Returns Ok with all values if all are Ok, or Err with the first error.
    """
    values = []

    for result in results:
        if result.is_err():
            return Err(result.unwrap_err())
        values.append(result.unwrap())

    return Ok(values)
