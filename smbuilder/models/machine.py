"""Data models for Moore and Mealy state machines.

Both variants share the structural fields of ``Machine``; they differ only in
where outputs live. A Moore machine assigns outputs per state through its
output function, a Mealy machine attaches an output to every transition.

Instances are immutable: sequences are stored as tuples and declaration
order is preserved, since it drives the order of the generated code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ModelDecodeError(ValueError):
    """Raised when a mapping does not have the shape of a model class."""

    pass


class MachineKind(Enum):
    """Variant of a state machine."""

    MOORE = "moore"
    MEALY = "mealy"


def _require(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise ModelDecodeError(f"expected a mapping, got {type(data).__name__}")
    if key not in data:
        raise ModelDecodeError(f"missing field '{key}'")
    return data[key]


def _string(data: Any, key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        raise ModelDecodeError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


def _strings(data: Any, key: str) -> tuple[str, ...]:
    value = _require(data, key)
    if not isinstance(value, list):
        raise ModelDecodeError(f"field '{key}' must be a list, got {type(value).__name__}")
    for item in value:
        if not isinstance(item, str):
            raise ModelDecodeError(
                f"field '{key}' must contain strings, got {type(item).__name__}"
            )
    return tuple(value)


def _records(data: Any, key: str) -> list[Any]:
    value = _require(data, key)
    if not isinstance(value, list):
        raise ModelDecodeError(f"field '{key}' must be a list, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class MooreTransition:
    """
    A transition in a Moore machine.

    Attributes:
        current_state: State the transition leaves (q)
        read_symbol: Inputs that must all be true to take it (s)
        new_state: State the transition enters (q')
    """

    current_state: str
    read_symbol: tuple[str, ...]
    new_state: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "current_state": self.current_state,
            "read_symbol": list(self.read_symbol),
            "new_state": self.new_state,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "MooreTransition":
        """Create from dictionary."""
        return cls(
            current_state=_string(data, "current_state"),
            read_symbol=_strings(data, "read_symbol"),
            new_state=_string(data, "new_state"),
        )


@dataclass(frozen=True)
class MealyTransition:
    """A transition in a Mealy machine; carries its own output (o)."""

    current_state: str
    read_symbol: tuple[str, ...]
    new_state: str
    output_symbol: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "current_state": self.current_state,
            "read_symbol": list(self.read_symbol),
            "new_state": self.new_state,
            "output_symbol": self.output_symbol,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "MealyTransition":
        """Create from dictionary."""
        return cls(
            current_state=_string(data, "current_state"),
            read_symbol=_strings(data, "read_symbol"),
            new_state=_string(data, "new_state"),
            output_symbol=_string(data, "output_symbol"),
        )


@dataclass(frozen=True)
class MooreOutputFunction:
    """One entry of a Moore output function: in ``current_state``, ``output_symbol`` is true."""

    current_state: str
    output_symbol: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "current_state": self.current_state,
            "output_symbol": self.output_symbol,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "MooreOutputFunction":
        """Create from dictionary."""
        return cls(
            current_state=_string(data, "current_state"),
            output_symbol=_string(data, "output_symbol"),
        )


@dataclass(frozen=True)
class Machine:
    """
    Structure shared by every state machine variant.

    Attributes:
        states: State identifiers in declaration order (Q)
        input_alphabet: Boolean input signals (Σ)
        output_alphabet: Boolean output signals (Ω)
        start_state: Initial state (q0)
        end_states: Accepting states, possibly empty (F)
    """

    states: tuple[str, ...]
    input_alphabet: tuple[str, ...]
    output_alphabet: tuple[str, ...]
    start_state: str
    end_states: tuple[str, ...]

    def _base_dict(self) -> dict:
        return {
            "states": list(self.states),
            "input_alphabet": list(self.input_alphabet),
            "output_alphabet": list(self.output_alphabet),
            "start_state": self.start_state,
            "end_states": list(self.end_states),
        }


@dataclass(frozen=True)
class MooreMachine(Machine):
    """A Moore machine: outputs depend only on the current state (δ, λ)."""

    transitions: tuple[MooreTransition, ...] = ()
    output_function: tuple[MooreOutputFunction, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = self._base_dict()
        data["transitions"] = [t.to_dict() for t in self.transitions]
        data["output_function"] = [o.to_dict() for o in self.output_function]
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "MooreMachine":
        """
        Create from dictionary.

        Every field is required; unknown keys are ignored.

        Raises:
            ModelDecodeError: If a field is missing or has the wrong type
        """
        return cls(
            states=_strings(data, "states"),
            input_alphabet=_strings(data, "input_alphabet"),
            output_alphabet=_strings(data, "output_alphabet"),
            transitions=tuple(
                MooreTransition.from_dict(t) for t in _records(data, "transitions")
            ),
            output_function=tuple(
                MooreOutputFunction.from_dict(o) for o in _records(data, "output_function")
            ),
            start_state=_string(data, "start_state"),
            end_states=_strings(data, "end_states"),
        )


@dataclass(frozen=True)
class MealyMachine(Machine):
    """A Mealy machine: outputs depend on the current state and input (δ)."""

    transitions: tuple[MealyTransition, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = self._base_dict()
        data["transitions"] = [t.to_dict() for t in self.transitions]
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "MealyMachine":
        """
        Create from dictionary.

        Every field is required; unknown keys are ignored.

        Raises:
            ModelDecodeError: If a field is missing or has the wrong type
        """
        return cls(
            states=_strings(data, "states"),
            input_alphabet=_strings(data, "input_alphabet"),
            output_alphabet=_strings(data, "output_alphabet"),
            transitions=tuple(
                MealyTransition.from_dict(t) for t in _records(data, "transitions")
            ),
            start_state=_string(data, "start_state"),
            end_states=_strings(data, "end_states"),
        )


@dataclass(frozen=True)
class StateMachine:
    """
    A parsed state machine tagged with its variant.

    The variant is decided once by the loader and never changes.
    """

    kind: MachineKind
    machine: Union[MooreMachine, MealyMachine]

    @property
    def is_moore(self) -> bool:
        return self.kind is MachineKind.MOORE

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"kind": self.kind.value, **self.machine.to_dict()}
