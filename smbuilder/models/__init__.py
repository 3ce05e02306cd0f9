"""Data models for smbuilder."""

from smbuilder.models.machine import (
    Machine,
    MachineKind,
    MealyMachine,
    MealyTransition,
    ModelDecodeError,
    MooreMachine,
    MooreOutputFunction,
    MooreTransition,
    StateMachine,
)

__all__ = [
    "Machine",
    "MachineKind",
    "MooreMachine",
    "MooreTransition",
    "MooreOutputFunction",
    "MealyMachine",
    "MealyTransition",
    "StateMachine",
    "ModelDecodeError",
]
