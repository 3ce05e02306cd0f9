"""Structural checks that run before any code is generated.

Each check returns a Result - Ok(None) if the machine passes, or
Err(ValidationError) naming the offending identifiers. ``check_all`` runs
them in a fixed order and stops at the first failure.
"""

from __future__ import annotations

from typing import Callable

from smbuilder.models import Machine
from smbuilder.utils.logging import get_logger
from smbuilder.utils.result import (
    Err,
    Ok,
    Result,
    ValidationError,
    ValidationErrorKind,
)

logger = get_logger("pipeline.checks")

Check = Callable[[Machine], Result[None, ValidationError]]


def _identifier_roles(machine: Machine) -> list[tuple[str, tuple[str, ...]]]:
    # Scan order: states, then inputs, then outputs
    return [
        ("state", machine.states),
        ("input", machine.input_alphabet),
        ("output", machine.output_alphabet),
    ]


def check_unique_elements(machine: Machine) -> Result[None, ValidationError]:
    """
    Check that no identifier is used twice across states and both alphabets.

    All duplicates are collected before reporting.

    Args:
        machine: Machine to check

    Returns:
        Ok(None) if every identifier is unique, Err(ValidationError) otherwise
    """
    seen: set[str] = set()
    duplicates: list[str] = []

    for _, identifiers in _identifier_roles(machine):
        for identifier in identifiers:
            if identifier in seen and identifier not in duplicates:
                duplicates.append(identifier)
            seen.add(identifier)

    if duplicates:
        error = ValidationError(
            kind=ValidationErrorKind.DUPLICATE_IDENTIFIER,
            message=f"Duplicate elements found: {', '.join(duplicates)}",
            identifiers=tuple(duplicates),
        )
        logger.error("check_failed", check="unique_elements", identifiers=duplicates)
        return Err(error)

    logger.debug("check_passed", check="unique_elements")
    return Ok(None)


def check_end_states(machine: Machine) -> Result[None, ValidationError]:
    """
    Check that every end state is a declared state.

    Args:
        machine: Machine to check

    Returns:
        Ok(None) if end_states is a subset of states, Err(ValidationError) otherwise
    """
    states = set(machine.states)
    missing = [s for s in dict.fromkeys(machine.end_states) if s not in states]

    if missing:
        error = ValidationError(
            kind=ValidationErrorKind.END_STATE_NOT_IN_STATES,
            message=f"End states not found in states: {', '.join(missing)}",
            identifiers=tuple(missing),
        )
        logger.error("check_failed", check="end_states", identifiers=missing)
        return Err(error)

    logger.debug("check_passed", check="end_states")
    return Ok(None)


def is_legal_identifier(identifier: str) -> bool:
    """An identifier is legal when it is non-empty and does not start with a digit."""
    return bool(identifier) and not identifier[0].isdigit()


def check_legal_identifiers(machine: Machine) -> Result[None, ValidationError]:
    """
    Check that every identifier can be used as a C name.

    Fails on the first illegal identifier, naming it and its role.

    Args:
        machine: Machine to check

    Returns:
        Ok(None) if all identifiers are legal, Err(ValidationError) otherwise
    """
    for role, identifiers in _identifier_roles(machine):
        for identifier in identifiers:
            if is_legal_identifier(identifier):
                continue

            if identifier:
                reason = "must not start with a digit"
            else:
                reason = "must not be empty"

            error = ValidationError(
                kind=ValidationErrorKind.ILLEGAL_IDENTIFIER,
                message=f"Illegal {role} name '{identifier}': {reason}",
                identifiers=(identifier,),
            )
            logger.error(
                "check_failed",
                check="legal_identifiers",
                role=role,
                identifier=identifier,
            )
            return Err(error)

    logger.debug("check_passed", check="legal_identifiers")
    return Ok(None)


class MachineChecks:
    """
    Runs the structural checks against one machine.

    Order is fixed: unique elements, end states, legal identifiers.
    """

    CHECKS: tuple[Check, ...] = (
        check_unique_elements,
        check_end_states,
        check_legal_identifiers,
    )

    def __init__(self, machine: Machine) -> None:
        """
        Initialize checks for a machine.

        Args:
            machine: Machine to validate; either variant works
        """
        self.machine = machine

    def check_all(self) -> Result[None, ValidationError]:
        """
        Run all checks.

        Returns:
            Result indicating success or first failure
        """
        logger.info("running_checks")

        for check in self.CHECKS:
            result = check(self.machine)
            if result.is_err():
                return result

        logger.info("checks_passed")
        return Ok(None)


def run_checks(machine: Machine) -> Result[None, ValidationError]:
    """
    Convenience function to run all checks.

    Args:
        machine: Machine to validate

    Returns:
        Result indicating success or first check failure
    """
    return MachineChecks(machine).check_all()
