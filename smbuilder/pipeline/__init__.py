"""Pipeline module for smbuilder."""

from smbuilder.pipeline.checks import (
    MachineChecks,
    check_end_states,
    check_legal_identifiers,
    check_unique_elements,
    run_checks,
)

__all__ = [
    "MachineChecks",
    "run_checks",
    "check_unique_elements",
    "check_end_states",
    "check_legal_identifiers",
]
