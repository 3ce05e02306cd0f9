"""
Pytest configuration and fixtures for smbuilder tests.

Provides small Moore and Mealy machines both as YAML text and as models.
"""

import pytest

from smbuilder.models import (
    MachineKind,
    MealyMachine,
    MealyTransition,
    MooreMachine,
    MooreOutputFunction,
    MooreTransition,
    StateMachine,
)

MOORE_YAML = """\
states: [q1, q2, q3]
input_alphabet: [i0, i1]
output_alphabet: [o5, o6]
transitions:
  - current_state: q1
    read_symbol: [i0, i1]
    new_state: q2
  - current_state: q2
    read_symbol: [i1]
    new_state: q3
output_function:
  - current_state: q1
    output_symbol: o5
start_state: q1
end_states: [q3]
"""

MEALY_YAML = """\
states: [q1, q2]
input_alphabet: [i0]
output_alphabet: [o0]
transitions:
  - current_state: q1
    read_symbol: [i0]
    new_state: q2
    output_symbol: o0
start_state: q1
end_states: []
"""


@pytest.fixture
def moore_yaml():
    return MOORE_YAML


@pytest.fixture
def mealy_yaml():
    return MEALY_YAML


@pytest.fixture
def two_state_moore():
    """
    States A and B, start A, one transition A --x--> B, output A -> o1.
    """
    return MooreMachine(
        states=("A", "B"),
        input_alphabet=("x",),
        output_alphabet=("o1",),
        transitions=(MooreTransition("A", ("x",), "B"),),
        output_function=(MooreOutputFunction("A", "o1"),),
        start_state="A",
        end_states=(),
    )


@pytest.fixture
def two_state_mealy():
    return MealyMachine(
        states=("A", "B"),
        input_alphabet=("x",),
        output_alphabet=("o1",),
        transitions=(MealyTransition("A", ("x",), "B", "o1"),),
        start_state="A",
        end_states=(),
    )


@pytest.fixture
def moore_state_machine(two_state_moore):
    return StateMachine(kind=MachineKind.MOORE, machine=two_state_moore)


@pytest.fixture
def mealy_state_machine(two_state_mealy):
    return StateMachine(kind=MachineKind.MEALY, machine=two_state_mealy)


@pytest.fixture
def moore_file(tmp_path):
    path = tmp_path / "traffic.yaml"
    path.write_text(MOORE_YAML)
    return path


@pytest.fixture
def mealy_file(tmp_path):
    path = tmp_path / "vending.yaml"
    path.write_text(MEALY_YAML)
    return path
