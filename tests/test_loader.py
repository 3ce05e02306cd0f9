# tests/test_loader.py
import pytest

from smbuilder.loader import BOTH_MESSAGE, NEITHER_MESSAGE, load_machine, parse_yaml
from smbuilder.models import (
    MachineKind,
    MealyMachine,
    ModelDecodeError,
    MooreMachine,
    MooreOutputFunction,
    MooreTransition,
)
from smbuilder.utils.result import ExitCode, ParseError


def test_parse_moore_yaml(moore_yaml):
    result = parse_yaml(moore_yaml)

    assert result.is_ok()
    state_machine = result.unwrap()
    assert state_machine.kind is MachineKind.MOORE
    machine = state_machine.machine
    assert machine.states == ("q1", "q2", "q3")
    assert machine.input_alphabet == ("i0", "i1")
    assert machine.output_alphabet == ("o5", "o6")
    assert machine.transitions[0] == MooreTransition("q1", ("i0", "i1"), "q2")
    assert machine.output_function == (MooreOutputFunction("q1", "o5"),)
    assert machine.start_state == "q1"
    assert machine.end_states == ("q3",)


def test_parse_mealy_yaml(mealy_yaml):
    result = parse_yaml(mealy_yaml)

    assert result.is_ok()
    state_machine = result.unwrap()
    assert state_machine.kind is MachineKind.MEALY
    assert state_machine.machine.transitions[0].output_symbol == "o0"


def test_moore_yaml_is_not_mealy(moore_yaml):
    import yaml

    with pytest.raises(ModelDecodeError, match="output_symbol"):
        MealyMachine.from_dict(yaml.safe_load(moore_yaml))


def test_mealy_yaml_is_not_moore(mealy_yaml):
    import yaml

    with pytest.raises(ModelDecodeError, match="output_function"):
        MooreMachine.from_dict(yaml.safe_load(mealy_yaml))


def test_both_shapes_are_rejected(mealy_yaml):
    both = mealy_yaml + "output_function:\n  - current_state: q1\n    output_symbol: o0\n"

    result = parse_yaml(both)

    assert result.is_err()
    error = result.unwrap_err()
    assert isinstance(error, ParseError)
    assert error.message == BOTH_MESSAGE
    assert error.code == ExitCode.PARSE_FAILED


def test_neither_shape_is_rejected():
    result = parse_yaml("states: [a]\nstart_state: a\n")

    assert result.is_err()
    error = result.unwrap_err()
    assert error.message == NEITHER_MESSAGE
    assert "missing field" in error.details


def test_wrong_field_type_is_rejected(moore_yaml):
    result = parse_yaml(moore_yaml.replace("start_state: q1", "start_state: [q1]"))

    assert result.is_err()
    assert "start_state" in result.unwrap_err().details


def test_numeric_identifier_is_not_a_string(moore_yaml):
    result = parse_yaml(moore_yaml.replace("states: [q1, q2, q3]", "states: [1, q2, q3]"))

    assert result.is_err()
    assert "must contain strings" in result.unwrap_err().details


def test_unknown_keys_are_ignored(moore_yaml):
    result = parse_yaml(moore_yaml + "description: a traffic light\n")

    assert result.is_ok()
    assert result.unwrap().kind is MachineKind.MOORE


def test_non_mapping_document():
    result = parse_yaml("- just\n- a list\n")

    assert result.is_err()
    assert "expected a mapping" in result.unwrap_err().details


def test_malformed_yaml():
    result = parse_yaml("states: [q1, q2\n")

    assert result.is_err()
    assert result.unwrap_err().message == "Failed to parse YAML"


def test_load_machine_from_file(moore_file):
    result = load_machine(moore_file)

    assert result.is_ok()
    assert result.unwrap().kind is MachineKind.MOORE


def test_load_machine_missing_file(tmp_path):
    result = load_machine(tmp_path / "missing.yaml")

    assert result.is_err()
    assert result.unwrap_err().message.startswith("Failed to read")


def test_round_trip_through_dict(moore_yaml):
    state_machine = parse_yaml(moore_yaml).unwrap()

    data = state_machine.to_dict()

    assert data["kind"] == "moore"
    assert MooreMachine.from_dict(data) == state_machine.machine


def test_yaml_1_1_boolean_words_are_identifiers():
    switch = (
        "states: [off, on]\n"
        "input_alphabet: [yes]\n"
        "output_alphabet: [no, lamp]\n"
        "transitions:\n"
        "  - {current_state: off, read_symbol: [yes], new_state: on}\n"
        "output_function:\n"
        "  - {current_state: on, output_symbol: lamp}\n"
        "start_state: off\n"
        "end_states: [on]\n"
    )

    result = parse_yaml(switch)

    assert result.is_ok(), result
    machine = result.unwrap().machine
    assert machine.states == ("off", "on")
    assert machine.input_alphabet == ("yes",)
    assert machine.output_alphabet == ("no", "lamp")
    assert machine.start_state == "off"


def test_true_is_still_a_boolean(moore_yaml):
    result = parse_yaml(moore_yaml.replace("states: [q1, q2, q3]", "states: [true, q2, q3]"))

    assert result.is_err()
    assert "got bool" in result.unwrap_err().details
