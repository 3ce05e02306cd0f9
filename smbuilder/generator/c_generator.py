"""C code generator for Moore machines.

The generated step function first clears every output, then switches on the
current state: it sets the outputs assigned to that state and takes the
first transition whose guard holds. Guards are chained with ``else if`` so
declaration order decides which transition wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from smbuilder.generator.templates import (
    HEADER_TEMPLATE,
    SOURCE_TEMPLATE,
    render_template,
)
from smbuilder.models import MooreMachine, MooreOutputFunction, MooreTransition, StateMachine
from smbuilder.utils.files import OutputFiles
from smbuilder.utils.logging import get_logger
from smbuilder.utils.result import (
    Err,
    Result,
    TemplateError,
    UnsupportedFeatureError,
    first_err,
)

logger = get_logger("generator.c_generator")

INDENT = "    "

UNUSED_FIELD = "_unused"

GenerationError = Union[UnsupportedFeatureError, TemplateError]


@dataclass(frozen=True)
class GeneratedCode:
    """Header and source text for one machine."""

    name: str
    header: str
    source: str

    @property
    def header_filename(self) -> str:
        return f"{self.name}.h"

    @property
    def source_filename(self) -> str:
        return f"{self.name}.c"

    def files(self) -> list[tuple[str, str]]:
        """Return (filename, content) pairs in write order."""
        return [
            (self.header_filename, self.header),
            (self.source_filename, self.source),
        ]


def select_output(state: str, output_function: tuple[MooreOutputFunction, ...]) -> Optional[MooreOutputFunction]:
    """
    Return the first output entry for a state, or None.

    Later entries for the same state are ignored, not merged.
    """
    for entry in output_function:
        if entry.current_state == state:
            return entry
    return None


def select_transitions(state: str, transitions: tuple[MooreTransition, ...]) -> list[MooreTransition]:
    """Return the transitions leaving a state, in declaration order."""
    return [t for t in transitions if t.current_state == state]


def format_guard(read_symbol: tuple[str, ...]) -> str:
    """AND together the input signals of a guard; no symbols means always true."""
    if not read_symbol:
        return "true"
    return " && ".join(f"input.{symbol}" for symbol in read_symbol)


def _state_enum_block(machine: MooreMachine) -> str:
    return "\n".join(f"{INDENT}{state}," for state in machine.states)


def _field_block(symbols: tuple[str, ...]) -> str:
    # C has no empty structs
    if not symbols:
        return f"{INDENT}bool {UNUSED_FIELD};"
    return "\n".join(f"{INDENT}bool {symbol};" for symbol in symbols)


def _reset_block(machine: MooreMachine) -> str:
    return "\n".join(f"{INDENT}output->{symbol} = false;" for symbol in machine.output_alphabet)


def _state_case(state: str, machine: MooreMachine) -> str:
    body = INDENT * 2
    lines = [f"{INDENT}case {state}:"]

    entry = select_output(state, machine.output_function)
    if entry is not None:
        lines.append(f"{body}output->{entry.output_symbol} = true;")

    for index, transition in enumerate(select_transitions(state, machine.transitions)):
        keyword = "if" if index == 0 else "else if"
        lines.append(f"{body}{keyword} ({format_guard(transition.read_symbol)})")
        lines.append(f"{body}{{")
        lines.append(f"{body}{INDENT}*state = {transition.new_state};")
        lines.append(f"{body}}}")

    lines.append(f"{body}break;")
    return "\n".join(lines) + "\n"


def _warn_ignored_outputs(machine: MooreMachine) -> None:
    kept: dict[str, str] = {}
    for entry in machine.output_function:
        if entry.current_state not in kept:
            kept[entry.current_state] = entry.output_symbol
            continue
        logger.warning(
            "output_entry_ignored",
            state=entry.current_state,
            output_symbol=entry.output_symbol,
            kept=kept[entry.current_state],
        )


def _warn_undeclared(machine: MooreMachine) -> None:
    # Not validated; reported so the C compiler error is less surprising
    inputs = set(machine.input_alphabet)
    for transition in machine.transitions:
        for symbol in transition.read_symbol:
            if symbol not in inputs:
                logger.warning(
                    "guard_symbol_undeclared",
                    state=transition.current_state,
                    symbol=symbol,
                )

    if machine.start_state not in machine.states:
        logger.warning("start_state_undeclared", start_state=machine.start_state)


class CGenerator:
    """
    Generates C header and source text from a validated Moore machine.

    Templates default to the embedded ones and can be replaced, for example
    with templates loaded from a directory.
    """

    def __init__(
        self,
        header_template: str = HEADER_TEMPLATE,
        source_template: str = SOURCE_TEMPLATE,
    ) -> None:
        """
        Initialize the generator.

        Args:
            header_template: Template for <name>.h
            source_template: Template for <name>.c
        """
        self.header_template = header_template
        self.source_template = source_template

    def generate(
        self,
        name: str,
        state_machine: StateMachine,
    ) -> Result[GeneratedCode, GenerationError]:
        """
        Generate the C code for a machine.

        Args:
            name: Name used for the generated types, function and files
            state_machine: Validated machine

        Returns:
            Result with the generated code, UnsupportedFeatureError for a
            Mealy machine, or TemplateError if a placeholder is left over
        """
        if not state_machine.is_moore:
            logger.error("generation_unsupported", kind=state_machine.kind.value)
            return Err(UnsupportedFeatureError(
                feature="mealy",
                message="C code generation is only implemented for Moore machines",
            ))

        machine = state_machine.machine
        _warn_ignored_outputs(machine)
        _warn_undeclared(machine)

        header_values = {
            "name": name,
            "states": _state_enum_block(machine),
            "inputs": _field_block(machine.input_alphabet),
            "outputs": _field_block(machine.output_alphabet),
            "start_state": machine.start_state,
        }
        source_values = {
            "name": name,
            "reset_outputs": _reset_block(machine),
            "state_cases": "\n".join(_state_case(state, machine) for state in machine.states),
        }

        def assemble(texts: list[str]) -> GeneratedCode:
            header, source = texts
            logger.info(
                "code_generated",
                name=name,
                states=len(machine.states),
                transitions=len(machine.transitions),
            )
            return GeneratedCode(name=name, header=header, source=source)

        return first_err([
            render_template(f"{name}.h", self.header_template, header_values),
            render_template(f"{name}.c", self.source_template, source_values),
        ]).map(assemble)


def generate(
    name: str,
    state_machine: StateMachine,
    files: OutputFiles,
    generator: Optional[CGenerator] = None,
) -> Result[OutputFiles, GenerationError]:
    """
    Generate C code and add it to a set of output files.

    Nothing is added when generation fails.

    Args:
        name: Name used for the generated types, function and files
        state_machine: Validated machine
        files: Output sink receiving <name>.h and <name>.c
        generator: Generator to use (embedded templates by default)

    Returns:
        Result with the same OutputFiles or the generation error
    """
    generator = generator or CGenerator()

    def add_files(code: GeneratedCode) -> OutputFiles:
        for file_name, content in code.files():
            files.add_file(file_name, content)
        return files

    return generator.generate(name, state_machine).map(add_files)
