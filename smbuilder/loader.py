"""Load state machine descriptions from YAML.

The document is decoded as a Moore machine and, independently, as a Mealy
machine. Exactly one decoding must succeed; a document that fits both
shapes, or neither, is rejected before any validation runs.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from smbuilder.models import (
    MachineKind,
    MealyMachine,
    ModelDecodeError,
    MooreMachine,
    StateMachine,
)
from smbuilder.utils.logging import get_logger
from smbuilder.utils.result import Err, Ok, ParseError, Result

logger = get_logger("loader")

NEITHER_MESSAGE = (
    "The YAML file does not contain a Moore or a Mealy machine. "
    "Please check the syntax of the file."
)
BOTH_MESSAGE = "The YAML file contains both a Moore and a Mealy machine."

BOOL_TAG = "tag:yaml.org,2002:bool"


class MachineLoader(yaml.SafeLoader):
    """
    Safe loader that only reads true and false as booleans.

    Plain SafeLoader follows YAML 1.1, where on, off, yes and no are
    booleans too. Those are ordinary state and signal names here.
    """


MachineLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
MachineLoader.add_implicit_resolver(
    BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def parse_machine(data: Any) -> Result[StateMachine, ParseError]:
    """
    Decide which variant a decoded document describes.

    Args:
        data: Decoded YAML document

    Returns:
        Result with the tagged machine or a ParseError
    """
    moore: MooreMachine | None = None
    mealy: MealyMachine | None = None
    reasons: list[str] = []

    try:
        moore = MooreMachine.from_dict(data)
    except ModelDecodeError as e:
        reasons.append(f"moore: {e}")

    try:
        mealy = MealyMachine.from_dict(data)
    except ModelDecodeError as e:
        reasons.append(f"mealy: {e}")

    if moore is not None and mealy is not None:
        logger.error("parse_ambiguous")
        return Err(ParseError(message=BOTH_MESSAGE))

    if moore is not None:
        logger.info("machine_parsed", kind="moore", states=len(moore.states))
        return Ok(StateMachine(kind=MachineKind.MOORE, machine=moore))

    if mealy is not None:
        logger.info("machine_parsed", kind="mealy", states=len(mealy.states))
        return Ok(StateMachine(kind=MachineKind.MEALY, machine=mealy))

    logger.error("parse_failed", reasons=reasons)
    return Err(ParseError(message=NEITHER_MESSAGE, details="; ".join(reasons)))


def parse_yaml(yaml_str: str) -> Result[StateMachine, ParseError]:
    """
    Parse YAML text into a Moore or a Mealy machine.

    Args:
        yaml_str: YAML document

    Returns:
        Result with the tagged machine or a ParseError
    """
    try:
        data = yaml.load(yaml_str, Loader=MachineLoader)
    except yaml.YAMLError as e:
        logger.error("yaml_invalid", error=str(e))
        return Err(ParseError(message="Failed to parse YAML", details=str(e)))

    return parse_machine(data)


def read_machine_file(path: Path) -> Result[str, ParseError]:
    """Read a state machine file as UTF-8 text."""
    path = Path(path)

    try:
        return Ok(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        logger.error("input_read_failed", path=str(path), error=str(e))
        return Err(ParseError(message=f"Failed to read {path}", details=str(e)))


def load_machine(path: Path) -> Result[StateMachine, ParseError]:
    """
    Read and parse a state machine file.

    Args:
        path: Path to the YAML file

    Returns:
        Result with the tagged machine or a ParseError
    """
    return read_machine_file(path).and_then(parse_yaml)
