"""CLI entry point for smbuilder."""

from __future__ import annotations

import re
import sys
import time
from pathlib import Path
from typing import Any, NoReturn, Optional, TypeVar

import click

from smbuilder import __version__
from smbuilder.config import BuilderConfig, load_config
from smbuilder.generator import CGenerator, generate, load_templates
from smbuilder.loader import load_machine
from smbuilder.models import StateMachine
from smbuilder.pipeline import run_checks
from smbuilder.utils.files import OutputFiles
from smbuilder.utils.logging import (
    configure_logging,
    get_correlation_id,
    get_logger,
    log_stage_timing,
    set_stage,
)
from smbuilder.utils.result import ExitCode, Result

T = TypeVar("T")

C_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class Context:
    """CLI context for sharing state between commands."""

    def __init__(self, config: BuilderConfig) -> None:
        self.config = config
        self.logger = get_logger("cli")


pass_context = click.make_pass_decorator(Context)


def fail(error: Any) -> NoReturn:
    """Print an error and exit with its code."""
    click.echo(f"Error: {error}", err=True)
    click.get_current_context().exit(getattr(error, "code", ExitCode.GENERAL_ERROR))


def unwrap_or_exit(result: Result[T, Any]) -> T:
    """Return the success value of a stage, or exit with its error."""
    if result.is_err():
        fail(result.unwrap_err())
    return result.unwrap()


def validate_name(ctx: click.Context, param: click.Parameter, value: str) -> str:
    """The machine name becomes part of C identifiers and file names."""
    if not C_IDENTIFIER.fullmatch(value):
        raise click.BadParameter(
            "must be a C identifier: letters, digits and underscores, not starting with a digit"
        )
    return value


def parse_and_check(yaml_file: Path) -> StateMachine:
    """Load a machine and run the structural checks, exiting on failure."""
    set_stage("parse")
    state_machine = unwrap_or_exit(load_machine(yaml_file))

    set_stage("validate")
    unwrap_or_exit(run_checks(state_machine.machine))

    return state_machine


def make_generator(config: BuilderConfig) -> CGenerator:
    """Build a generator using the configured templates, if any."""
    if config.templates_dir is None:
        return CGenerator()

    header_template, source_template = unwrap_or_exit(load_templates(config.templates_dir))
    return CGenerator(header_template=header_template, source_template=source_template)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config file (default: ./smbuilder.yaml if present)",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"], case_sensitive=False),
    default=None,
    help="Logging level",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default=None,
    help="Log format",
)
@click.version_option(version=__version__, prog_name="smbuilder")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """
    State Machine Builder - generate C code from YAML state machines.

    Reads a Moore or Mealy machine description, checks its structure and
    writes <name>.h and <name>.c implementing the machine's step function.
    """
    config = unwrap_or_exit(load_config(config_path))
    config = config.with_logging(
        level=log_level.lower() if log_level else None,
        format_type=log_format.lower() if log_format else None,
    )

    configure_logging(level=config.logging.level, format_type=config.logging.format)
    get_correlation_id()

    ctx.obj = Context(config=config)


@cli.command()
@click.option(
    "-y",
    "--yaml-file",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="The YAML file with the state machine",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: named after the input file)",
)
@click.option(
    "-n",
    "--name",
    required=True,
    callback=validate_name,
    help="Name of the state machine, used for the C types and file names",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Generate but don't write any files",
)
@pass_context
def build(
    ctx: Context,
    yaml_file: Path,
    output: Optional[Path],
    name: str,
    dry_run: bool,
) -> None:
    """Validate a state machine and generate its C code."""
    started = time.monotonic()
    ctx.logger.info("build_started", yaml_file=str(yaml_file), name=name, dry_run=dry_run)

    state_machine = parse_and_check(yaml_file)

    set_stage("generate")
    generator = make_generator(ctx.config)
    files = OutputFiles(output if output is not None else ctx.config.output_root / yaml_file.stem)
    unwrap_or_exit(generate(name, state_machine, files, generator))

    if dry_run:
        click.echo(f"Would write {', '.join(files.names)} to {files.path}.")
        return

    set_stage("write")
    message = unwrap_or_exit(files.write())

    log_stage_timing("build", time.monotonic() - started)
    click.echo(message)


@cli.command()
@click.option(
    "-y",
    "--yaml-file",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="The YAML file with the state machine",
)
@pass_context
def check(ctx: Context, yaml_file: Path) -> None:
    """Parse and validate a state machine without generating code."""
    ctx.logger.info("check_started", yaml_file=str(yaml_file))

    state_machine = parse_and_check(yaml_file)
    machine = state_machine.machine

    click.echo(
        f"{yaml_file} is a valid {state_machine.kind.value} machine "
        f"({len(machine.states)} states, {len(machine.transitions)} transitions)."
    )


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        logger = get_logger("cli")
        logger.error("cli_error", error=str(e))
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
