"""C templates for generated state machines.

Templates are plain text with ``{{token}}`` markers. They contain no loops
or conditionals; per-state and per-symbol blocks are built in Python and
substituted whole.
"""

from __future__ import annotations

import re
from pathlib import Path

from smbuilder.utils.logging import get_logger
from smbuilder.utils.result import Err, Ok, Result, TemplateError

logger = get_logger("generator.templates")

TOKEN_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")

HEADER_TEMPLATE_FILE = "header.h.tmpl"
SOURCE_TEMPLATE_FILE = "source.c.tmpl"

# Tokens: name, states, inputs, outputs, start_state
HEADER_TEMPLATE = """#ifndef SM_{{name}}_H
#define SM_{{name}}_H

#include <stdbool.h>

enum SMStates_{{name}}
{
{{states}}
};

struct SMInput_{{name}}
{
{{inputs}}
};

struct SMOutput_{{name}}
{
{{outputs}}
};

static const enum SMStates_{{name}} SMStart_{{name}} = {{start_state}};

void sm_{{name}} (enum SMStates_{{name}} *state,
    struct SMInput_{{name}} input,
    struct SMOutput_{{name}} *output);

#endif
"""

# Tokens: name, reset_outputs, state_cases
SOURCE_TEMPLATE = """#include "{{name}}.h"

void sm_{{name}} (enum SMStates_{{name}} *state,
    struct SMInput_{{name}} input,
    struct SMOutput_{{name}} *output)
{
{{reset_outputs}}

    switch (*state)
    {
{{state_cases}}
    default:
        break;
    }
}
"""


def find_tokens(text: str) -> list[str]:
    """Return the distinct token names in a template, in order of appearance."""
    return list(dict.fromkeys(TOKEN_PATTERN.findall(text)))


def render_template(
    template_name: str,
    template: str,
    values: dict[str, str],
) -> Result[str, TemplateError]:
    """
    Substitute every ``{{token}}`` in a template.

    Substitution is a single pass, so text inserted for one token is never
    scanned for further tokens.

    Args:
        template_name: Name used in error messages
        template: Template text
        values: Replacement text per token name

    Returns:
        Result with the rendered text, or TemplateError listing tokens that
        have no value
    """
    unknown = [token for token in find_tokens(template) if token not in values]
    if unknown:
        logger.error("template_tokens_unresolved", template=template_name, tokens=unknown)
        return Err(TemplateError(
            template=template_name,
            message="has unresolved placeholders",
            tokens=tuple(unknown),
        ))

    return Ok(TOKEN_PATTERN.sub(lambda m: values[m.group(1)], template))


def load_templates(templates_dir: Path) -> Result[tuple[str, str], TemplateError]:
    """
    Load header and source templates from a directory.

    Args:
        templates_dir: Directory containing header.h.tmpl and source.c.tmpl

    Returns:
        Result with (header, source) template text or a TemplateError
    """
    templates_dir = Path(templates_dir)
    texts = []

    for file_name in (HEADER_TEMPLATE_FILE, SOURCE_TEMPLATE_FILE):
        path = templates_dir / file_name
        try:
            texts.append(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            logger.error("template_read_failed", path=str(path), error=str(e))
            return Err(TemplateError(template=str(path), message=f"could not be read ({e})"))

    logger.debug("templates_loaded", path=str(templates_dir))
    return Ok((texts[0], texts[1]))
