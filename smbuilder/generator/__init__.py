"""C code generator module."""

from smbuilder.generator.c_generator import (
    CGenerator,
    GeneratedCode,
    format_guard,
    generate,
    select_output,
    select_transitions,
)
from smbuilder.generator.templates import (
    HEADER_TEMPLATE,
    SOURCE_TEMPLATE,
    load_templates,
    render_template,
)

__all__ = [
    # Generator
    "generate",
    "CGenerator",
    "GeneratedCode",
    "select_output",
    "select_transitions",
    "format_guard",
    # Templates
    "HEADER_TEMPLATE",
    "SOURCE_TEMPLATE",
    "load_templates",
    "render_template",
]
