"""
Gafpack v0.1.0

Output utilities: coverage vector rendering in row and column formats.
"""

from .vector_export import (
    DEFAULT_NODE_PREFIX,
    format_value,
    format_row,
    format_column,
    render_coverage,
    write_coverage,
    export_coverage,
)

__all__ = [
    "DEFAULT_NODE_PREFIX",
    "format_value",
    "format_row",
    "format_column",
    "render_coverage",
    "write_coverage",
    "export_coverage",
]
