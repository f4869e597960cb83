#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

Coverage vector export: row (one line per sample) and column (one value
per line) text formats.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import TextIO

import numpy as np

from ..coverage.accumulator import CoverageVector
from ..io.io_core_module import open_file

logger = logging.getLogger(__name__)

DEFAULT_NODE_PREFIX = "node."


# ============================================================================
#                           VALUE FORMATTING
# ============================================================================

def format_value(value) -> str:
    """
    Render a coverage value.

    Uses the shortest positional representation that reads back to the
    same value at the vector's precision, without a trailing '.0'.

    Example:
        >>> format_value(10.0), format_value(0.4)
        ('10', '0.4')
    """
    return np.format_float_positional(value, unique=True, trim='-')


# ============================================================================
#                           FORMATS
# ============================================================================

def format_row(vector: CoverageVector, sample: str, node_prefix: str = DEFAULT_NODE_PREFIX) -> str:
    """
    Row format: a header naming every node, then one line of values.

    Format:
        #sample<TAB>node.<id1><TAB>node.<id2>...
        <sample><TAB><v1><TAB><v2>...
    """
    header = ["#sample"] + [f"{node_prefix}{node_id}" for node_id in vector.node_ids]
    values = [sample] + [format_value(v) for v in vector.values]
    return "\t".join(header) + "\n" + "\t".join(values) + "\n"


def format_column(vector: CoverageVector, sample: str) -> str:
    """
    Column format: sample comment, header, then one value per node.

    Format:
        ##sample: <sample>
        #coverage
        <v1>
        <v2>
        ...
    """
    lines = [f"##sample: {sample}", "#coverage"]
    lines.extend(format_value(v) for v in vector.values)
    return "\n".join(lines) + "\n"


def render_coverage(vector: CoverageVector, sample: str, coverage_column: bool = False,
                    node_prefix: str = DEFAULT_NODE_PREFIX) -> str:
    """Render a vector in the selected format."""
    if coverage_column:
        return format_column(vector, sample)
    return format_row(vector, sample, node_prefix)


def write_coverage(vector: CoverageVector, sample: str, handle: TextIO,
                   coverage_column: bool = False, node_prefix: str = DEFAULT_NODE_PREFIX) -> None:
    """Write a rendered vector to an open text handle."""
    handle.write(render_coverage(vector, sample, coverage_column, node_prefix))


def export_coverage(vector: CoverageVector, sample: str, output_path: str | Path,
                    coverage_column: bool = False,
                    node_prefix: str = DEFAULT_NODE_PREFIX) -> Path:
    """
    Write a coverage vector to a file (gzip compressed for .gz/.bgz paths).

    Args:
        vector: Finalized coverage vector
        sample: Sample label for the header
        output_path: Destination file
        coverage_column: Column format instead of row format
        node_prefix: Prefix of node column labels in row format

    Returns:
        Path written
    """
    output_path = Path(output_path)
    fmt = "column" if coverage_column else "row"
    logger.info(f"Writing {len(vector)} node coverage values ({fmt} format) to {output_path}")

    with open_file(output_path, 'w') as f:
        write_coverage(vector, sample, f, coverage_column, node_prefix)

    return output_path

# Gafpack v0.1.0
# Any usage is subject to this software's license.
