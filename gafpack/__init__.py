#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

Package initialization and version metadata.

Projects GAF alignments onto the nodes of a GFA pangenome graph and
produces a per-node coverage vector.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

from .version import __version__
from .errors import (
    GafpackError,
    MalformedGraph,
    MalformedAlignment,
    UnknownNode,
    StreamNotRewindable,
    UnreadableInput,
)
from .pipeline import CoverageOptions, compute_coverage

__all__ = [
    "__version__",
    "GafpackError",
    "MalformedGraph",
    "MalformedAlignment",
    "UnknownNode",
    "StreamNotRewindable",
    "UnreadableInput",
    "CoverageOptions",
    "compute_coverage",
]

# Gafpack v0.1.0
# Any usage is subject to this software's license.
