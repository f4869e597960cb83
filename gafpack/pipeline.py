#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

Coverage projection pipeline.

Order of work:
    1. build the GraphIndex from the GFA
    2. (query weighting only) count records per query key over the GAF
    3. accumulate per-node coverage over the GAF
    4. render the finalized vector

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Optional, TextIO, Union

from .alignment.gaf_parser import QUERY_KEY_MODES
from .coverage.accumulator import CoverageAccumulator, CoverageVector
from .coverage.query_weights import count_query_occurrences
from .graph.graph_index import GraphIndex, read_graph_index
from .io.io_core_module import LineSource
from .io_utils.vector_export import export_coverage, write_coverage

logger = logging.getLogger(__name__)

Source = Union[str, Path, IO, LineSource]


@dataclass
class CoverageOptions:
    """
    Resolved switches for one coverage run.

    Attributes:
        len_scale: Divide node coverage by node length
        weight_queries: Divide each record's contribution by the number of
                        records sharing its query key (reads the GAF twice)
        coverage_column: Emit one value per line instead of a single row
        query_key: 'name' or 'name-span'
        node_label_prefix: Prefix of node column labels in row output
    """
    len_scale: bool = False
    weight_queries: bool = False
    coverage_column: bool = False
    query_key: str = 'name'
    node_label_prefix: str = 'node.'

    def __post_init__(self):
        if self.query_key not in QUERY_KEY_MODES:
            raise ValueError(
                f"Invalid query key mode: {self.query_key} (expected one of {QUERY_KEY_MODES})"
            )

    @classmethod
    def from_config(cls, config: dict[str, Any], **overrides) -> CoverageOptions:
        """
        Resolve options from a configuration dict plus CLI overrides.

        Boolean overrides switch a feature on; False or None leaves the
        configured value. Other overrides replace the configured value
        unless they are None.
        """
        coverage = config.get('coverage', {})
        output = config.get('output', {})
        options = cls(
            len_scale=bool(coverage.get('len_scale', False)),
            weight_queries=bool(coverage.get('weight_queries', False)),
            coverage_column=bool(output.get('coverage_column', False)),
            query_key=coverage.get('query_key', 'name'),
            node_label_prefix=output.get('node_label_prefix', 'node.'),
        )
        for key, value in overrides.items():
            if value is None:
                continue
            if isinstance(value, bool):
                if value:
                    setattr(options, key, True)
            else:
                setattr(options, key, value)
        options.__post_init__()
        return options


def _as_source(source: Source) -> LineSource:
    return source if isinstance(source, LineSource) else LineSource(source)


def compute_coverage(graph: GraphIndex, alignments: Source,
                     options: Optional[CoverageOptions] = None) -> CoverageVector:
    """
    Project GAF alignments onto a graph index.

    Args:
        graph: Graph index
        alignments: GAF source (path, open file, '-' for stdin, or LineSource)
        options: Run options (defaults: no scaling, no weighting)

    Returns:
        Finalized CoverageVector; nothing is returned if any record fails

    Raises:
        StreamNotRewindable: Weighting requested on a one-shot source
        MalformedGraph: Length scaling with a zero-length node
        MalformedAlignment: Bad GAF record
        UnknownNode: GAF path refers to a node missing from the graph
    """
    options = options or CoverageOptions()
    source = _as_source(alignments)

    occurrences = None
    if options.weight_queries:
        occurrences = count_query_occurrences(source, options.query_key)

    accumulator = CoverageAccumulator(
        graph,
        len_scale=options.len_scale,
        occurrences=occurrences,
        query_key=options.query_key,
    )
    accumulator.consume(source)
    return accumulator.finalize()


def project_coverage(gfa: Source, gaf: Source,
                     options: Optional[CoverageOptions] = None) -> tuple[GraphIndex, CoverageVector, str]:
    """
    Full run from file inputs to a finalized vector.

    The GAF source is checked for rewindability before the graph is read
    when query weighting is requested.

    Returns:
        (graph index, coverage vector, sample label)
    """
    options = options or CoverageOptions()
    gaf_source = _as_source(gaf)
    if options.weight_queries:
        gaf_source.require_rewindable()

    start = time.time()
    graph = read_graph_index(_as_source(gfa))
    vector = compute_coverage(graph, gaf_source, options)
    logger.info(f"Coverage projection finished in {time.time() - start:.2f}s")
    return graph, vector, gaf_source.name


def write_projection(vector: CoverageVector, sample: str, options: CoverageOptions,
                     handle: Optional[TextIO] = None, output_path: Optional[Path] = None) -> None:
    """Emit a finalized vector to an open handle or to a file."""
    if output_path is not None:
        export_coverage(vector, sample, output_path, options.coverage_column,
                        options.node_label_prefix)
    else:
        write_coverage(vector, sample, handle, options.coverage_column,
                       options.node_label_prefix)

# Gafpack v0.1.0
# Any usage is subject to this software's license.
