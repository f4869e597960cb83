#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

Coverage accumulation over graph nodes.

Per path step the contribution is

    overlap / occurrences[query_key]      (query weighting on)
    overlap                               (query weighting off)

summed per node in a numpy.longdouble running total, in file order.
Length scaling divides every node's finished total by the node length;
the divisor is constant per node, so this is the per-step formula with
the factor taken out of the sum, and it makes the scaled vector exactly
equal to the unscaled one divided by node length.

On platforms where numpy.longdouble is plain float64 the sums are
double precision; the summation order is still fixed (file order).

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

from __future__ import annotations
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from ..alignment.gaf_parser import AlignmentRecord, parse_gaf_line
from ..errors import MalformedAlignment, MalformedGraph
from ..graph.graph_index import GraphIndex
from ..io.io_core_module import LineSource

logger = logging.getLogger(__name__)


# ============================================================================
#                           COVERAGE VECTOR
# ============================================================================

class CoverageVector:
    """
    Finalized per-node coverage, in GraphIndex order.

    The underlying array is read-only; values are numpy.longdouble.
    """

    def __init__(self, graph: GraphIndex, values: np.ndarray):
        if len(values) != len(graph):
            raise ValueError(f"Vector has {len(values)} values for {len(graph)} nodes")
        self.graph = graph
        self._values = np.array(values, dtype=np.longdouble)
        self._values.flags.writeable = False

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, node_id: str) -> float:
        return float(self._values[self.graph.handle(node_id)])

    def __iter__(self) -> Iterator[str]:
        return iter(self.graph.node_ids)

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def node_ids(self) -> tuple[str, ...]:
        return self.graph.node_ids

    def items(self) -> Iterator[tuple[str, float]]:
        for node_id, value in zip(self.graph.node_ids, self._values):
            yield node_id, float(value)

    def as_dict(self) -> dict[str, float]:
        return dict(self.items())

    def merge(self, other: CoverageVector) -> CoverageVector:
        """
        Node-wise sum of two vectors built against the same graph.

        Partial vectors from separate alignment shards combine this way.
        """
        if other.graph is not self.graph and other.graph.node_ids != self.graph.node_ids:
            raise ValueError("Cannot merge coverage vectors built on different graphs")
        return CoverageVector(self.graph, self._values + other.values)

    def __repr__(self) -> str:
        return f"CoverageVector(nodes={len(self)}, total={float(self._values.sum()):.6g})"


# ============================================================================
#                           ACCUMULATOR
# ============================================================================

@dataclass
class AccumulationStats:
    """Counters reported after a pass."""
    records: int = 0
    unmapped: int = 0
    steps: int = 0
    bases: int = 0
    path_length_mismatches: int = 0


class CoverageAccumulator:
    """
    Single-pass coverage accumulation.

    Owns the running totals until finalize() hands out a read-only
    CoverageVector; after that no more records are accepted.

    Args:
        graph: Graph index the records were parsed against
        len_scale: Divide node totals by node length
        occurrences: Query occurrence table; None disables query weighting
        query_key: Key mode the occurrence table was built with

    Raises:
        MalformedGraph: If len_scale is set and the graph has a zero-length node
    """

    def __init__(self, graph: GraphIndex, len_scale: bool = False,
                 occurrences: Optional[Mapping[str, int]] = None,
                 query_key: str = 'name'):
        if len_scale and graph.has_zero_length:
            zero = [node.node_id for node in graph if node.length == 0]
            raise MalformedGraph(
                f"cannot scale coverage by length: zero-length node(s) {', '.join(zero[:5])}"
                + (" ..." if len(zero) > 5 else ""),
                graph.source,
            )
        self.graph = graph
        self.len_scale = len_scale
        self.occurrences = occurrences
        self.query_key = query_key
        self.stats = AccumulationStats()
        self._totals = np.zeros(len(graph), dtype=np.longdouble)
        self._finalized = False

    @property
    def weighted(self) -> bool:
        return self.occurrences is not None

    def add(self, record: AlignmentRecord, source: Optional[str] = None) -> None:
        """
        Add one record's steps to the running totals.

        Raises:
            MalformedAlignment: If weighting is on and the record's query key
                                is missing from the occurrence table
        """
        if self._finalized:
            raise RuntimeError("CoverageAccumulator is finalized")

        self.stats.records += 1
        if record.path_length != record.walked_length:
            self.stats.path_length_mismatches += 1
        if record.is_unmapped:
            self.stats.unmapped += 1
            return

        totals = self._totals
        if self.occurrences is None:
            for step in record.steps:
                totals[step.handle] += step.overlap
        else:
            key = record.query_key(self.query_key)
            count = self.occurrences.get(key, 0)
            if count <= 0:
                raise MalformedAlignment(
                    f"query key '{key}' missing from occurrence table (input changed between passes?)",
                    source, record.line_no,
                )
            divisor = np.longdouble(count)
            for step in record.steps:
                totals[step.handle] += np.longdouble(step.overlap) / divisor

        self.stats.steps += len(record.steps)
        self.stats.bases += record.total_overlap

    def add_all(self, records: Iterable[AlignmentRecord], source: Optional[str] = None) -> None:
        for record in records:
            self.add(record, source)

    def consume(self, source: LineSource) -> None:
        """Parse and add every record of a GAF source, in file order."""
        logger.info(f"Accumulating coverage from {source.name}")
        for line_no, line in source.lines():
            if not line:
                continue
            self.add(parse_gaf_line(line, self.graph, line_no, source.name), source.name)

        stats = self.stats
        logger.info(
            f"Processed {stats.records:,} records ({stats.unmapped:,} unmapped), "
            f"{stats.steps:,} node steps, {stats.bases:,} bases"
        )
        if stats.path_length_mismatches:
            logger.warning(
                f"{source.name}: {stats.path_length_mismatches:,} records declare a path length "
                f"that differs from the graph's node lengths"
            )

    def finalize(self) -> CoverageVector:
        """Apply length scaling and return the read-only coverage vector."""
        if self._finalized:
            raise RuntimeError("CoverageAccumulator is already finalized")
        self._finalized = True

        values = self._totals
        if self.len_scale:
            values = values / self.graph.lengths.astype(np.longdouble)
        logger.debug(
            f"Finalized coverage vector (len_scale={self.len_scale}, weighted={self.weighted})"
        )
        return CoverageVector(self.graph, values)

# Gafpack v0.1.0
# Any usage is subject to this software's license.
