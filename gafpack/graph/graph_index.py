#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

Graph Index: GFA segment table with stable node ordering.

Reads the segment (S) lines of a GFA v1 or v2 file and keeps, for each
node, its identifier and declared length. Sequence text is never stored.
Node identity inside the accumulation loop is an integer handle: the
node's position in declaration order.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

from __future__ import annotations
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterator

import numpy as np

from ..errors import MalformedGraph, UnknownNode
from ..io.io_core_module import LineSource

logger = logging.getLogger(__name__)


# ============================================================================
#                           DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True)
class Node:
    """A graph segment: identifier and declared sequence length."""
    node_id: str
    length: int


class GraphIndex:
    """
    Ordered, immutable node table.

    Nodes keep the order in which the GFA declared them; that order is
    the column order of every emitted coverage vector.
    """

    def __init__(self, node_ids: list[str], lengths: list[int], source: str | None = None,
                 record_counts: Counter | None = None):
        handles: dict[str, int] = {}
        for handle, node_id in enumerate(node_ids):
            if node_id in handles:
                raise MalformedGraph(f"duplicate segment identifier '{node_id}'", source)
            handles[node_id] = handle

        self.source = source
        self._node_ids = tuple(node_ids)
        self._handles = handles
        self._lengths = np.asarray(lengths, dtype=np.int64)
        self._lengths.flags.writeable = False
        self.record_counts = Counter(record_counts or {})

    def __len__(self) -> int:
        return len(self._node_ids)

    def __iter__(self) -> Iterator[Node]:
        for node_id, length in zip(self._node_ids, self._lengths):
            yield Node(node_id, int(length))

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._handles

    @property
    def node_ids(self) -> tuple[str, ...]:
        """Node identifiers in declaration order."""
        return self._node_ids

    @property
    def lengths(self) -> np.ndarray:
        """Read-only array of node lengths, indexed by handle."""
        return self._lengths

    @property
    def total_length(self) -> int:
        return int(self._lengths.sum())

    @property
    def has_zero_length(self) -> bool:
        return bool((self._lengths == 0).any())

    def handle(self, node_id: str, line_no: int | None = None, source: str | None = None) -> int:
        """
        Resolve a node identifier to its integer handle.

        Raises:
            UnknownNode: If the graph does not declare the node
        """
        try:
            return self._handles[node_id]
        except KeyError:
            raise UnknownNode(node_id, source, line_no) from None

    def length_of(self, handle: int) -> int:
        return int(self._lengths[handle])

    def node(self, handle: int) -> Node:
        return Node(self._node_ids[handle], int(self._lengths[handle]))

    def summary(self) -> dict[str, int]:
        """
        Basic statistics for logging and the graph-stats command.

        Returns:
            Dict with keys: 'segments', 'total_length', 'zero_length',
            plus a count for every other GFA record type seen ('links', 'paths', ...)
        """
        stats = {
            'segments': len(self),
            'total_length': self.total_length,
            'zero_length': int((self._lengths == 0).sum()),
        }
        for record_type, name in RECORD_NAMES.items():
            stats[name] = self.record_counts.get(record_type, 0)
        return stats

    def __repr__(self) -> str:
        return f"GraphIndex(nodes={len(self)}, total_length={self.total_length})"


RECORD_NAMES = {
    'L': 'links',
    'P': 'paths',
    'W': 'walks',
    'E': 'edges',
    'O': 'ordered_groups',
    'U': 'unordered_groups',
}


# ============================================================================
#                           GFA READER
# ============================================================================

def _parse_length(text: str, source: str, line_no: int) -> int:
    try:
        length = int(text)
    except ValueError:
        raise MalformedGraph(f"segment length '{text}' is not an integer", source, line_no) from None
    if length < 0:
        raise MalformedGraph(f"negative segment length {length}", source, line_no)
    return length


def _gfa1_segment(parts: list[str], source: str, line_no: int) -> tuple[str, int]:
    """S <name> <sequence> [LN:i:<length>] ..."""
    if len(parts) < 2 or not parts[1]:
        raise MalformedGraph("segment line without identifier", source, line_no)
    if len(parts) < 3:
        raise MalformedGraph(f"segment '{parts[1]}' has no sequence field", source, line_no)

    for tag in parts[3:]:
        if tag.startswith('LN:i:'):
            return parts[1], _parse_length(tag[5:], source, line_no)

    sequence = parts[2]
    if sequence == '*':
        raise MalformedGraph(
            f"segment '{parts[1]}' has neither a sequence nor an LN:i tag", source, line_no
        )
    return parts[1], len(sequence)


def _gfa2_segment(parts: list[str], source: str, line_no: int) -> tuple[str, int]:
    """S <sid> <slen> <sequence> ..."""
    if len(parts) < 2 or not parts[1]:
        raise MalformedGraph("segment line without identifier", source, line_no)
    if len(parts) < 3 or not parts[2]:
        raise MalformedGraph(f"segment '{parts[1]}' has no length field", source, line_no)
    return parts[1], _parse_length(parts[2], source, line_no)


def read_graph_index(source: LineSource) -> GraphIndex:
    """
    Build a GraphIndex from a GFA line source.

    Only S-lines are interpreted. For GFA v1 the LN:i tag is the declared
    length and the sequence text length is the fallback; for GFA v2 (an
    H-line with VN:Z:2.x) the explicit length column is used. All other
    line kinds are counted for the summary and otherwise skipped.

    Args:
        source: GFA input

    Returns:
        Immutable GraphIndex in declaration order

    Raises:
        MalformedGraph: On segment lines without identifier or length,
                        non-integer lengths, or duplicate identifiers
    """
    logger.info(f"Loading graph from GFA: {source.name}")

    node_ids: list[str] = []
    lengths: list[int] = []
    seen: dict[str, int] = {}
    record_counts: Counter = Counter()
    parse_segment = _gfa1_segment

    for line_no, line in source.lines():
        if not line or line.startswith('#'):
            continue

        parts = line.split('\t')
        record_type = parts[0]

        if record_type == 'H':
            for tag in parts[1:]:
                if tag.startswith('VN:Z:2'):
                    logger.debug(f"{source.name}: GFA2 header on line {line_no}")
                    parse_segment = _gfa2_segment
            continue

        if record_type != 'S':
            record_counts[record_type] += 1
            continue

        node_id, length = parse_segment(parts, source.name, line_no)
        if node_id in seen:
            raise MalformedGraph(
                f"duplicate segment identifier '{node_id}' (first declared on line {seen[node_id]})",
                source.name, line_no,
            )
        seen[node_id] = line_no
        node_ids.append(node_id)
        lengths.append(length)

    index = GraphIndex(node_ids, lengths, source=source.name, record_counts=record_counts)

    logger.info(f"Loaded graph: {len(index)} nodes, {index.total_length:,} bp")
    if index.has_zero_length:
        logger.warning(f"{source.name}: graph declares zero-length segments")
    return index


def load_graph_index(gfa: str | Path | IO) -> GraphIndex:
    """Convenience wrapper: build a GraphIndex from a path or open file."""
    return read_graph_index(LineSource(gfa))

# Gafpack v0.1.0
# Any usage is subject to this software's license.
