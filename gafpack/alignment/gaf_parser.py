#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

GAF record parsing and per-node overlap computation.

GAF columns (tab separated, 12 mandatory, then SAM-style tags):

    0 query name      4 strand        8 target end
    1 query length    5 target path   9 residue matches
    2 query start     6 path length  10 alignment block length
    3 query end       7 target start 11 mapping quality

Target start/end are offsets on the concatenation of the path's node
sequences. Each traversed node receives the part of the [start, end)
window that falls inside its own range on that concatenation.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..errors import MalformedAlignment
from ..graph.graph_index import GraphIndex

logger = logging.getLogger(__name__)


GAF_MANDATORY_FIELDS = 12
UNMAPPED = '*'

# Column index -> name, for every column that must hold an integer
NUMERIC_FIELDS = {
    1: 'query length',
    2: 'query start',
    3: 'query end',
    6: 'path length',
    7: 'target start',
    8: 'target end',
    9: 'residue matches',
    10: 'alignment block length',
    11: 'mapping quality',
}
VALID_STRANDS = ('+', '-', '*')

QUERY_KEY_MODES = ('name', 'name-span')

_ORIENTED_PATH = re.compile(r'(?:[<>][^<>]+)+')
_PATH_STEP = re.compile(r'([<>])([^<>]+)')


# ============================================================================
#                           DATA STRUCTURES
# ============================================================================

class Orientation(Enum):
    """Direction in which a path step traverses its node."""
    FORWARD = '>'
    REVERSE = '<'


@dataclass(frozen=True)
class PathStep:
    """One traversed node: graph handle, orientation and bases covered."""
    handle: int
    orientation: Orientation
    overlap: int


@dataclass
class AlignmentRecord:
    """
    Parsed GAF line reduced to what coverage projection needs.

    Attributes:
        query_name: Read / query identifier
        query_start: 0-based start on the query
        query_end: End on the query (exclusive)
        steps: Nodes overlapped by the target window, in path order
        path_length: Path length as declared in the record
        walked_length: Path length summed from the graph's node lengths
        line_no: Source line number, if known
    """
    query_name: str
    query_start: int
    query_end: int
    steps: list[PathStep] = field(default_factory=list)
    path_length: int = 0
    walked_length: int = 0
    line_no: Optional[int] = None

    @property
    def is_unmapped(self) -> bool:
        return not self.steps and self.walked_length == 0

    @property
    def total_overlap(self) -> int:
        return sum(step.overlap for step in self.steps)

    def query_key(self, mode: str = 'name') -> str:
        """Key under which this record is counted for query weighting."""
        return make_query_key(self.query_name, self.query_start, self.query_end, mode)


# ============================================================================
#                           FIELD PARSING
# ============================================================================

def make_query_key(name: str, start: int, end: int, mode: str = 'name') -> str:
    """
    Build a query-weighting key.

    Args:
        name: Query name
        start: Query start
        end: Query end
        mode: 'name' groups every record of a read together;
              'name-span' groups records aligning the same query interval

    Raises:
        ValueError: On an unknown mode
    """
    if mode == 'name':
        return name
    if mode == 'name-span':
        return f"{name}:{start}:{end}"
    raise ValueError(f"Unknown query key mode: {mode} (expected one of {QUERY_KEY_MODES})")


def _split_fields(line: str, line_no: Optional[int], source: Optional[str]) -> list[str]:
    fields = line.split('\t')
    if len(fields) < GAF_MANDATORY_FIELDS:
        raise MalformedAlignment(
            f"expected at least {GAF_MANDATORY_FIELDS} tab-separated fields, found {len(fields)}",
            source, line_no,
        )
    if not fields[0]:
        raise MalformedAlignment("empty query name", source, line_no)
    return fields


def _parse_int(fields: list[str], column: int, line_no: Optional[int], source: Optional[str]) -> int:
    text = fields[column]
    try:
        value = int(text)
    except ValueError:
        raise MalformedAlignment(
            f"{NUMERIC_FIELDS[column]} '{text}' is not an integer", source, line_no
        ) from None
    if value < 0:
        raise MalformedAlignment(f"negative {NUMERIC_FIELDS[column]} {value}", source, line_no)
    return value


def split_path(path: str, line_no: Optional[int] = None,
               source: Optional[str] = None) -> list[tuple[str, Orientation]]:
    """
    Split a GAF target path into (node_id, orientation) pairs.

    Examples:
        >>> [node_id for node_id, _ in split_path('>1<2>3')]
        ['1', '2', '3']
        >>> split_path('chr1')[0][1].value
        '>'

    A path without orientation markers is a single stable sequence name
    traversed forward.

    Raises:
        MalformedAlignment: On an empty path or an orientation marker without node id
    """
    if not path:
        raise MalformedAlignment("empty target path", source, line_no)
    if path[0] not in '<>':
        if '<' in path or '>' in path:
            raise MalformedAlignment(f"malformed target path '{path}'", source, line_no)
        return [(path, Orientation.FORWARD)]
    if not _ORIENTED_PATH.fullmatch(path):
        raise MalformedAlignment(f"malformed target path '{path}'", source, line_no)
    return [(node_id, Orientation(marker)) for marker, node_id in _PATH_STEP.findall(path)]


def parse_query_key(line: str, mode: str = 'name', line_no: Optional[int] = None,
                    source: Optional[str] = None) -> str:
    """
    Extract only the query-weighting key from a GAF line.

    Used by the occurrence-counting pass, which does not need the graph.

    Raises:
        MalformedAlignment: On too few fields or non-integer query offsets
    """
    fields = _split_fields(line, line_no, source)
    if mode == 'name':
        return fields[0]
    start = _parse_int(fields, 2, line_no, source)
    end = _parse_int(fields, 3, line_no, source)
    return make_query_key(fields[0], start, end, mode)


# ============================================================================
#                           RECORD PARSING
# ============================================================================

def parse_gaf_line(line: str, graph: GraphIndex, line_no: Optional[int] = None,
                   source: Optional[str] = None) -> AlignmentRecord:
    """
    Parse one GAF line into an AlignmentRecord with per-node overlaps.

    Walks the target path, giving each node the range
    [offset, offset + node_length) on the path, and intersects it with the
    record's [target_start, target_end) window. Nodes outside the window
    are dropped from the step list; nodes cut by the window keep only the
    intersecting span. An unmapped record (path '*') has no steps.

    Args:
        line: GAF line without trailing newline
        graph: Graph index used to resolve node ids and lengths
        line_no: Line number for error messages
        source: Source name for error messages

    Returns:
        AlignmentRecord

    Raises:
        MalformedAlignment: On missing/non-numeric fields, an invalid strand,
                            a malformed path, or a window outside the path
        UnknownNode: If a path entry is not declared by the graph
    """
    fields = _split_fields(line, line_no, source)
    _parse_int(fields, 1, line_no, source)
    query_start = _parse_int(fields, 2, line_no, source)
    query_end = _parse_int(fields, 3, line_no, source)

    if fields[4] not in VALID_STRANDS:
        raise MalformedAlignment(f"invalid strand '{fields[4]}'", source, line_no)

    record = AlignmentRecord(
        query_name=fields[0],
        query_start=query_start,
        query_end=query_end,
        line_no=line_no,
    )

    path = fields[5]
    if path == UNMAPPED:
        return record

    numbers = {column: _parse_int(fields, column, line_no, source) for column in range(6, 12)}
    target_start = numbers[7]
    target_end = numbers[8]
    record.path_length = numbers[6]

    if target_start > target_end:
        raise MalformedAlignment(
            f"target start {target_start} is past target end {target_end}", source, line_no
        )

    lengths = graph.lengths
    offset = 0
    for node_id, orientation in split_path(path, line_no, source):
        handle = graph.handle(node_id, line_no, source)
        node_end = offset + int(lengths[handle])
        overlap = min(node_end, target_end) - max(offset, target_start)
        if overlap > 0:
            record.steps.append(PathStep(handle, orientation, overlap))
        offset = node_end

    record.walked_length = offset
    if target_end > offset:
        raise MalformedAlignment(
            f"target end {target_end} is past the end of the path ({offset} bp)", source, line_no
        )
    return record

# Gafpack v0.1.0
# Any usage is subject to this software's license.
