#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

Query occurrence counting for query-weighted coverage.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

from __future__ import annotations
import logging
from collections import Counter

from ..alignment.gaf_parser import parse_query_key
from ..io.io_core_module import LineSource

logger = logging.getLogger(__name__)


def count_query_occurrences(source: LineSource, mode: str = 'name') -> Counter:
    """
    Count GAF records per query key.

    This is the first of two passes over the alignments, so the source is
    checked for rewindability before anything is read.

    Args:
        source: GAF input; must be re-readable
        mode: Query key mode ('name' or 'name-span')

    Returns:
        Counter mapping query key -> number of records

    Raises:
        StreamNotRewindable: If the source cannot be read a second time
        MalformedAlignment: On lines with too few fields
    """
    source.require_rewindable()
    logger.info(f"Counting query occurrences in {source.name} (key: {mode})")

    occurrences: Counter = Counter()
    for line_no, line in source.lines():
        if not line:
            continue
        occurrences[parse_query_key(line, mode, line_no, source.name)] += 1

    multi = sum(1 for count in occurrences.values() if count > 1)
    logger.info(
        f"Counted {sum(occurrences.values()):,} records over {len(occurrences):,} query keys "
        f"({multi:,} with multiple records)"
    )
    return occurrences

# Gafpack v0.1.0
# Any usage is subject to this software's license.
