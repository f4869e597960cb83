"""
Gafpack v0.1.0

Coverage accumulation:
- query_weights.py - occurrence counting pass for query weighting
- accumulator.py - per-node running totals and the finalized vector
"""

from .query_weights import count_query_occurrences
from .accumulator import AccumulationStats, CoverageAccumulator, CoverageVector

__all__ = [
    "count_query_occurrences",
    "AccumulationStats",
    "CoverageAccumulator",
    "CoverageVector",
]
