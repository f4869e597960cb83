"""
Gafpack v0.1.0

GAF alignment record parsing.
"""

from .gaf_parser import (
    Orientation,
    PathStep,
    AlignmentRecord,
    QUERY_KEY_MODES,
    make_query_key,
    split_path,
    parse_query_key,
    parse_gaf_line,
)

__all__ = [
    "Orientation",
    "PathStep",
    "AlignmentRecord",
    "QUERY_KEY_MODES",
    "make_query_key",
    "split_path",
    "parse_query_key",
    "parse_gaf_line",
]
