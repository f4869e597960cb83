"""
Gafpack v0.1.0

I/O Module for Gafpack.

io_core_module.py - Compressed line sources for GFA/GAF input

Coverage vector output lives in gafpack.io_utils.
"""

from .io_core_module import (
    LineSource,
    is_gzipped,
    open_file,
)

__all__ = [
    "LineSource",
    "is_gzipped",
    "open_file",
]
