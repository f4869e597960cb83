#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

Exception types raised while building the graph index and projecting
alignments onto it.

Every error carries the source it was raised for and, where known, the
1-based line number of the offending input line.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

from typing import Optional


class GafpackError(ValueError):
    """Base class for all gafpack input errors."""

    def __init__(self, message: str, source: Optional[str] = None,
                 line_no: Optional[int] = None):
        self.message = message
        self.source = source
        self.line_no = line_no
        super().__init__(self._format())

    def _format(self) -> str:
        if self.source is None:
            return self.message
        if self.line_no is None:
            return f"{self.source}: {self.message}"
        return f"{self.source}:{self.line_no}: {self.message}"


class MalformedGraph(GafpackError):
    """Bad or duplicated segment declaration, or a zero-length node under length scaling."""
    pass


class MalformedAlignment(GafpackError):
    """Alignment line with missing fields, unparsable numbers or an invalid target window."""
    pass


class UnknownNode(GafpackError):
    """Alignment path references a node that the graph does not declare."""

    def __init__(self, node_id: str, source: Optional[str] = None,
                 line_no: Optional[int] = None):
        self.node_id = node_id
        super().__init__(f"unknown node '{node_id}' in alignment path", source, line_no)


class StreamNotRewindable(GafpackError):
    """Query weighting needs a second pass over a source that can only be read once."""
    pass


class UnreadableInput(GafpackError):
    """Input bytes that are not UTF-8 text, or a gzip stream that cannot be decompressed."""
    pass


class ConfigValidationError(GafpackError):
    """Raised when configuration validation fails."""
    pass

# Gafpack v0.1.0
# Any usage is subject to this software's license.
