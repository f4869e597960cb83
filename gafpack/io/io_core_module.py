#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Core I/O module for Gafpack.

Line-oriented input sources for GFA and GAF files:
- gzip / BGZF detection (by suffix or magic bytes) and transparent decompression
- LineSource: a named input that yields numbered lines, one pass at a time,
  and knows whether it can be read again from the start
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import gzip
import io
import logging
import os
import stat
import sys
import zlib
from pathlib import Path
from typing import BinaryIO, IO, Iterator, Optional, TextIO, Tuple, Union

from ..errors import StreamNotRewindable, UnreadableInput

logger = logging.getLogger(__name__)

GZIP_MAGIC = b'\x1f\x8b'
GZIP_SUFFIXES = ('.gz', '.bgz', '.gzip')
STDIN_MARKER = '-'


# =============================================================================
# SECTION 2: FILE UTILITIES
# =============================================================================
# Helper functions for file handling with automatic gzip detection

def is_gzipped(filepath: Union[str, Path]) -> bool:
    """
    Check if file is gzip compressed.

    BGZF files are gzip members with an extra header field, so they are
    detected (and decompressed) the same way.

    Args:
        filepath: Path to file

    Returns:
        True if the suffix or the leading magic bytes mark the file as gzip
    """
    filepath = Path(filepath)
    if filepath.suffix in GZIP_SUFFIXES:
        return True
    if not filepath.is_file():
        # Sniffing a FIFO would consume its first bytes
        return False
    with open(filepath, 'rb') as f:
        return f.read(2) == GZIP_MAGIC


def open_file(filepath: Union[str, Path], mode: str = 'r') -> TextIO:
    """
    Open file with automatic gzip detection.

    Args:
        filepath: Path to file
        mode: File mode ('r' or 'w')

    Returns:
        Text file handle
    """
    filepath = Path(filepath)

    if 'r' in mode:
        if is_gzipped(filepath):
            return gzip.open(filepath, 'rt', encoding='utf-8')
        return open(filepath, 'r', encoding='utf-8')

    if filepath.suffix in GZIP_SUFFIXES:
        return gzip.open(filepath, 'wt', encoding='utf-8')
    return open(filepath, mode, encoding='utf-8')


def _sniff_magic(stream: BinaryIO) -> bytes:
    """Return the first two bytes of a binary stream without consuming them."""
    if hasattr(stream, 'peek'):
        return stream.peek(2)[:2]
    if stream.seekable():
        pos = stream.tell()
        head = stream.read(2)
        stream.seek(pos)
        return head
    return b''


def _decompressing(stream: BinaryIO, gzipped: bool = False) -> BinaryIO:
    """Layer gzip decompression over a binary stream when it is (or claims to be) gzip."""
    if gzipped or _sniff_magic(stream) == GZIP_MAGIC:
        return gzip.GzipFile(fileobj=stream, mode='rb')
    return stream


# =============================================================================
# SECTION 3: LINE SOURCES
# =============================================================================

class LineSource:
    """
    Named line-oriented input that may be compressed.

    A source is either a filesystem path, the stdin marker ``'-'`` (one
    pass only), or an already open file object (rewound with ``seek(0)``
    when it is seekable, one pass otherwise). A path is reopened for every
    pass when it names a regular file; FIFOs and ``/dev/fd`` entries from
    process substitution are read once, like stdin.

    Every path or binary stream is opened exactly once per pass and the
    gzip magic is sniffed on that same handle, so nothing is consumed
    before the pass starts.

    Attributes:
        name: Label used in error messages and as the output sample label
    """

    def __init__(self, source: Union[str, Path, IO], name: Optional[str] = None):
        self._path: Optional[Path] = None
        self._stream: Optional[IO] = None
        self._passes = 0

        if isinstance(source, (str, Path)) and str(source) == STDIN_MARKER:
            self._stream = sys.stdin.buffer
            self._seekable = False
            default_name = 'stdin'
        elif isinstance(source, (str, Path)):
            self._path = Path(source)
            if not self._path.exists():
                raise FileNotFoundError(f"Input file not found: {self._path}")
            self._seekable = stat.S_ISREG(os.stat(self._path).st_mode)
            default_name = str(source)
        else:
            self._stream = source
            self._seekable = source.seekable()
            default_name = getattr(source, 'name', None) or '<stream>'

        self.name = name or str(default_name)

    @property
    def rewindable(self) -> bool:
        """True if the source can be read again from its start."""
        return self._seekable

    def require_rewindable(self) -> None:
        """
        Fail early when a second pass will be needed but is impossible.

        Raises:
            StreamNotRewindable: If the source can only be read once
        """
        if not self.rewindable:
            raise StreamNotRewindable(
                "source cannot be re-read from the start; query weighting "
                "needs two passes (use a regular file instead of a pipe)",
                source=self.name,
            )

    def lines(self) -> Iterator[Tuple[int, str]]:
        """
        Yield ``(line_no, line)`` pairs for one full pass over the source.

        Line numbers are 1-based; trailing newlines are stripped.

        Raises:
            StreamNotRewindable: If this is a repeated pass over a one-shot source
            UnreadableInput: On text that is not UTF-8 or a broken gzip stream
        """
        if self._passes and not self.rewindable:
            raise StreamNotRewindable("source was already consumed", source=self.name)
        self._passes += 1
        logger.debug(f"Reading {self.name} (pass {self._passes})")

        if self._path is not None:
            with open(self._path, 'rb') as raw:
                yield from self._decoded(raw, self._path.suffix in GZIP_SUFFIXES)
            return

        stream = self._stream
        if self._passes > 1:
            stream.seek(0)

        if isinstance(stream, io.TextIOBase):
            for line_no, line in enumerate(stream, 1):
                yield line_no, line.rstrip('\r\n')
            return

        yield from self._decoded(stream)

    def _decoded(self, raw: BinaryIO, gzipped: bool = False) -> Iterator[Tuple[int, str]]:
        line_no = 0
        handle = raw
        try:
            handle = _decompressing(raw, gzipped)
            for line_no, raw_line in enumerate(handle, 1):
                yield line_no, raw_line.decode('utf-8').rstrip('\r\n')
        except UnicodeDecodeError as e:
            raise UnreadableInput(
                f"line is not valid UTF-8 text ({e.reason} at byte {e.start})",
                self.name, line_no,
            ) from None
        except (gzip.BadGzipFile, EOFError, zlib.error) as e:
            raise UnreadableInput(
                f"cannot decompress gzip input: {e}", self.name, line_no + 1
            ) from None
        finally:
            # The caller's stream stays open; only our gzip layer is closed.
            if handle is not raw:
                handle.close()

    def __repr__(self) -> str:
        return f"LineSource(name='{self.name}', rewindable={self.rewindable})"

# Gafpack v0.1.0
# Any usage is subject to this software's license.
