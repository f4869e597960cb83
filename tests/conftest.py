#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

Pytest configuration and shared fixtures.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

import os
import threading
import pytest
from pathlib import Path
import tempfile
import shutil

from gafpack.graph.graph_index import GraphIndex


def gaf_line(query, path, target_start, target_end, path_length,
             query_start=0, query_end=None, strand='+', mapq=60, tags=()):
    """Build a 12-column GAF line (plus optional tags)."""
    aligned = target_end - target_start
    if query_end is None:
        query_end = query_start + aligned
    fields = [
        query, str(query_end), str(query_start), str(query_end), strand,
        path, str(path_length), str(target_start), str(target_end),
        str(aligned), str(aligned), str(mapq),
    ]
    fields.extend(tags)
    return "\t".join(fields)


@pytest.fixture
def make_gaf_line():
    """Factory for GAF lines."""
    return gaf_line


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="gafpack_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def fifo_feed(temp_output_dir):
    """
    Factory for named pipes fed by a writer thread.

    fifo_feed(name, text) creates the FIFO and starts a thread that writes
    text (str or bytes) once a reader opens it. Pass text=None for a FIFO
    nobody writes to.
    """
    if not hasattr(os, "mkfifo"):
        pytest.skip("named pipes not supported on this platform")
    writers = []

    def make(name, text=None):
        path = temp_output_dir / name
        os.mkfifo(path)
        if text is not None:
            mode = "wb" if isinstance(text, bytes) else "w"

            def write():
                with open(path, mode) as f:
                    f.write(text)
            writer = threading.Thread(target=write, daemon=True)
            writer.start()
            writers.append(writer)
        return path

    yield make
    for writer in writers:
        writer.join(timeout=5)


@pytest.fixture
def simple_gfa():
    """GFA v1 graph: nodes 1 (10 bp), 2 (5 bp), 3 (8 bp) with links and a path."""
    return (
        "H\tVN:Z:1.0\n"
        "S\t1\tACGTACGTAC\n"
        "S\t2\tGGGCC\n"
        "S\t3\tTTTTAAAA\n"
        "L\t1\t+\t2\t+\t0M\n"
        "L\t2\t+\t3\t+\t0M\n"
        "P\tref\t1+,2+,3+\t*\n"
    )


@pytest.fixture
def gfa_file(simple_gfa, temp_output_dir):
    """Write the simple GFA to disk."""
    path = temp_output_dir / "graph.gfa"
    path.write_text(simple_gfa)
    return path


@pytest.fixture
def graph():
    """In-memory graph index matching simple_gfa."""
    return GraphIndex(["1", "2", "3"], [10, 5, 8], source="graph.gfa")


@pytest.fixture
def simple_gaf():
    """
    Three records over simple_gfa:
    - read1 covers all of node 1 and the first 2 bases of node 2
    - read2 twice, each covering 4 bases of node 3
    """
    return "\n".join([
        gaf_line("read1", ">1>2", 0, 12, 15),
        gaf_line("read2", ">3", 0, 4, 8),
        gaf_line("read2", "<3", 4, 8, 8),
    ]) + "\n"


@pytest.fixture
def gaf_file(simple_gaf, temp_output_dir):
    """Write the simple GAF to disk."""
    path = temp_output_dir / "sample.gaf"
    path.write_text(simple_gaf)
    return path

# Gafpack v0.1.0
# Any usage is subject to this software's license.
