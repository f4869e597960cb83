#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gafpack v0.1.0

Tests for query occurrence counting and coverage accumulation.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

import io
from collections import Counter

import numpy as np
import pytest

from gafpack.alignment.gaf_parser import parse_gaf_line
from gafpack.coverage.accumulator import CoverageAccumulator, CoverageVector
from gafpack.coverage.query_weights import count_query_occurrences
from gafpack.errors import MalformedAlignment, MalformedGraph, StreamNotRewindable
from gafpack.graph.graph_index import GraphIndex
from gafpack.io.io_core_module import LineSource


class OneShotStream(io.RawIOBase):
    """Readable binary stream that cannot seek, like a pipe."""

    def __init__(self, data):
        self._inner = io.BytesIO(data)

    def readable(self):
        return True

    def seekable(self):
        return False

    def readinto(self, buffer):
        chunk = self._inner.read(len(buffer))
        buffer[:len(chunk)] = chunk
        return len(chunk)


def _source(text, name="sample.gaf"):
    return LineSource(io.BytesIO(text.encode()), name=name)


class TestQueryOccurrences:
    """Test the counting pass."""

    def test_counts_by_name(self, simple_gaf):
        counts = count_query_occurrences(_source(simple_gaf))
        assert counts == Counter({"read1": 1, "read2": 2})

    def test_counts_by_name_span(self, simple_gaf):
        counts = count_query_occurrences(_source(simple_gaf), mode='name-span')
        assert counts == Counter({"read1:0:12": 1, "read2:0:4": 2})

    def test_name_span_separates_query_intervals(self, make_gaf_line):
        text = "\n".join([
            make_gaf_line("q", ">1", 0, 5, 10, query_start=0),
            make_gaf_line("q", ">1", 5, 10, 10, query_start=20),
        ]) + "\n"
        assert count_query_occurrences(_source(text)) == Counter({"q": 2})
        counts = count_query_occurrences(_source(text), mode='name-span')
        assert counts == Counter({"q:0:5": 1, "q:20:25": 1})

    def test_blank_lines_skipped(self, make_gaf_line):
        text = "\n" + make_gaf_line("q", ">1", 0, 10, 10) + "\n\n"
        assert count_query_occurrences(_source(text)) == Counter({"q": 1})

    def test_one_shot_stream_rejected(self, simple_gaf):
        source = LineSource(OneShotStream(simple_gaf.encode()), name="pipe")
        assert not source.rewindable
        with pytest.raises(StreamNotRewindable) as excinfo:
            count_query_occurrences(source)
        assert excinfo.value.source == "pipe"

    def test_malformed_line(self):
        with pytest.raises(MalformedAlignment):
            count_query_occurrences(_source("q\t10\n"))


class TestAccumulator:
    """Test per-node accumulation."""

    def test_no_records_gives_zeros(self, graph):
        accumulator = CoverageAccumulator(graph)
        accumulator.consume(_source(""))
        vector = accumulator.finalize()
        assert vector.as_dict() == {"1": 0.0, "2": 0.0, "3": 0.0}

    def test_raw_contributions(self, graph, make_gaf_line):
        accumulator = CoverageAccumulator(graph)
        accumulator.add(parse_gaf_line(make_gaf_line("q", ">1>2", 0, 12, 15), graph))
        assert accumulator.finalize().as_dict() == {"1": 10.0, "2": 2.0, "3": 0.0}

    def test_length_scaled_contributions(self, graph, make_gaf_line):
        accumulator = CoverageAccumulator(graph, len_scale=True)
        accumulator.add(parse_gaf_line(make_gaf_line("q", ">1>2", 0, 12, 15), graph))
        vector = accumulator.finalize()
        assert vector["1"] == 1.0
        assert vector["2"] == pytest.approx(0.4)
        assert vector["3"] == 0.0

    def test_weighted_records(self, graph, make_gaf_line):
        """Two q1 records of 4 bp on node 3 add up to 4, not 8."""
        lines = [make_gaf_line("q1", ">3", 0, 4, 8), make_gaf_line("q1", ">3", 4, 8, 8)]
        accumulator = CoverageAccumulator(graph, occurrences=Counter({"q1": 2}))
        for line in lines:
            accumulator.add(parse_gaf_line(line, graph))
        assert accumulator.finalize()["3"] == 4.0

    def test_missing_occurrence_key(self, graph, make_gaf_line):
        accumulator = CoverageAccumulator(graph, occurrences=Counter({"other": 1}))
        record = parse_gaf_line(make_gaf_line("q1", ">3", 0, 4, 8), graph, line_no=2)
        with pytest.raises(MalformedAlignment, match="occurrence table"):
            accumulator.add(record, source="sample.gaf")

    def test_zero_length_node_with_len_scale(self):
        graph = GraphIndex(["a", "b"], [4, 0], source="g.gfa")
        with pytest.raises(MalformedGraph, match="zero-length"):
            CoverageAccumulator(graph, len_scale=True)

    def test_zero_length_node_without_len_scale(self, make_gaf_line):
        graph = GraphIndex(["a", "b", "c"], [4, 0, 3])
        accumulator = CoverageAccumulator(graph)
        accumulator.add(parse_gaf_line(make_gaf_line("q", ">a>b>c", 0, 7, 7), graph))
        assert accumulator.finalize().as_dict() == {"a": 4.0, "b": 0.0, "c": 3.0}

    def test_unmapped_records_counted(self, graph):
        accumulator = CoverageAccumulator(graph)
        accumulator.consume(_source("q\t100\t0\t0\t*\t*\t*\t*\t*\t0\t0\t0\n"))
        assert accumulator.stats.records == 1
        assert accumulator.stats.unmapped == 1
        assert accumulator.finalize().values.sum() == 0

    def test_stats(self, graph, simple_gaf):
        accumulator = CoverageAccumulator(graph)
        accumulator.consume(_source(simple_gaf))
        assert accumulator.stats.records == 3
        assert accumulator.stats.steps == 4
        assert accumulator.stats.bases == 20
        assert accumulator.stats.path_length_mismatches == 0

    def test_path_length_mismatch_warning(self, graph, make_gaf_line, caplog):
        accumulator = CoverageAccumulator(graph)
        with caplog.at_level("WARNING", logger="gafpack"):
            accumulator.consume(_source(make_gaf_line("q", ">1", 0, 10, 11) + "\n"))
        assert accumulator.stats.path_length_mismatches == 1
        assert "path length" in caplog.text

    def test_finalize_only_once(self, graph):
        accumulator = CoverageAccumulator(graph)
        accumulator.finalize()
        with pytest.raises(RuntimeError):
            accumulator.finalize()

    def test_no_records_after_finalize(self, graph, make_gaf_line):
        accumulator = CoverageAccumulator(graph)
        accumulator.finalize()
        with pytest.raises(RuntimeError):
            accumulator.add(parse_gaf_line(make_gaf_line("q", ">1", 0, 10, 10), graph))


class TestCoverageVector:
    """Test the finalized vector."""

    def test_read_only(self, graph):
        vector = CoverageVector(graph, np.zeros(3))
        with pytest.raises(ValueError):
            vector.values[0] = 1

    def test_order_and_keys(self, graph):
        vector = CoverageVector(graph, np.array([1.0, 2.0, 3.0]))
        assert list(vector) == ["1", "2", "3"]
        assert list(vector.items()) == [("1", 1.0), ("2", 2.0), ("3", 3.0)]
        assert vector.values.dtype == np.longdouble

    def test_size_mismatch(self, graph):
        with pytest.raises(ValueError):
            CoverageVector(graph, np.zeros(2))

    def test_merge_sums_nodewise(self, graph):
        left = CoverageVector(graph, np.array([1.0, 0.0, 2.5]))
        right = CoverageVector(graph, np.array([0.5, 3.0, 0.0]))
        assert left.merge(right).as_dict() == {"1": 1.5, "2": 3.0, "3": 2.5}

    def test_merge_other_graph(self, graph):
        other = GraphIndex(["x", "y", "z"], [1, 1, 1])
        with pytest.raises(ValueError):
            CoverageVector(graph, np.zeros(3)).merge(CoverageVector(other, np.zeros(3)))

    def test_merge_matches_single_pass(self, graph, make_gaf_line):
        """Shards accumulated separately sum to the single-pass vector."""
        lines = [
            make_gaf_line("a", ">1>2", 3, 14, 15),
            make_gaf_line("b", ">2>3", 0, 13, 13),
            make_gaf_line("c", ">3", 1, 7, 8),
        ]
        whole = CoverageAccumulator(graph)
        whole.add_all(parse_gaf_line(line, graph) for line in lines)

        first, second = CoverageAccumulator(graph), CoverageAccumulator(graph)
        first.add_all(parse_gaf_line(line, graph) for line in lines[:2])
        second.add_all(parse_gaf_line(line, graph) for line in lines[2:])

        merged = first.finalize().merge(second.finalize())
        assert merged.as_dict() == whole.finalize().as_dict()

# Gafpack v0.1.0
# Any usage is subject to this software's license.
