"""
Gafpack v0.1.0

Graph index built from GFA segment lines.
"""

from .graph_index import Node, GraphIndex, read_graph_index, load_graph_index

__all__ = ["Node", "GraphIndex", "read_graph_index", "load_graph_index"]
