#!/usr/bin/env python3
"""
Build graphs from JSON topology documents.

Only topology is read (labels and connections); positions always come from
the layout engine.

    {
        "nodes": ["A", "B", "C"],
        "edges": [
            {"from": "A", "to": "B"},
            {"from": "B", "to": "C", "directed": true},
            ["C", "A"]
        ]
    }
"""
import json
import logging

from backend.graph import Graph, GraphError

logger = logging.getLogger(__name__)

DEMO_TOPOLOGY = {
    "nodes": ["core", "web1", "web2", "db", "cache", "queue", "worker1", "worker2", "backup"],
    "edges": [
        {"from": "core", "to": "web1"},
        {"from": "core", "to": "web2"},
        {"from": "web1", "to": "db", "directed": True},
        {"from": "web2", "to": "db", "directed": True},
        {"from": "web1", "to": "cache"},
        {"from": "web2", "to": "cache"},
        {"from": "core", "to": "queue"},
        {"from": "queue", "to": "worker1", "directed": True},
        {"from": "queue", "to": "worker2", "directed": True},
        {"from": "db", "to": "backup", "directed": True},
    ],
}


class GraphLoadError(GraphError, ValueError):
    """Raised when a topology document cannot be turned into a graph."""


def _parse_edge(entry):
    if isinstance(entry, dict):
        try:
            return entry["from"], entry["to"], bool(entry.get("directed", False))
        except KeyError as e:
            raise GraphLoadError(f"Edge {entry!r} is missing key {e.args[0]!r}") from None
    if isinstance(entry, (list, tuple)) and len(entry) in (2, 3):
        directed = bool(entry[2]) if len(entry) == 3 else False
        return entry[0], entry[1], directed
    raise GraphLoadError(f"Unsupported edge entry: {entry!r}")


def graph_from_dict(data, config=None):
    """
    Create a Graph from an already-decoded topology document.

    Raises GraphLoadError for malformed documents and NodeNotFoundError when
    an edge names a label missing from "nodes".
    """
    if not isinstance(data, dict):
        raise GraphLoadError("Topology document must be a JSON object")

    nodes = data.get("nodes", [])
    edges = data.get("edges", [])
    if not isinstance(nodes, list) or not isinstance(edges, list):
        raise GraphLoadError('"nodes" and "edges" must be lists')

    graph = Graph(config=config)
    for label in nodes:
        if not isinstance(label, str):
            raise GraphLoadError(f"Node labels must be strings, got {label!r}")
        graph.add(label)

    for entry in edges:
        start, end, directed = _parse_edge(entry)
        if not isinstance(start, str) or not isinstance(end, str):
            raise GraphLoadError(f"Edge endpoints must be node labels, got {entry!r}")
        graph.connect_nodes(start, end, is_directed=directed)

    logger.info(f"Loaded graph with {len(graph.nodes)} nodes and {len(graph.edges)} edges")
    return graph


def load_graph(path, config=None):
    """Read a topology JSON file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise GraphLoadError(f"Invalid JSON in {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise GraphLoadError(f"{path} is not UTF-8 text: {e}") from e
    return graph_from_dict(data, config=config)


def demo_graph(config=None):
    return graph_from_dict(DEMO_TOPOLOGY, config=config)


def load_graph_or_demo(path=None, config=None):
    """The graph stored at ``path``, or the demo topology when no path is given."""
    if path:
        return load_graph(path, config=config)
    return demo_graph(config=config)
