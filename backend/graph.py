#!/usr/bin/env python3
"""
Graph model for the layout engine.
Nodes carry the kinematic state (position, velocity, acceleration) that the
simulation mutates; edges reference nodes owned by the same Graph.
"""
import logging

from backend.vector import Vector
from backend.force_directed_layout import LayoutConfig, init_positions, simulation_step

logger = logging.getLogger(__name__)


class GraphError(Exception):
    """Base class for graph construction errors."""


class InvalidNodeError(GraphError, TypeError):
    """Raised when something that is not a Node is added to a graph."""


class NodeNotFoundError(GraphError, KeyError):
    """Raised when a label does not resolve to a node of the graph."""

    def __init__(self, label):
        super().__init__(label)
        self.label = label

    def __str__(self):
        return f'node with label "{self.label}" doesn\'t exist on this graph'


class Node:
    def __init__(self, label):
        self.label = label
        self.peers = []
        self.pos = Vector(0, 0)
        self.vel = Vector(0, 0)
        self.acel = Vector(0, 0)

    def __repr__(self):
        return f"Node({self.label!r}, pos=({self.pos.x:.1f}, {self.pos.y:.1f}))"

    def add_peer(self, node):
        self.peers.append(node)


class Edge:
    def __init__(self, start, end, is_directed=False):
        self.start = start
        self.end = end
        self.is_directed = is_directed

    def __repr__(self):
        arrow = "->" if self.is_directed else "--"
        return f"Edge({self.start.label!r} {arrow} {self.end.label!r})"

    def __eq__(self, other):
        # Endpoints compare by identity: two Node instances sharing a label
        # are still different endpoints.
        if not isinstance(other, Edge):
            return NotImplemented
        return (self.start is other.start
                and self.end is other.end
                and self.is_directed == other.is_directed)

    def __hash__(self):
        return hash((id(self.start), id(self.end), self.is_directed))


class Graph:
    def __init__(self, config=None):
        self.nodes = {}  # {label: Node}, iteration order drives the simulation
        self.edges = []
        self.config = config or LayoutConfig()

    def __len__(self):
        return len(self.nodes)

    def __contains__(self, label):
        return label in self.nodes

    def add_node(self, node):
        """
        Insert a node, replacing any node already registered under its label.

        Edges that referenced a replaced node keep pointing at the old
        instance.
        """
        if not isinstance(node, Node):
            raise InvalidNodeError(f"node must be a Node instance, got {type(node).__name__}")

        if node.label in self.nodes:
            logger.debug(f"Replacing node {node.label!r}")
        self.nodes[node.label] = node
        return node

    def add(self, label):
        """Create a node for ``label`` and add it."""
        return self.add_node(Node(label))

    def get_node(self, label):
        try:
            return self.nodes[label]
        except KeyError:
            raise NodeNotFoundError(label) from None

    def connect_nodes(self, node_a_label, node_b_label, is_directed=False):
        """
        Connect two nodes by label.

        Returns the new Edge, or None when an equal edge already exists.
        Undirected edges make each endpoint a peer of the other; directed
        edges only add the end to the start's peers.
        """
        node_a = self.get_node(node_a_label)
        node_b = self.get_node(node_b_label)

        new_edge = Edge(node_a, node_b, is_directed)
        if new_edge in self.edges:
            logger.debug(f"Skipping duplicate edge {new_edge!r}")
            return None

        self.edges.append(new_edge)
        node_a.add_peer(node_b)
        if not is_directed:
            node_b.add_peer(node_a)
        return new_edge

    def init(self, width, height, rng=None):
        """Place every node near the center of a width x height surface."""
        init_positions(self, width, height, config=self.config, rng=rng)

    def step(self, width, height, dt):
        """Advance the simulation by ``dt`` seconds."""
        simulation_step(self, width, height, dt, config=self.config)
