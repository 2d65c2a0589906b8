#!/usr/bin/env python3
"""
Force-directed graph layout.
Springs along edges pull stretched endpoints together, every node repels
every other node, and a weak pull keeps the graph centered on the drawing
surface. Positions are integrated with semi-implicit Euler and damped each
step so the system settles.
"""
import logging
import math
import numbers

from backend.vector import Vector

logger = logging.getLogger(__name__)

# Defaults
SPRING_CONSTANT = 1e2
SPRING_LENGTH = 30
REPULSIVE_CONSTANT = 1e5
MAX_REPULSIVE_FORCE = 1e4
DAMPING = 0.95
CENTERING_COEFFICIENT = 1e-3
SPAWN_SCALE = 0.1

REPULSION_RUNNING = "running"
REPULSION_SUMMED = "summed"
REPULSION_MODES = (REPULSION_RUNNING, REPULSION_SUMMED)


class LayoutConfig:
    """
    Tunable parameters of the simulation.

    repulsion_mode:
        "running" threads each node's acceleration through the pair loop and
        caps the running value after every pair, so a large total can wipe
        out earlier contributions. "summed" caps each pairwise push on its
        own and adds the total once.
    """

    FIELDS = (
        'spring_constant', 'spring_length', 'repulsive_constant',
        'max_repulsive_force', 'damping', 'centering_coefficient',
        'spawn_scale', 'repulsion_mode',
    )

    def __init__(self, spring_constant=SPRING_CONSTANT, spring_length=SPRING_LENGTH,
                 repulsive_constant=REPULSIVE_CONSTANT, max_repulsive_force=MAX_REPULSIVE_FORCE,
                 damping=DAMPING, centering_coefficient=CENTERING_COEFFICIENT,
                 spawn_scale=SPAWN_SCALE, repulsion_mode=REPULSION_RUNNING):
        numeric = {
            'spring_constant': spring_constant, 'spring_length': spring_length,
            'repulsive_constant': repulsive_constant, 'max_repulsive_force': max_repulsive_force,
            'damping': damping, 'centering_coefficient': centering_coefficient,
            'spawn_scale': spawn_scale,
        }
        for name, value in numeric.items():
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ValueError(f"{name} must be a number, got {value!r}")
        if repulsion_mode not in REPULSION_MODES:
            raise ValueError(f"repulsion_mode must be one of {REPULSION_MODES}, got {repulsion_mode!r}")
        if max_repulsive_force <= 0:
            raise ValueError("max_repulsive_force must be positive")
        self.spring_constant = spring_constant
        self.spring_length = spring_length
        self.repulsive_constant = repulsive_constant
        self.max_repulsive_force = max_repulsive_force
        self.damping = damping
        self.centering_coefficient = centering_coefficient
        self.spawn_scale = spawn_scale
        self.repulsion_mode = repulsion_mode

    def __repr__(self):
        params = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.FIELDS)
        return f"LayoutConfig({params})"

    @classmethod
    def from_dict(cls, data):
        """Build a config from a mapping, ignoring keys that are not parameters."""
        known = {}
        for key, value in (data or {}).items():
            if key in cls.FIELDS:
                known[key] = value
            else:
                logger.warning(f"Ignoring unknown layout parameter: {key}")
        return cls(**known)

    def to_dict(self):
        return {name: getattr(self, name) for name in self.FIELDS}


def init_positions(graph, width, height, config=None, rng=None):
    """
    Scatter nodes inside a small square at the center of the surface.

    Each position is drawn uniformly from the unit square, shrunk to a
    centered sub-square of side ``spawn_scale`` and then stretched to
    ``(width, height)``.
    """
    config = config or LayoutConfig()
    scale = config.spawn_scale
    size = Vector(width, height)
    for node in graph.nodes.values():
        pos = Vector.random(rng).mul_scalar(scale).add_scalar((1 - scale) / 2)
        node.pos = pos.mul(size)
    logger.debug(f"Placed {len(graph.nodes)} nodes on a {width}x{height} surface")


def _apply_springs(graph, config):
    rest = config.spring_length
    for edge in graph.edges:
        start, end = edge.start, edge.end
        dist_vec = start.pos.sub(end.pos)
        dist = dist_vec.magnitude()
        # Springs only pull; an edge shorter than its rest length is left alone.
        if dist > rest:
            direction = dist_vec.div_scalar(dist)
            pull = direction.mul_scalar(config.spring_constant * math.log(dist - (rest - 1)))
            start.acel = start.acel.sub(pull)
            end.acel = end.acel.add(pull)


def _repulsion_from(node, other, config, rng):
    """Push on ``node`` away from ``other``, expressed toward ``other``."""
    dist_vec = other.pos.sub(node.pos)
    dist = dist_vec.magnitude()
    if dist == 0:
        logger.debug(f"Nodes {node.label!r} and {other.label!r} coincide, using a random direction")
        return Vector.random_unit(rng).mul_scalar(config.max_repulsive_force)
    direction = dist_vec.div_scalar(dist)
    # dist * dist underflows for nearly coincident nodes; the push saturates at the cap
    strength = config.repulsive_constant / dist / dist
    if not math.isfinite(strength):
        strength = config.max_repulsive_force
    return direction.mul_scalar(strength)


def _cap(force, limit):
    if force.magnitude() > limit:
        return force.normalized().mul_scalar(limit)
    return force


def _apply_repulsion(graph, node, config, rng):
    cap = config.max_repulsive_force
    if config.repulsion_mode == REPULSION_RUNNING:
        for other in graph.nodes.values():
            if other is node:
                continue
            node.acel = _cap(node.acel.sub(_repulsion_from(node, other, config, rng)), cap)
    else:
        total = Vector(0, 0)
        for other in graph.nodes.values():
            if other is node:
                continue
            total = total.add(_cap(_repulsion_from(node, other, config, rng), cap))
        node.acel = node.acel.sub(total)


def _apply_centering(node, center, config):
    dist_vec = center.sub(node.pos)
    dist = dist_vec.magnitude()
    if dist != 0:
        direction = dist_vec.div_scalar(dist)
        node.acel = node.acel.add(direction.mul_scalar(config.centering_coefficient * dist * dist))


def simulation_step(graph, width, height, dt, config=None, rng=None):
    """
    Advance every node of ``graph`` by ``dt`` seconds.

    Args:
        graph: Graph whose nodes are mutated in place
        width: Surface width, used for the centering force
        height: Surface height, used for the centering force
        dt: Time step in seconds (callers clamp it after stalls)
        config: LayoutConfig, defaults to the graph's own config
        rng: Optional random.Random for the coincident-node fallback
    """
    config = config or getattr(graph, 'config', None) or LayoutConfig()
    nodes = graph.nodes.values()

    for node in nodes:
        node.acel = Vector(0, 0)

    _apply_springs(graph, config)

    center = Vector(width / 2, height / 2)
    for node in nodes:
        _apply_repulsion(graph, node, config, rng)
        _apply_centering(node, center, config)

    # Position first, then velocity
    for node in nodes:
        node.pos = node.pos.add(node.vel.mul_scalar(dt))
        node.vel = node.vel.add(node.acel.mul_scalar(dt)).mul_scalar(config.damping)


def force_directed_layout(graph, width=1200, height=800, iterations=100, dt=0.016, rng=None):
    """
    Lay out a graph without a display: place nodes, then run fixed steps.

    Args:
        graph: Graph to lay out
        width: Surface width
        height: Surface height
        iterations: Number of simulation steps to run
        dt: Time step per iteration in seconds
        rng: Optional random.Random used for initial placement

    Returns:
        The same graph, with updated node positions
    """
    if not graph.nodes:
        return graph

    init_positions(graph, width, height, config=graph.config, rng=rng)
    for _ in range(iterations):
        simulation_step(graph, width, height, dt, config=graph.config, rng=rng)

    logger.info(f"Laid out {len(graph.nodes)} nodes and {len(graph.edges)} edges in {iterations} steps")
    return graph
