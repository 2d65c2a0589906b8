#!/usr/bin/env python3
"""
Frame-driven simulation driver.
Turns display-refresh timestamps into simulation steps: place the nodes
once, then one step per frame. Kept free of GTK so it can be driven by any
frame source.
"""
import logging

from backend.vector import Vector

logger = logging.getLogger(__name__)

# A frame slower than this is treated as a stall and contributes no time
MAX_FRAME_DT = 0.5


class FrameClock:
    def __init__(self, max_dt=MAX_FRAME_DT):
        self.max_dt = max_dt
        self._last = None

    def reset(self):
        self._last = None

    def tick(self, now):
        """Seconds since the previous tick; 0 for the first tick and after stalls."""
        if self._last is None:
            self._last = now
            return 0.0

        dt = now - self._last
        self._last = now
        if dt > self.max_dt:
            logger.debug(f"Frame took {dt:.3f}s, skipping simulation time")
            return 0.0
        return max(dt, 0.0)


class LayoutDriver:
    """
    Owns the animation of one graph.

    Callers hand in frame timestamps and surface sizes; the driver places
    the nodes on the first frame and runs exactly one step per frame.
    """

    def __init__(self, graph, clock=None):
        self.graph = graph
        self.clock = clock or FrameClock()
        self.paused = False
        self.frames = 0
        self._initialized = False
        self._stepping = False

    @property
    def initialized(self):
        return self._initialized

    def start(self, width, height):
        self.graph.init(width, height)
        self.clock.reset()
        self._initialized = True
        logger.info(f"Layout started with {len(self.graph.nodes)} nodes on {width}x{height}")

    def restart(self, width, height):
        """Scatter the nodes again and drop their momentum."""
        for node in self.graph.nodes.values():
            node.vel = Vector(0, 0)
        self.start(width, height)

    def toggle_pause(self):
        self.paused = not self.paused
        if not self.paused:
            # Time spent paused is not simulated
            self.clock.reset()
        return self.paused

    def tick(self, now, width, height):
        """
        Advance one frame.

        Returns the dt that was simulated (0 on the first frame, after a
        stall or while paused).
        """
        if self._stepping:
            raise RuntimeError("simulation step is already running")
        if width <= 0 or height <= 0:
            return 0.0
        if not self._initialized:
            self.start(width, height)

        dt = self.clock.tick(now)
        if self.paused:
            return 0.0

        self._stepping = True
        try:
            self.graph.step(width, height, dt)
        finally:
            self._stepping = False
        self.frames += 1
        return dt
