#!/usr/bin/env python3
"""
2D vector value type used by the layout engine.
Every operation returns a new Vector; instances are never mutated.
"""
import math
import random


class Vector:
    __slots__ = ('x', 'y')

    def __init__(self, x=0.0, y=0.0):
        self.x = x
        self.y = y

    def __repr__(self):
        return f"Vector({self.x!r}, {self.y!r})"

    def __eq__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))

    def __iter__(self):
        yield self.x
        yield self.y

    def add(self, other):
        return Vector(self.x + other.x, self.y + other.y)

    def sub(self, other):
        return Vector(self.x - other.x, self.y - other.y)

    def mul(self, other):
        """Elementwise product."""
        return Vector(self.x * other.x, self.y * other.y)

    def add_scalar(self, s):
        return Vector(self.x + s, self.y + s)

    def mul_scalar(self, s):
        return Vector(self.x * s, self.y * s)

    def div_scalar(self, s):
        return Vector(self.x / s, self.y / s)

    __add__ = add
    __sub__ = sub

    def __mul__(self, s):
        return self.mul_scalar(s)

    __rmul__ = __mul__

    def __truediv__(self, s):
        return self.div_scalar(s)

    def __neg__(self):
        return Vector(-self.x, -self.y)

    def magnitude(self):
        return math.hypot(self.x, self.y)

    def normalized(self):
        """
        Unit vector in the same direction.

        The zero vector has no direction: the result then has NaN components
        instead of raising, so callers must check the magnitude first.
        """
        mag = self.magnitude()
        if mag == 0:
            return Vector(math.nan, math.nan)
        return self.div_scalar(mag)

    def is_finite(self):
        return math.isfinite(self.x) and math.isfinite(self.y)

    @classmethod
    def random(cls, rng=None):
        """Both components independently uniform in [0, 1)."""
        rng = rng or random
        return cls(rng.random(), rng.random())

    @classmethod
    def random_unit(cls, rng=None):
        """Unit vector pointing in a uniformly random direction."""
        rng = rng or random
        angle = rng.uniform(0, 2 * math.pi)
        return cls(math.cos(angle), math.sin(angle))
