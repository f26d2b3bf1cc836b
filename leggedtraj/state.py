"""Values of a point together with its time derivatives."""

from __future__ import annotations

from enum import IntEnum

import numpy as np


class Dx(IntEnum):
    """Order of a time derivative."""

    POS = 0
    VEL = 1
    ACC = 2


class State:
    """Position and higher time derivatives of a point in ``dim`` dimensions."""

    def __init__(self, dim, n_derivatives):
        self.values = [np.zeros(dim) for _ in range(n_derivatives)]

    def at(self, deriv):
        """The vector of the given derivative; changes to it change the state."""
        index = int(deriv)
        if not 0 <= index < len(self.values):
            raise IndexError(f"state holds no derivative of order {index}")
        return self.values[index]

    def p(self):
        """A copy of the position."""
        return self.at(Dx.POS).copy()

    def v(self):
        """A copy of the velocity."""
        return self.at(Dx.VEL).copy()

    def a(self):
        """A copy of the acceleration."""
        return self.at(Dx.ACC).copy()

    def __repr__(self):
        parts = ", ".join(np.array2string(v) for v in self.values)
        return f"{type(self).__name__}({parts})"


class Node(State):
    """A spline node: position and velocity only."""

    n_derivatives = 2

    def __init__(self, dim):
        super().__init__(dim, self.n_derivatives)