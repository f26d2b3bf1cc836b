"""Polynomials in time and cubic Hermite segments between two nodes."""

from __future__ import annotations

import copy
from enum import IntEnum

import numpy as np

from leggedtraj.state import Dx, Node, State


class Coefficients(IntEnum):
    """Indices of polynomial coefficients, by power of t."""

    A = 0
    B = 1
    C = 2
    D = 3


class Polynomial:
    """A vector-valued polynomial of a given order."""

    def __init__(self, order, dim):
        self.coeff = [np.zeros(dim) for _ in range(order + 1)]

    def get_point(self, t_local):
        """Position, velocity and acceleration at local time ``t_local``."""
        if t_local < 0.0:
            raise ValueError(f"polynomial evaluated at negative time {t_local}")
        out = State(len(self.coeff[0]), 3)
        for d in Dx:
            vec = out.at(d)
            for c, coeff in enumerate(self.coeff):
                vec += self.get_derivative_wrt_coeff(t_local, d, c) * coeff
        return out

    def get_derivative_wrt_coeff(self, t, deriv, c):
        """Derivative of the ``deriv``-th time derivative wrt coefficient ``c``."""
        t = float(t)
        if deriv == Dx.POS:
            return t**c
        if deriv == Dx.VEL:
            return c * t ** (c - 1) if c >= 1 else 0.0
        if deriv == Dx.ACC:
            return c * (c - 1) * t ** (c - 2) if c >= 2 else 0.0
        raise ValueError(f"derivative {deriv!r} not defined")


class CubicHermitePolynomial(Polynomial):
    """Cubic polynomial fixed by start and end node and its duration."""

    def __init__(self, dim):
        super().__init__(3, dim)
        self.n0 = Node(dim)
        self.n1 = Node(dim)
        self.duration = 0.0

    def set_nodes(self, n0, n1):
        """Store copies of the start and end node."""
        self.n0 = copy.deepcopy(n0)
        self.n1 = copy.deepcopy(n1)

    def update_coeff(self):
        """Recompute the coefficients from nodes and duration."""
        T = self.duration
        p0, v0 = self.n0.p(), self.n0.v()
        p1, v1 = self.n1.p(), self.n1.v()
        self.coeff[Coefficients.A] = p0
        self.coeff[Coefficients.B] = v0
        self.coeff[Coefficients.C] = -(3 * (p0 - p1) + T * (2 * v0 + v1)) / T**2
        self.coeff[Coefficients.D] = (2 * (p0 - p1) + T * (v0 + v1)) / T**3

    def derivative_wrt_start_node(self, dfdt, node_derivative, t_local):
        """Sensitivity of pos/vel/acc (``dfdt``) wrt a start-node value."""
        handlers = {
            Dx.POS: self._pos_wrt_start,
            Dx.VEL: self._vel_wrt_start,
            Dx.ACC: self._acc_wrt_start,
        }
        if dfdt not in handlers:
            raise ValueError(f"derivative {dfdt!r} not implemented")
        return handlers[dfdt](node_derivative, t_local)

    def derivative_wrt_end_node(self, dfdt, node_derivative, t_local):
        """Sensitivity of pos/vel/acc (``dfdt``) wrt an end-node value."""
        handlers = {
            Dx.POS: self._pos_wrt_end,
            Dx.VEL: self._vel_wrt_end,
            Dx.ACC: self._acc_wrt_end,
        }
        if dfdt not in handlers:
            raise ValueError(f"derivative {dfdt!r} not implemented")
        return handlers[dfdt](node_derivative, t_local)

    @staticmethod
    def _pick(node_value, pos, vel):
        if node_value == Dx.POS:
            return pos()
        if node_value == Dx.VEL:
            return vel()
        raise ValueError("only derivatives wrt node position and velocity exist")

    def _pos_wrt_start(self, node_value, t):
        T = self.duration
        return self._pick(
            node_value,
            lambda: (2 * t**3) / T**3 - (3 * t**2) / T**2 + 1,
            lambda: t - (2 * t**2) / T + t**3 / T**2,
        )

    def _vel_wrt_start(self, node_value, t):
        T = self.duration
        return self._pick(
            node_value,
            lambda: (6 * t**2) / T**3 - (6 * t) / T**2,
            lambda: (3 * t**2) / T**2 - (4 * t) / T + 1,
        )

    def _acc_wrt_start(self, node_value, t):
        T = self.duration
        return self._pick(
            node_value,
            lambda: (12 * t) / T**3 - 6 / T**2,
            lambda: (6 * t) / T**2 - 4 / T,
        )

    def _pos_wrt_end(self, node_value, t):
        T = self.duration
        return self._pick(
            node_value,
            lambda: (3 * t**2) / T**2 - (2 * t**3) / T**3,
            lambda: t**3 / T**2 - t**2 / T,
        )

    def _vel_wrt_end(self, node_value, t):
        T = self.duration
        return self._pick(
            node_value,
            lambda: (6 * t) / T**2 - (6 * t**2) / T**3,
            lambda: (3 * t**2) / T**2 - (2 * t) / T,
        )

    def _acc_wrt_end(self, node_value, t):
        T = self.duration
        return self._pick(
            node_value,
            lambda: 6 / T**2 - (12 * t) / T**3,
            lambda: (6 * t) / T**2 - 2 / T,
        )

    def derivative_of_pos_wrt_duration(self, t):
        """Sensitivity of the position at local time ``t`` wrt the duration."""
        x0, x1 = self.n0.p(), self.n1.p()
        v0, v1 = self.n0.v(), self.n1.v()
        T = self.duration
        return (
            (t**3 * (v0 + v1)) / T**3
            - (t**2 * (2 * v0 + v1)) / T**2
            - (3 * t**3 * (2 * x0 - 2 * x1 + T * v0 + T * v1)) / T**4
            + (2 * t**2 * (3 * x0 - 3 * x1 + 2 * T * v0 + T * v1)) / T**3
        )