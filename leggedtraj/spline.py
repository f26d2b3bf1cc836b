"""Sequences of cubic Hermite polynomials joined end to end in time."""

from __future__ import annotations

import math

from leggedtraj.polynomial import CubicHermitePolynomial

_EPS = 1e-10


def get_segment_id(t_global, durations):
    """Index of the segment active at ``t_global``; junctions belong to the earlier one."""
    if t_global < 0.0:
        raise ValueError(f"negative time {t_global}")
    t = 0.0
    for i, d in enumerate(durations):
        t += d
        if t >= t_global - _EPS:
            return i
    raise ValueError(f"time {t_global} lies beyond the total duration {t}")


class Spline:
    """A piecewise cubic trajectory in ``n_dim`` dimensions."""

    def __init__(self, poly_durations, n_dim):
        self.cubic_polys = []
        for duration in poly_durations:
            poly = CubicHermitePolynomial(n_dim)
            poly.duration = duration
            self.cubic_polys.append(poly)
        self.update_polynomial_coeff()

    def get_local_time(self, t_global, durations):
        """Segment index and time since that segment started."""
        segment = get_segment_id(t_global, durations)
        t_local = t_global
        for d in durations[:segment]:
            t_local -= d
        return segment, t_local

    def get_point(self, t_global):
        """State of the spline at global time ``t_global``."""
        segment, t_local = self.get_local_time(t_global, self.poly_durations())
        return self.get_point_local(segment, t_local)

    def get_point_local(self, poly_id, t_local):
        """State of polynomial ``poly_id`` at its local time ``t_local``."""
        return self.cubic_polys[poly_id].get_point(t_local)

    def update_polynomial_coeff(self):
        """Recompute the coefficients of every polynomial."""
        for poly in self.cubic_polys:
            poly.update_coeff()

    def polynomial_count(self):
        """Number of polynomials in the spline."""
        return len(self.cubic_polys)

    def poly_durations(self):
        """Durations of the polynomials, in order."""
        return [poly.duration for poly in self.cubic_polys]

    def total_time(self):
        """Sum of all polynomial durations."""
        return math.fsum(self.poly_durations())