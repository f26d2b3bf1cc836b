"""Splines whose polynomials are defined by optimised node values."""

from __future__ import annotations

import numpy as np

from leggedtraj.nodes_variables import NodesObserver, Side
from leggedtraj.spline import Spline


class NodeSpline(Spline, NodesObserver):
    """A spline that follows the nodes of a NodesVariables set."""

    def __init__(self, node_variables, polynomial_durations):
        Spline.__init__(self, polynomial_durations, node_variables.dim())
        NodesObserver.__init__(self, node_variables)
        self.update_nodes()
        self.jac_wrt_nodes_structure = np.zeros(
            (node_variables.dim(), node_variables.rows)
        )

    def update_nodes(self):
        """Take over the current node values and refresh the coefficients."""
        for poly_id, poly in enumerate(self.cubic_polys):
            start, end = self.node_values.boundary_nodes(poly_id)
            poly.set_nodes(start, end)
        self.update_polynomial_coeff()

    def node_variables_count(self):
        """Number of optimisation variables behind the nodes."""
        return self.node_values.rows

    def jacobian_wrt_nodes(self, t_global, dxdt):
        """Derivative of pos/vel/acc at ``t_global`` wrt every node variable."""
        poly_id, t_local = self.get_local_time(t_global, self.poly_durations())
        return self.jacobian_wrt_nodes_local(poly_id, t_local, dxdt)

    def jacobian_wrt_nodes_local(self, poly_id, t_local, dxdt):
        """Derivative of pos/vel/acc of one polynomial at its local time."""
        jac = self.jac_wrt_nodes_structure.copy()
        self.fill_jacobian_wrt_nodes(poly_id, t_local, dxdt, jac, False)
        return jac

    def fill_jacobian_wrt_nodes(self, poly_id, t_local, dxdt, jac, fill_with_zeros):
        """Add, in place, the sensitivities of polynomial ``poly_id`` into ``jac``."""
        poly = self.cubic_polys[poly_id]
        sides = (
            (Side.START, poly.derivative_wrt_start_node),
            (Side.END, poly.derivative_wrt_end_node),
        )
        for idx in range(jac.shape[1]):
            for nvi in self.node_values.get_node_values_info(idx):
                for side, derivative in sides:
                    if self.node_values.node_id(poly_id, side) != nvi.id:
                        continue
                    val = 0.0 if fill_with_zeros else derivative(dxdt, nvi.deriv, t_local)
                    jac[nvi.dim, idx] += val