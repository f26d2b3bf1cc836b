"""Constraints on contact forces and on spline smoothness."""

from __future__ import annotations

import math

import numpy as np

from leggedtraj.height_map import X_, Y_, Direction
from leggedtraj.nodes_variables import (
    NODE_VALUE_NOT_OPTIMIZED,
    NodeValueInfo,
    ee_force_nodes_id,
    ee_motion_nodes_id,
)
from leggedtraj.problem import SPECIFY_LATER, Bounds, ConstraintSet
from leggedtraj.state import Dx

_K2D = 2


class ForceConstraint(ConstraintSet):
    """Unilateral contact forces inside a linearised friction pyramid."""

    def __init__(self, terrain, force_limit, ee):
        super().__init__(SPECIFY_LATER, "force-" + ee_force_nodes_id(ee))
        self.terrain = terrain
        self.fn_max = force_limit
        self.mu = terrain.friction_coeff
        self.ee = ee
        # positive normal force and four sides of the friction pyramid
        self.n_constraints_per_node = 1 + 2 * _K2D
        self.ee_force = None
        self.ee_motion = None
        self.pure_stance_force_node_ids = []

    def init_variable_dependent_quantities(self, variables):
        """Look up the force and motion nodes and size the constraint."""
        self.ee_force = variables.get_component(ee_force_nodes_id(self.ee))
        self.ee_motion = variables.get_component(ee_motion_nodes_id(self.ee))
        self.pure_stance_force_node_ids = self.ee_force.indices_of_non_constant_nodes()
        self.rows = len(self.pure_stance_force_node_ids) * self.n_constraints_per_node

    def _contact_point(self, f_node_id):
        phase = self.ee_force.phase(f_node_id)
        # the foot does not move during a stance phase
        return phase, self.ee_motion.value_at_start_of_phase(phase)

    def get_values(self):
        g = np.zeros(self.rows)
        force_nodes = self.ee_force.nodes()
        row = 0
        for f_node_id in self.pure_stance_force_node_ids:
            _, p = self._contact_point(f_node_id)
            n = self.terrain.normalized_basis(Direction.NORMAL, p[0], p[1])
            t1 = self.terrain.normalized_basis(Direction.TANGENT1, p[0], p[1])
            t2 = self.terrain.normalized_basis(Direction.TANGENT2, p[0], p[1])
            f = force_nodes[f_node_id].p()
            g[row:row + 5] = [
                f @ n,
                f @ (t1 - self.mu * n),
                f @ (t1 + self.mu * n),
                f @ (t2 - self.mu * n),
                f @ (t2 + self.mu * n),
            ]
            row += self.n_constraints_per_node
        return g

    def get_bounds(self):
        bounds = []
        for _ in self.pure_stance_force_node_ids:
            bounds.extend(
                [
                    Bounds(0.0, self.fn_max),     # unilateral force
                    Bounds(-math.inf, 0.0),       # f_t1 <  mu*n
                    Bounds(0.0, math.inf),        # f_t1 > -mu*n
                    Bounds(-math.inf, 0.0),       # f_t2 <  mu*n
                    Bounds(0.0, math.inf),        # f_t2 > -mu*n
                ]
            )
        return bounds

    def fill_jacobian_block(self, var_set, jac):
        """Write the derivatives wrt ``var_set`` into ``jac``, in place."""
        mu = self.mu
        if var_set == ee_force_nodes_id(self.ee):
            row = 0
            for f_node_id in self.pure_stance_force_node_ids:
                _, p = self._contact_point(f_node_id)
                n = self.terrain.normalized_basis(Direction.NORMAL, p[0], p[1])
                t1 = self.terrain.normalized_basis(Direction.TANGENT1, p[0], p[1])
                t2 = self.terrain.normalized_basis(Direction.TANGENT2, p[0], p[1])
                for dim in range(3):
                    idx = self.ee_force.opt_index(NodeValueInfo(f_node_id, Dx.POS, dim))
                    if idx == NODE_VALUE_NOT_OPTIMIZED:
                        continue
                    jac[row:row + 5, idx] = [
                        n[dim],
                        t1[dim] - mu * n[dim],
                        t1[dim] + mu * n[dim],
                        t2[dim] - mu * n[dim],
                        t2[dim] + mu * n[dim],
                    ]
                row += self.n_constraints_per_node

        if var_set == ee_motion_nodes_id(self.ee):
            row = 0
            force_nodes = self.ee_force.nodes()
            for f_node_id in self.pure_stance_force_node_ids:
                phase, p = self._contact_point(f_node_id)
                ee_node_id = self.ee_motion.node_id_at_start_of_phase(phase)
                f = force_nodes[f_node_id].p()
                for dim in (X_, Y_):
                    dn = self.terrain.derivative_of_normalized_basis_wrt(
                        Direction.NORMAL, dim, p[0], p[1])
                    dt1 = self.terrain.derivative_of_normalized_basis_wrt(
                        Direction.TANGENT1, dim, p[0], p[1])
                    dt2 = self.terrain.derivative_of_normalized_basis_wrt(
                        Direction.TANGENT2, dim, p[0], p[1])
                    idx = self.ee_motion.opt_index(NodeValueInfo(ee_node_id, Dx.POS, dim))
                    if idx == NODE_VALUE_NOT_OPTIMIZED:
                        continue
                    jac[row:row + 5, idx] = [
                        f @ dn,
                        f @ (dt1 - mu * dn),
                        f @ (dt1 + mu * dn),
                        f @ (dt2 - mu * dn),
                        f @ (dt2 + mu * dn),
                    ]
                row += self.n_constraints_per_node


class SplineAccConstraint(ConstraintSet):
    """Equal accelerations on both sides of every junction of a spline."""

    def __init__(self, spline, node_variable_name):
        super().__init__(SPECIFY_LATER, "splineacc-" + node_variable_name)
        self.spline = spline
        self.node_variables_id = node_variable_name
        self.n_dim = len(spline.get_point(0.0).p())
        self.n_junctions = spline.polynomial_count() - 1
        self.T = spline.poly_durations()
        self.rows = self.n_dim * self.n_junctions

    def get_values(self):
        g = np.zeros(self.rows)
        for j in range(self.n_junctions):
            acc_prev = self.spline.get_point_local(j, self.T[j]).a()
            acc_next = self.spline.get_point_local(j + 1, 0.0).a()
            g[j * self.n_dim:(j + 1) * self.n_dim] = acc_prev - acc_next
        return g

    def get_bounds(self):
        return [Bounds(0.0, 0.0) for _ in range(self.rows)]

    def fill_jacobian_block(self, var_set, jac):
        """Write the derivatives wrt ``var_set`` into ``jac``, in place."""
        if var_set != self.node_variables_id:
            return
        for j in range(self.n_junctions):
            acc_prev = self.spline.jacobian_wrt_nodes_local(j, self.T[j], Dx.ACC)
            acc_next = self.spline.jacobian_wrt_nodes_local(j + 1, 0.0, Dx.ACC)
            jac[j * self.n_dim:(j + 1) * self.n_dim] = acc_prev - acc_next