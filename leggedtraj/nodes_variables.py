"""Optimisation variables that hold the nodes of a spline."""

from __future__ import annotations

import copy
from abc import abstractmethod
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from leggedtraj.problem import NO_BOUND, SPECIFY_LATER, Bounds, VariableSet
from leggedtraj.state import Dx, Node

NODE_VALUE_NOT_OPTIMIZED = -1

BASE_LIN_NODES = "base-lin"
BASE_ANG_NODES = "base-ang"


def ee_motion_nodes_id(ee):
    """Name of the motion-node variables of endeffector ``ee``."""
    return f"ee-motion_{ee}"


def ee_force_nodes_id(ee):
    """Name of the force-node variables of endeffector ``ee``."""
    return f"ee-force_{ee}"


def ee_schedule_id(ee):
    """Name of the phase-duration variables of endeffector ``ee``."""
    return f"ee-schedule{ee}"


class Side(IntEnum):
    """Which end of a polynomial a node sits on."""

    START = 0
    END = 1


@dataclass(frozen=True)
class NodeValueInfo:
    """One scalar of a node: node index, derivative and dimension."""

    id: int
    deriv: Dx
    dim: int


class NodesObserver:
    """Something that must be refreshed whenever the node values change."""

    def __init__(self, subject):
        self.node_values = subject
        subject.add_observer(self)

    @abstractmethod
    def update_nodes(self):
        """Pull the current node values from the subject."""


class NodesVariables(VariableSet):
    """Node values of a spline, some of which are optimisation variables."""

    def __init__(self, name):
        super().__init__(SPECIFY_LATER, name)
        self._nodes = []
        self._bounds = []
        self._n_dim = 0
        self._observers = []

    @abstractmethod
    def get_node_values_info(self, idx):
        """The node values that optimisation variable ``idx`` stands for."""

    def opt_index(self, nvi):
        """Index of the variable holding ``nvi``, or NODE_VALUE_NOT_OPTIMIZED."""
        for idx in range(self.rows):
            if nvi in self.get_node_values_info(idx):
                return idx
        return NODE_VALUE_NOT_OPTIMIZED

    def get_values(self):
        x = np.zeros(self.rows)
        for idx in range(self.rows):
            for nvi in self.get_node_values_info(idx):
                x[idx] = self._nodes[nvi.id].at(nvi.deriv)[nvi.dim]
        return x

    def set_variables(self, x):
        x = np.asarray(x, float)
        if len(x) != self.rows:
            raise ValueError(f"expected {self.rows} values, got {len(x)}")
        for idx, value in enumerate(x):
            for nvi in self.get_node_values_info(idx):
                self._nodes[nvi.id].at(nvi.deriv)[nvi.dim] = value
        self.update_observers()

    def add_observer(self, observer):
        """Register an observer to be refreshed on every change."""
        self._observers.append(observer)

    def update_observers(self):
        """Refresh every registered observer."""
        for observer in self._observers:
            observer.update_nodes()

    @staticmethod
    def node_id(poly_id, side):
        """Index of the node on ``side`` of polynomial ``poly_id``."""
        return poly_id + int(side)

    def boundary_nodes(self, poly_id):
        """Copies of the start and end node of polynomial ``poly_id``."""
        return [
            copy.deepcopy(self._nodes[self.node_id(poly_id, Side.START)]),
            copy.deepcopy(self._nodes[self.node_id(poly_id, Side.END)]),
        ]

    def dim(self):
        """Number of dimensions of each node."""
        return self._n_dim

    def polynomial_count(self):
        """Number of polynomials the nodes delimit."""
        return len(self._nodes) - 1

    def get_bounds(self):
        return list(self._bounds)

    def nodes(self):
        """Copies of all nodes."""
        return copy.deepcopy(self._nodes)

    def set_by_linear_interpolation(self, initial_val, final_val, t_total):
        """Set the optimised values along a straight line from start to end."""
        initial_val = np.asarray(initial_val, float)
        dp = np.asarray(final_val, float) - initial_val
        average_velocity = dp / t_total
        num_nodes = len(self._nodes)

        for idx in range(self.rows):
            for nvi in self.get_node_values_info(idx):
                if nvi.deriv == Dx.POS:
                    pos = initial_val + nvi.id / float(num_nodes - 1) * dp
                    self._nodes[nvi.id].at(Dx.POS)[nvi.dim] = pos[nvi.dim]
                if nvi.deriv == Dx.VEL:
                    self._nodes[nvi.id].at(Dx.VEL)[nvi.dim] = average_velocity[nvi.dim]

    def add_bounds(self, node_id, deriv, dimensions, val):
        """Fix the given dimensions of one node derivative to ``val``."""
        for dim in dimensions:
            self.add_bound(NodeValueInfo(node_id, deriv, dim), val[dim])

    def add_bound(self, nvi, val):
        """Fix every variable that holds ``nvi`` to ``val``."""
        for idx in range(self.rows):
            if nvi in self.get_node_values_info(idx):
                self._bounds[idx] = Bounds(val, val)

    def add_start_bound(self, deriv, dimensions, val):
        """Fix values of the first node."""
        self.add_bounds(0, deriv, dimensions, val)

    def add_final_bound(self, deriv, dimensions, val):
        """Fix values of the last node."""
        self.add_bounds(len(self._nodes) - 1, deriv, dimensions, val)


class NodesVariablesAll(NodesVariables):
    """Nodes whose every position and velocity is optimised."""

    def __init__(self, n_nodes, n_dim, variable_id):
        super().__init__(variable_id)
        n_opt_variables = n_nodes * Node.n_derivatives * n_dim
        self._n_dim = n_dim
        self._nodes = [Node(n_dim) for _ in range(n_nodes)]
        self._bounds = [NO_BOUND] * n_opt_variables
        self.rows = n_opt_variables

    def get_node_values_info(self, idx):
        per_node = 2 * self.dim()
        internal_id = idx % per_node
        deriv = Dx.POS if internal_id < self.dim() else Dx.VEL
        return [NodeValueInfo(idx // per_node, deriv, internal_id % self.dim())]