"""Building blocks of a nonlinear program: variables, constraints and costs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

INFINITY = 1.0e20
SPECIFY_LATER = -1


@dataclass(frozen=True)
class Bounds:
    """Lower and upper limit of one value."""

    lower: float = 0.0
    upper: float = 0.0

    def __add__(self, offset):
        return Bounds(self.lower + offset, self.upper + offset)


NO_BOUND = Bounds(-INFINITY, INFINITY)
BOUND_ZERO = Bounds(0.0, 0.0)
BOUND_GREATER_ZERO = Bounds(0.0, INFINITY)
BOUND_SMALLER_ZERO = Bounds(-INFINITY, 0.0)


class Component(ABC):
    """A named block of ``rows`` values of an optimisation problem."""

    def __init__(self, rows, name):
        self.rows = rows
        self.name = name

    @abstractmethod
    def get_values(self):
        """Current values as a vector of length ``rows``."""

    @abstractmethod
    def get_bounds(self):
        """One Bounds per row."""


class VariableSet(Component):
    """A set of decision variables."""

    @abstractmethod
    def get_values(self):
        """Current variable values."""

    @abstractmethod
    def set_variables(self, x):
        """Replace the variable values by ``x``."""

    @abstractmethod
    def get_bounds(self):
        """Bounds of each variable."""


class Composite:
    """An ordered collection of components, seen as one stacked vector."""

    def __init__(self, name):
        self.name = name
        self.components = []

    @property
    def rows(self):
        return sum(c.rows for c in self.components)

    def add_component(self, component):
        """Append a component."""
        self.components.append(component)

    def get_component(self, name):
        """The component called ``name``."""
        for component in self.components:
            if component.name == name:
                return component
        raise KeyError(f"no component named {name!r} in {self.name!r}")

    def get_values(self):
        """All component values, stacked in order."""
        if not self.components:
            return np.zeros(0)
        return np.concatenate([np.asarray(c.get_values(), float) for c in self.components])

    def get_bounds(self):
        """All component bounds, in order."""
        return [b for c in self.components for b in c.get_bounds()]

    def set_variables(self, x):
        """Split ``x`` over the components and hand each its part."""
        x = np.asarray(x, float)
        if len(x) != self.rows:
            raise ValueError(f"expected {self.rows} values, got {len(x)}")
        start = 0
        for component in self.components:
            component.set_variables(x[start : start + component.rows])
            start += component.rows


class ConstraintSet(Component):
    """Constraint rows that depend on the variables of a Composite."""

    def __init__(self, rows, name):
        super().__init__(rows, name)
        self.variables = None

    def link_with_variables(self, variables):
        """Attach the variable composite this constraint reads from."""
        self.variables = variables
        self.init_variable_dependent_quantities(variables)

    def init_variable_dependent_quantities(self, variables):
        """Hook run once the variables are known; does nothing by default."""

    def _linked_variables(self):
        if self.variables is None:
            raise RuntimeError(f"{self.name!r} is not linked with variables")
        return self.variables

    def get_jacobian(self):
        """Dense Jacobian wrt all variables, column blocks in variable order."""
        blocks = []
        for var in self._linked_variables().components:
            block = np.zeros((self.rows, var.rows))
            self.fill_jacobian_block(var.name, block)
            blocks.append(block)
        if not blocks:
            return np.zeros((self.rows, 0))
        return np.hstack(blocks)

    @abstractmethod
    def fill_jacobian_block(self, var_set, jac):
        """Write, in place, the derivatives wrt variable set ``var_set`` into ``jac``."""


class CostTerm(ConstraintSet):
    """A single scalar cost."""

    def __init__(self, name):
        super().__init__(1, name)

    @abstractmethod
    def get_cost(self):
        """The scalar cost."""

    def get_values(self):
        return np.array([self.get_cost()])

    def get_bounds(self):
        return [NO_BOUND] * self.rows


class LinearEqualityConstraint(ConstraintSet):
    """The constraint M x + v = 0 on one variable set."""

    def __init__(self, M, v, variable_name):
        v = np.asarray(v, float)
        super().__init__(len(v), "linear-equality-" + variable_name)
        self.M = np.asarray(M, float)
        self.v = v
        self.variable_name = variable_name

    def get_values(self):
        x = self._linked_variables().get_component(self.variable_name).get_values()
        return self.M @ np.asarray(x, float)

    def get_bounds(self):
        return [Bounds(-vi, -vi) for vi in self.v]

    def fill_jacobian_block(self, var_set, jac):
        if var_set == self.variable_name:
            jac[:, :] = self.M


class SoftConstraint(CostTerm):
    """Turns a constraint into the weighted quadratic cost of leaving its bounds' centre."""

    def __init__(self, constraint):
        super().__init__("soft-" + constraint.name)
        self.constraint = constraint
        self.b = np.array([(b.upper + b.lower) / 2.0 for b in constraint.get_bounds()])
        self.weights = np.ones(constraint.rows)

    def init_variable_dependent_quantities(self, variables):
        self.constraint.link_with_variables(variables)

    def _weighted_residual(self):
        g = np.asarray(self.constraint.get_values(), float)
        return g - self.b

    def get_cost(self):
        r = self._weighted_residual()
        return float(0.5 * r @ (self.weights * r))

    def get_values(self):
        """The cost 0.5 (g-b)^T W (g-b) as a one-element vector."""
        return np.array([self.get_cost()])

    def get_jacobian(self):
        r = self._weighted_residual()
        grad = self.constraint.get_jacobian().T @ (self.weights * r)
        return grad.reshape(1, -1)

    def fill_jacobian_block(self, var_set, jac):
        block = np.zeros((self.constraint.rows, jac.shape[1]))
        self.constraint.fill_jacobian_block(var_set, block)
        jac[:, :] = ((self.weights * self._weighted_residual()) @ block).reshape(1, -1)