"""Cost terms on node values."""

from __future__ import annotations

from leggedtraj.problem import CostTerm


class NodeCost(CostTerm):
    """Weighted sum of squares of one derivative and dimension over all nodes."""

    def __init__(self, nodes_id, deriv, dim, weight):
        super().__init__(1, f"{nodes_id}-dx_{int(deriv)}-dim_{int(dim)}")
        self.node_id = nodes_id
        self.deriv = deriv
        self.dim = dim
        self.weight = weight
        self.nodes = None

    def init_variable_dependent_quantities(self, variables):
        """Look up the node variables this cost is defined on."""
        self.nodes = variables.get_component(self.node_id)

    def get_cost(self):
        """Value of the cost for the current node values."""
        return sum(
            self.weight * node.at(self.deriv)[self.dim] ** 2 for node in self.nodes.nodes()
        )

    def fill_jacobian_block(self, var_set, jac):
        """Add the gradient wrt ``var_set`` into row 0 of ``jac``, in place."""
        if var_set != self.node_id:
            return
        nodes = self.nodes.nodes()
        for i in range(self.nodes.rows):
            for nvi in self.nodes.get_node_values_info(i):
                if nvi.deriv == self.deriv and nvi.dim == self.dim:
                    val = nodes[nvi.id].at(self.deriv)[self.dim]
                    jac[0, i] += self.weight * 2.0 * val