"""Node variables whose parameterisation follows alternating contact phases."""

from __future__ import annotations

from dataclasses import dataclass

from leggedtraj.nodes_variables import NodeValueInfo, NodesVariables, Side
from leggedtraj.problem import NO_BOUND
from leggedtraj.state import Dx, Node

_K3D = 3
_Z = 2


@dataclass(frozen=True)
class PolyInfo:
    """Where a polynomial sits among the phases."""

    phase: int
    poly_in_phase: int
    n_polys_in_phase: int
    is_constant: bool


def build_poly_infos(phase_count, first_phase_constant, n_polys_in_changing_phase):
    """Describe every polynomial; constant and changing phases alternate."""
    infos = []
    phase_constant = first_phase_constant
    for phase in range(phase_count):
        if phase_constant:
            infos.append(PolyInfo(phase, 0, 1, True))
        else:
            infos.extend(
                PolyInfo(phase, j, n_polys_in_changing_phase, False)
                for j in range(n_polys_in_changing_phase)
            )
        phase_constant = not phase_constant
    return infos


class NodesVariablesPhaseBased(NodesVariables):
    """3D nodes, with one polynomial per constant phase and several per changing one."""

    def __init__(self, phase_count, first_phase_constant, name, n_polys_in_changing_phase):
        super().__init__(name)
        self.polynomial_info = build_poly_infos(
            phase_count, first_phase_constant, n_polys_in_changing_phase
        )
        self._n_dim = _K3D
        self._nodes = [Node(self._n_dim) for _ in range(len(self.polynomial_info) + 1)]
        self.index_to_node_value_info = {}

    def get_node_values_info(self, idx):
        return list(self.index_to_node_value_info[idx])

    def _set_number_of_variables(self, n_variables):
        self._bounds = [NO_BOUND] * n_variables
        self.rows = n_variables

    def convert_phase_to_poly_durations(self, phase_durations):
        """Duration of each polynomial from the durations of the phases."""
        return [
            phase_durations[info.phase] / info.n_polys_in_phase
            for info in self.polynomial_info[: self.polynomial_count()]
        ]

    def derivative_of_poly_duration_wrt_phase_duration(self, poly_id):
        """How much polynomial ``poly_id`` stretches per unit of its phase duration."""
        return 1.0 / self.polynomial_info[poly_id].n_polys_in_phase

    def number_of_prev_polynomials_in_phase(self, poly_id):
        """Polynomials of the same phase that come before ``poly_id``."""
        return self.polynomial_info[poly_id].poly_in_phase

    def is_constant_node(self, node_id):
        """True if a polynomial next to the node lies in a constant phase."""
        return any(self.is_in_constant_phase(p) for p in self.adjacent_poly_ids(node_id))

    def is_in_constant_phase(self, poly_id):
        """True if polynomial ``poly_id`` lies in a constant phase."""
        return self.polynomial_info[poly_id].is_constant

    def indices_of_non_constant_nodes(self):
        """Ids of the nodes that lie strictly inside changing phases."""
        return [i for i in range(len(self._nodes)) if not self.is_constant_node(i)]

    def phase(self, node_id):
        """Phase of a non-constant node."""
        if self.is_constant_node(node_id):
            raise ValueError(f"node {node_id} is constant and borders two phases")
        return self.polynomial_info[self.adjacent_poly_ids(node_id)[0]].phase

    def poly_id_at_start_of_phase(self, phase):
        """First polynomial of ``phase``."""
        for poly_id, info in enumerate(self.polynomial_info):
            if info.phase == phase:
                return poly_id
        raise ValueError(f"no phase {phase}")

    def value_at_start_of_phase(self, phase):
        """Position of the node that starts ``phase``."""
        return self._nodes[self.node_id_at_start_of_phase(phase)].p()

    def node_id_at_start_of_phase(self, phase):
        """Id of the node that starts ``phase``."""
        return self.node_id(self.poly_id_at_start_of_phase(phase), Side.START)

    def adjacent_poly_ids(self, node_id):
        """Polynomials that touch node ``node_id``."""
        last_node_id = len(self._nodes) - 1
        if node_id == 0:
            return [0]
        if node_id == last_node_id:
            return [last_node_id - 1]
        return [node_id - 1, node_id]


class NodesVariablesEEMotion(NodesVariablesPhaseBased):
    """Foot motion: the foot stays put while in contact."""

    def __init__(self, phase_count, is_in_contact_at_start, name, n_polys_in_changing_phase):
        super().__init__(phase_count, is_in_contact_at_start, name, n_polys_in_changing_phase)
        self.index_to_node_value_info = self._phase_based_parameterization()
        self._set_number_of_variables(len(self.index_to_node_value_info))

    def _phase_based_parameterization(self):
        index_map = {}
        idx = 0
        node_id = 0
        while node_id < len(self._nodes):
            if not self.is_constant_node(node_id):
                for dim in range(self.dim()):
                    index_map.setdefault(idx, []).append(NodeValueInfo(node_id, Dx.POS, dim))
                    idx += 1
                    if dim == _Z:
                        # vertical swing velocity is fixed to zero at the swing nodes
                        self._nodes[node_id].at(Dx.VEL)[_Z] = 0.0
                    else:
                        index_map.setdefault(idx, []).append(NodeValueInfo(node_id, Dx.VEL, dim))
                        idx += 1
                node_id += 1
            else:
                self._nodes[node_id].at(Dx.VEL)[:] = 0.0
                self._nodes[node_id + 1].at(Dx.VEL)[:] = 0.0
                for dim in range(self.dim()):
                    index_map[idx] = [
                        NodeValueInfo(node_id, Dx.POS, dim),
                        NodeValueInfo(node_id + 1, Dx.POS, dim),
                    ]
                    idx += 1
                node_id += 2
        return index_map


class NodesVariablesEEForce(NodesVariablesPhaseBased):
    """Contact force: zero in the air, optimised while in contact."""

    def __init__(self, phase_count, is_in_contact_at_start, name, n_polys_in_changing_phase):
        super().__init__(
            phase_count, not is_in_contact_at_start, name, n_polys_in_changing_phase
        )
        self.index_to_node_value_info = self._phase_based_parameterization()
        self._set_number_of_variables(len(self.index_to_node_value_info))

    def _phase_based_parameterization(self):
        index_map = {}
        idx = 0
        node_id = 0
        while node_id < len(self._nodes):
            if not self.is_constant_node(node_id):
                for dim in range(self.dim()):
                    index_map[idx] = [NodeValueInfo(node_id, Dx.POS, dim)]
                    index_map[idx + 1] = [NodeValueInfo(node_id, Dx.VEL, dim)]
                    idx += 2
                node_id += 1
            else:
                for nid in (node_id, node_id + 1):
                    self._nodes[nid].at(Dx.POS)[:] = 0.0
                    self._nodes[nid].at(Dx.VEL)[:] = 0.0
                node_id += 2
        return index_map