import numpy as np
import pytest

from leggedtraj.nodes_variables import (
    NODE_VALUE_NOT_OPTIMIZED,
    NodeValueInfo,
    NodesObserver,
    NodesVariables,
    NodesVariablesAll,
    Side,
    ee_force_nodes_id,
    ee_motion_nodes_id,
    ee_schedule_id,
)
from leggedtraj.problem import NO_BOUND, Bounds
from leggedtraj.state import Dx


class CountingObserver(NodesObserver):
    def __init__(self, subject):
        self.calls = 0
        super().__init__(subject)

    def update_nodes(self):
        self.calls += 1


def make(n_nodes=3, n_dim=2):
    return NodesVariablesAll(n_nodes, n_dim, "lin")


def test_ids_are_distinct_per_endeffector():
    ids = {f(ee) for f in (ee_motion_nodes_id, ee_force_nodes_id, ee_schedule_id) for ee in (0, 1)}
    assert len(ids) == 6


def test_rows_and_bounds_count():
    nodes = make(4, 3)
    assert nodes.rows == 4 * 2 * 3
    assert nodes.get_bounds() == [NO_BOUND] * nodes.rows


def test_node_values_info_layout():
    nodes = make(3, 2)
    assert nodes.get_node_values_info(0) == [NodeValueInfo(0, Dx.POS, 0)]
    assert nodes.get_node_values_info(2) == [NodeValueInfo(0, Dx.VEL, 0)]
    assert nodes.get_node_values_info(4) == [NodeValueInfo(1, Dx.POS, 0)]


def test_opt_index_round_trip():
    nodes = make(3, 3)
    for idx in range(nodes.rows):
        (nvi,) = nodes.get_node_values_info(idx)
        assert nodes.opt_index(nvi) == idx


def test_opt_index_missing():
    nodes = make(2, 2)
    assert nodes.opt_index(NodeValueInfo(5, Dx.POS, 0)) == NODE_VALUE_NOT_OPTIMIZED


def test_set_get_round_trip():
    nodes = make(3, 2)
    x = np.linspace(-1.0, 1.0, nodes.rows)
    nodes.set_variables(x)
    np.testing.assert_allclose(nodes.get_values(), x)


def test_set_variables_wrong_length():
    nodes = make(3, 2)
    with pytest.raises(ValueError):
        nodes.set_variables(np.zeros(nodes.rows + 1))


def test_observer_notified():
    nodes = make(2, 2)
    observer = CountingObserver(nodes)
    nodes.set_variables(np.ones(nodes.rows))
    nodes.set_variables(np.zeros(nodes.rows))
    assert observer.calls == 2
    assert observer.node_values is nodes


def test_node_id_and_polynomial_count():
    nodes = make(5, 2)
    assert NodesVariables.node_id(2, Side.START) == 2
    assert NodesVariables.node_id(2, Side.END) == 3
    assert nodes.polynomial_count() == 4
    assert nodes.dim() == 2


def test_boundary_nodes_are_copies():
    nodes = make(3, 2)
    nodes.set_variables(np.arange(nodes.rows, dtype=float))
    start, end = nodes.boundary_nodes(1)
    np.testing.assert_allclose(start.p(), nodes.nodes()[1].p())
    np.testing.assert_allclose(end.v(), nodes.nodes()[2].v())
    start.at(Dx.POS)[:] = 99.0
    assert not np.any(nodes.nodes()[1].p() == 99.0)


def test_linear_interpolation():
    nodes = make(3, 2)
    initial = np.array([0.0, 0.0])
    final = np.array([2.0, 4.0])
    nodes.set_by_linear_interpolation(initial, final, 2.0)
    result = nodes.nodes()
    np.testing.assert_allclose(result[0].p(), initial)
    np.testing.assert_allclose(result[1].p(), (initial + final) / 2)
    np.testing.assert_allclose(result[2].p(), final)
    for node in result:
        np.testing.assert_allclose(node.v(), (final - initial) / 2.0)


def test_start_and_final_bounds():
    nodes = make(3, 2)
    nodes.add_start_bound(Dx.POS, [0, 1], np.array([1.0, 2.0]))
    nodes.add_final_bound(Dx.VEL, [1], np.array([0.0, 3.0]))
    bounds = nodes.get_bounds()
    assert bounds[nodes.opt_index(NodeValueInfo(0, Dx.POS, 0))] == Bounds(1.0, 1.0)
    assert bounds[nodes.opt_index(NodeValueInfo(0, Dx.POS, 1))] == Bounds(2.0, 2.0)
    assert bounds[nodes.opt_index(NodeValueInfo(2, Dx.VEL, 1))] == Bounds(3.0, 3.0)
    assert bounds[nodes.opt_index(NodeValueInfo(2, Dx.VEL, 0))] == NO_BOUND
    assert sum(b != NO_BOUND for b in bounds) == 3