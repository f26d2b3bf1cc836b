import numpy as np

from leggedtraj.constraints import ForceConstraint, SplineAccConstraint
from leggedtraj.height_map import FlatGround, Gap
from leggedtraj.node_spline import NodeSpline
from leggedtraj.nodes_variables import (
    NodeValueInfo,
    NodesVariablesAll,
    ee_force_nodes_id,
    ee_motion_nodes_id,
)
from leggedtraj.phase_nodes import NodesVariablesEEForce, NodesVariablesEEMotion
from leggedtraj.problem import Bounds, Composite
from leggedtraj.state import Dx

FORCE = np.array([1.5, -2.0, 30.0])


def _force_setup(terrain):
    motion = NodesVariablesEEMotion(3, True, ee_motion_nodes_id(0), 2)
    force = NodesVariablesEEForce(3, True, ee_force_nodes_id(0), 3)
    motion.set_by_linear_interpolation([0.5, 0.1, 0.0], [1.0, 0.2, 0.0], 1.0)
    force.set_by_linear_interpolation(FORCE, FORCE, 1.0)
    variables = Composite("variables")
    variables.add_component(motion)
    variables.add_component(force)
    constraint = ForceConstraint(terrain, 1000.0, 0)
    constraint.init_variable_dependent_quantities(variables)
    return motion, force, constraint


def test_force_constraint_rows():
    _, force, constraint = _force_setup(FlatGround())
    assert constraint.rows == 5 * len(force.indices_of_non_constant_nodes())
    assert len(constraint.get_values()) == constraint.rows


def test_force_constraint_bounds():
    _, _, constraint = _force_setup(FlatGround())
    bounds = constraint.get_bounds()
    assert len(bounds) == constraint.rows
    assert bounds[0] == Bounds(0.0, 1000.0)
    assert bounds[1] == bounds[3]
    assert bounds[2] == bounds[4]


def test_unilateral_rows_equal_normal_force_on_flat_ground():
    _, _, constraint = _force_setup(FlatGround())
    g = constraint.get_values()
    assert np.allclose(g[0::5], FORCE[2])


def test_force_jacobian_reproduces_values():
    _, force, constraint = _force_setup(Gap(-10.0, 10.0, 0.2, 0.1, 0.0))
    jac = np.zeros((constraint.rows, force.rows))
    constraint.fill_jacobian_block(ee_force_nodes_id(0), jac)
    assert np.allclose(jac @ force.get_values(), constraint.get_values())


def test_motion_jacobian_zero_on_flat_ground():
    motion, _, constraint = _force_setup(FlatGround())
    jac = np.zeros((constraint.rows, motion.rows))
    constraint.fill_jacobian_block(ee_motion_nodes_id(0), jac)
    assert np.array_equal(jac, np.zeros_like(jac))


def test_motion_jacobian_only_on_stance_xy_positions():
    motion, force, constraint = _force_setup(Gap(-10.0, 10.0, 0.2, 0.1, 0.0))
    jac = np.zeros((constraint.rows, motion.rows))
    constraint.fill_jacobian_block(ee_motion_nodes_id(0), jac)
    allowed = set()
    for f_node in force.indices_of_non_constant_nodes():
        node = motion.node_id_at_start_of_phase(force.phase(f_node))
        for dim in (0, 1):
            allowed.add(motion.opt_index(NodeValueInfo(node, Dx.POS, dim)))
    used = set(np.nonzero(np.any(jac != 0.0, axis=0))[0].tolist())
    assert used
    assert used <= allowed


def _acc_setup():
    nodes = NodesVariablesAll(3, 2, "base-lin")
    spline = NodeSpline(nodes, [0.4, 0.6])
    return nodes, SplineAccConstraint(spline, "base-lin")


def test_spline_acc_rows_and_bounds():
    _, constraint = _acc_setup()
    assert constraint.rows == 2
    assert constraint.get_bounds() == [Bounds(0.0, 0.0)] * 2


def test_spline_acc_zero_for_straight_line():
    nodes, constraint = _acc_setup()
    nodes.set_by_linear_interpolation([0.0, 1.0], [2.0, -1.0], 1.0)
    constraint.spline.update_nodes()
    assert np.allclose(constraint.get_values(), 0.0)


def test_spline_acc_jacobian_reproduces_values():
    nodes, constraint = _acc_setup()
    x = np.array([0.1, -0.4, 0.7, 0.2, 1.3, 0.5, -0.8, 0.9, 0.0, 2.1, -0.3, 0.6])
    nodes.set_variables(x)
    g = constraint.get_values()
    jac = np.zeros((constraint.rows, nodes.rows))
    constraint.fill_jacobian_block("base-lin", jac)
    assert np.allclose(jac @ x, g)
    assert not np.allclose(g, 0.0)


def test_spline_acc_jacobian_ignores_other_sets():
    nodes, constraint = _acc_setup()
    jac = np.zeros((constraint.rows, nodes.rows))
    constraint.fill_jacobian_block("base-ang", jac)
    assert np.array_equal(jac, np.zeros_like(jac))