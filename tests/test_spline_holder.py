import numpy as np
import pytest

from leggedtraj.nodes_variables import (
    BASE_ANG_NODES,
    BASE_LIN_NODES,
    NodesVariablesAll,
    ee_force_nodes_id,
    ee_motion_nodes_id,
)
from leggedtraj.phase_durations import PhaseDurations
from leggedtraj.phase_nodes import NodesVariablesEEForce, NodesVariablesEEMotion
from leggedtraj.spline_holder import SplineHolder

TIMINGS = [0.3, 0.4, 0.3]
BASE_DURATIONS = [0.5, 0.5]


def _parts(n_ee=2):
    lin = NodesVariablesAll(3, 3, BASE_LIN_NODES)
    ang = NodesVariablesAll(3, 3, BASE_ANG_NODES)
    motion = [NodesVariablesEEMotion(3, True, ee_motion_nodes_id(ee), 2) for ee in range(n_ee)]
    force = [NodesVariablesEEForce(3, True, ee_force_nodes_id(ee), 3) for ee in range(n_ee)]
    schedules = [PhaseDurations(ee, TIMINGS, True, 0.1, 1.0) for ee in range(n_ee)]
    return lin, ang, motion, force, schedules


def _holder(durations_change):
    lin, ang, motion, force, schedules = _parts()
    holder = SplineHolder(lin, ang, BASE_DURATIONS, motion, force, schedules, durations_change)
    return holder, lin, ang, motion, force, schedules


@pytest.mark.parametrize("durations_change", [True, False])
def test_one_spline_per_endeffector(durations_change):
    holder, _, _, motion, force, schedules = _holder(durations_change)
    assert len(holder.ee_motion) == len(motion)
    assert len(holder.ee_force) == len(force)
    assert holder.phase_durations == schedules
    for ee, spline in enumerate(holder.ee_motion):
        np.testing.assert_allclose(
            spline.poly_durations(), motion[ee].convert_phase_to_poly_durations(TIMINGS)
        )
    for ee, spline in enumerate(holder.ee_force):
        np.testing.assert_allclose(
            spline.poly_durations(), force[ee].convert_phase_to_poly_durations(TIMINGS)
        )


def test_base_splines_follow_their_nodes():
    holder, lin, ang, *_ = _holder(False)
    assert holder.base_linear.poly_durations() == BASE_DURATIONS
    x = np.arange(lin.rows, dtype=float)
    lin.set_variables(x)
    np.testing.assert_allclose(holder.base_linear.get_point(0.0).p(), x[0:3])
    np.testing.assert_allclose(holder.base_linear.get_point(1.0).p(), x[12:15])
    np.testing.assert_allclose(holder.base_angular.get_point(0.5).p(), np.zeros(3))


def test_changing_durations_are_followed():
    holder, _, _, motion, _, schedules = _holder(True)
    schedules[0].set_variables([0.4, 0.3])
    np.testing.assert_allclose(
        holder.ee_motion[0].poly_durations(),
        motion[0].convert_phase_to_poly_durations(schedules[0].phase_durations()),
    )
    np.testing.assert_allclose(
        holder.ee_motion[1].poly_durations(),
        motion[1].convert_phase_to_poly_durations(TIMINGS),
    )


def test_fixed_durations_are_not_followed():
    holder, _, _, motion, _, schedules = _holder(False)
    schedules[0].set_variables([0.4, 0.3])
    np.testing.assert_allclose(
        holder.ee_motion[0].poly_durations(),
        motion[0].convert_phase_to_poly_durations(TIMINGS),
    )


def test_endeffector_splines_follow_node_values():
    holder, _, _, motion, _, _ = _holder(True)
    x = np.random.default_rng(5).uniform(-1.0, 1.0, motion[0].rows)
    motion[0].set_variables(x)
    np.testing.assert_allclose(holder.ee_motion[0].get_point(0.0).p(), x[0:3])


def test_missing_schedule_raises():
    lin, ang, motion, force, schedules = _parts()
    with pytest.raises(ValueError):
        SplineHolder(lin, ang, BASE_DURATIONS, motion, force, schedules[:1], True)