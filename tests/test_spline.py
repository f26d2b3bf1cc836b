import math

import numpy as np
import pytest

from leggedtraj.spline import Spline, get_segment_id
from leggedtraj.state import Dx, Node

DURATIONS = [0.4, 0.25, 0.6]


def test_segment_id_in_middle_of_each_segment():
    for i, d in enumerate(DURATIONS):
        t = math.fsum(DURATIONS[:i]) + d / 2
        assert get_segment_id(t, DURATIONS) == i


def test_segment_id_at_junction_is_earlier_segment():
    t = DURATIONS[0]
    assert get_segment_id(t, DURATIONS) == 0


def test_segment_id_at_end_is_last_segment():
    t = math.fsum(DURATIONS)
    assert get_segment_id(t, DURATIONS) == len(DURATIONS) - 1


def test_segment_id_rejects_negative_time():
    with pytest.raises(ValueError):
        get_segment_id(-0.01, DURATIONS)


def test_segment_id_rejects_time_beyond_end():
    with pytest.raises(ValueError):
        get_segment_id(math.fsum(DURATIONS) + 0.1, DURATIONS)


def test_spline_durations_and_count():
    s = Spline(DURATIONS, 3)
    assert s.poly_durations() == DURATIONS
    assert s.polynomial_count() == len(DURATIONS)
    assert s.total_time() == pytest.approx(math.fsum(DURATIONS))


def test_local_time_within_segment():
    s = Spline(DURATIONS, 3)
    for t in np.linspace(0.0, s.total_time(), 11):
        seg, t_local = s.get_local_time(t, DURATIONS)
        assert 0.0 <= t_local + 1e-9
        assert t_local <= DURATIONS[seg] + 1e-9
        assert t_local + math.fsum(DURATIONS[:seg]) == pytest.approx(t)


def test_zero_nodes_give_zero_trajectory():
    s = Spline(DURATIONS, 2)
    state = s.get_point(0.5)
    assert np.array_equal(state.p(), np.zeros(2))
    assert np.array_equal(state.a(), np.zeros(2))


def _nodes(dim, count):
    rng = np.random.default_rng(7)
    nodes = []
    for _ in range(count):
        n = Node(dim)
        n.at(Dx.POS)[:] = rng.normal(size=dim)
        n.at(Dx.VEL)[:] = rng.normal(size=dim)
        nodes.append(n)
    return nodes


def test_spline_is_continuous_at_junctions():
    s = Spline(DURATIONS, 3)
    nodes = _nodes(3, len(DURATIONS) + 1)
    for i, poly in enumerate(s.cubic_polys):
        poly.set_nodes(nodes[i], nodes[i + 1])
    s.update_polynomial_coeff()
    for i in range(s.polynomial_count() - 1):
        end = s.get_point_local(i, DURATIONS[i])
        start = s.get_point_local(i + 1, 0.0)
        assert np.allclose(end.p(), start.p())
        assert np.allclose(end.v(), start.v())


def test_global_point_matches_nodes():
    s = Spline(DURATIONS, 3)
    nodes = _nodes(3, len(DURATIONS) + 1)
    for i, poly in enumerate(s.cubic_polys):
        poly.set_nodes(nodes[i], nodes[i + 1])
    s.update_polynomial_coeff()
    assert np.allclose(s.get_point(0.0).p(), nodes[0].p())
    assert np.allclose(s.get_point(s.total_time()).p(), nodes[-1].p())
    assert np.allclose(s.get_point(DURATIONS[0]).v(), nodes[1].v())