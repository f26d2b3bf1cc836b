import numpy as np
import pytest

from leggedtraj.nodes_variables import ee_schedule_id
from leggedtraj.phase_durations import PhaseDurations, PhaseDurationsObserver
from leggedtraj.problem import Bounds

TIMINGS = [0.2, 0.3, 0.4]


class Recorder(PhaseDurationsObserver):
    def __init__(self, subject):
        super().__init__(subject)
        self.seen = []

    def update_polynomial_durations(self):
        self.seen.append(self.schedule.phase_durations())


@pytest.fixture
def schedule():
    return PhaseDurations(1, TIMINGS, True, 0.1, 1.0)


def test_rows_and_name(schedule):
    assert schedule.rows == len(TIMINGS) - 1
    assert schedule.name == ee_schedule_id(1)


def test_values_are_all_but_last(schedule):
    np.testing.assert_allclose(schedule.get_values(), TIMINGS[:-1])
    assert schedule.phase_durations() == TIMINGS


def test_bounds(schedule):
    assert schedule.get_bounds() == [Bounds(0.1, 1.0)] * schedule.rows


def test_set_variables_fills_up_total_time(schedule):
    x = [0.25, 0.35]
    schedule.set_variables(x)
    durations = schedule.phase_durations()
    np.testing.assert_allclose(durations[:2], x)
    assert sum(durations) == pytest.approx(sum(TIMINGS))
    np.testing.assert_allclose(schedule.get_values(), x)


def test_set_variables_rejects_too_long(schedule):
    with pytest.raises(ValueError):
        schedule.set_variables([0.5, 0.5])
    assert schedule.phase_durations() == TIMINGS


def test_set_variables_rejects_wrong_length(schedule):
    with pytest.raises(ValueError):
        schedule.set_variables([0.1])


def test_observers_are_notified(schedule):
    recorder = Recorder(schedule)
    schedule.set_variables([0.3, 0.3])
    assert len(recorder.seen) == 1
    assert recorder.seen[0][:2] == [0.3, 0.3]


@pytest.mark.parametrize(
    "t, expected", [(0.1, True), (0.2, True), (0.3, False), (0.6, True), (0.9, True)]
)
def test_contact_phases_alternate(schedule, t, expected):
    assert schedule.is_contact_phase(t) is expected


def test_contact_when_starting_in_air():
    schedule = PhaseDurations(0, TIMINGS, False, 0.1, 1.0)
    assert schedule.is_contact_phase(0.1) is False
    assert schedule.is_contact_phase(0.3) is True


def test_jacobian_in_middle_phase(schedule):
    dx_dT = np.array([1.0, 2.0, 3.0])
    xd = np.array([0.5, -1.0, 4.0])
    jac = schedule.jacobian_of_pos(1, dx_dT, xd)
    assert jac.shape == (3, 2)
    np.testing.assert_allclose(jac[:, 0], -xd)
    np.testing.assert_allclose(jac[:, 1], dx_dT)


def test_jacobian_in_first_phase(schedule):
    dx_dT = np.array([1.0, 2.0, 3.0])
    jac = schedule.jacobian_of_pos(0, dx_dT, np.zeros(3))
    np.testing.assert_allclose(jac[:, 0], dx_dT)
    assert not jac[:, 1].any()


def test_jacobian_in_last_phase(schedule):
    dx_dT = np.array([1.0, 2.0, 3.0])
    xd = np.array([0.5, -1.0, 4.0])
    jac = schedule.jacobian_of_pos(2, dx_dT, xd)
    for col in range(2):
        np.testing.assert_allclose(jac[:, col] + xd + dx_dT, np.zeros(3))