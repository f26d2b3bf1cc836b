import math

import pytest

from leggedtraj.gait_generator import Combos, GaitGenerator, GaitInfo, Gaits

ON = (True, False)
OFF = (False, True)


class _TwoFootGenerator(GaitGenerator):
    def __init__(self, strides):
        super().__init__()
        self.strides = strides

    def get_gait(self, gait):
        try:
            return self.strides[gait]
        except KeyError:
            raise ValueError(gait) from None

    def set_combo(self, combo):
        self.set_gaits([Gaits.STAND, Gaits.WALK1])


@pytest.fixture
def generator():
    return _TwoFootGenerator(
        {
            Gaits.STAND: GaitInfo((1.0,), ((True, True),)),
            Gaits.WALK1: GaitInfo((2.0, 3.0), (ON, OFF)),
            Gaits.FLIGHT: GaitInfo((1.0, 2.0), ((False, False),)),
        }
    )


def test_set_gaits_concatenates_strides(generator):
    generator.set_gaits([Gaits.STAND, Gaits.WALK1])
    assert generator.times == [1.0, 2.0, 3.0]
    assert generator.contacts == [(True, True), ON, OFF]


def test_set_gaits_rejects_mismatched_stride(generator):
    with pytest.raises(ValueError):
        generator.set_gaits([Gaits.FLIGHT])


def test_set_gaits_unknown_gait(generator):
    with pytest.raises(ValueError):
        generator.set_gaits([Gaits.HOP5])


def test_foot_durations_merge_unchanged_phases(generator):
    generator.set_gaits([Gaits.STAND, Gaits.WALK1])
    durations = generator.foot_durations()
    # foot 0 stays in contact through the first two phases
    assert durations[0] == [3.0, 3.0]
    assert durations[1] == [1.0, 2.0, 3.0]


def test_foot_durations_sum_to_total(generator):
    generator.set_combo(Combos.C0)
    total = sum(generator.times)
    for durations in generator.foot_durations():
        assert math.isclose(sum(durations), total)


def test_foot_durations_without_strides(generator):
    with pytest.raises(ValueError):
        generator.foot_durations()


def test_normalized_phase_durations_sum_to_one(generator):
    generator.set_gaits([Gaits.STAND, Gaits.WALK1, Gaits.WALK1])
    for ee in range(2):
        assert math.isclose(sum(generator.normalized_phase_durations(ee)), 1.0)


def test_phase_durations_scale_to_total(generator):
    generator.set_gaits([Gaits.STAND, Gaits.WALK1])
    scaled = generator.phase_durations(12.0, 1)
    assert math.isclose(sum(scaled), 12.0)
    normalized = generator.normalized_phase_durations(1)
    for s, n in zip(scaled, normalized):
        assert math.isclose(s, n * 12.0)


def test_is_in_contact_at_start(generator):
    generator.set_gaits([Gaits.WALK1])
    assert generator.is_in_contact_at_start(0) is True
    assert generator.is_in_contact_at_start(1) is False


def test_remove_transition_keeps_total_time(generator):
    info = GaitInfo((1.0, 2.0, 4.0), (ON, OFF, ON))
    result = generator.remove_transition(info)
    assert result.contacts == (ON, OFF)
    assert len(result.times) == 2
    assert result.times[0] == 1.0
    assert math.isclose(sum(result.times), sum(info.times))


def test_remove_transition_needs_two_phases(generator):
    with pytest.raises(ValueError):
        generator.remove_transition(GaitInfo((1.0,), (ON,)))