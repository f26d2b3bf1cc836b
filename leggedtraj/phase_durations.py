"""Optimisable durations of the contact phases of one endeffector."""

from __future__ import annotations

import math
from abc import abstractmethod

import numpy as np

from leggedtraj.nodes_variables import ee_schedule_id
from leggedtraj.problem import Bounds, VariableSet
from leggedtraj.spline import get_segment_id


class PhaseDurationsObserver:
    """Something that must be refreshed whenever phase durations change."""

    def __init__(self, subject):
        self.schedule = subject
        subject.add_observer(self)

    @abstractmethod
    def update_polynomial_durations(self):
        """Pull the current phase durations from the subject."""


class PhaseDurations(VariableSet):
    """Phase durations; the last one is not optimised but fills up the total time."""

    def __init__(self, ee, timings, is_first_phase_in_contact, min_duration, max_duration):
        super().__init__(len(timings) - 1, ee_schedule_id(ee))
        self.durations = [float(t) for t in timings]
        self.t_total = math.fsum(self.durations)
        self.phase_duration_bounds = Bounds(min_duration, max_duration)
        self.initial_contact_state = is_first_phase_in_contact
        self._observers = []

    def add_observer(self, observer):
        """Register an observer to be refreshed on every change."""
        self._observers.append(observer)

    def update_observers(self):
        """Refresh every registered observer."""
        for observer in self._observers:
            observer.update_polynomial_durations()

    def get_values(self):
        return np.array(self.durations[: self.rows])

    def set_variables(self, x):
        x = np.asarray(x, float)
        if len(x) != self.rows:
            raise ValueError(f"expected {self.rows} values, got {len(x)}")
        total = math.fsum(x)
        if not self.t_total > total:
            raise ValueError(
                f"phase durations sum to {total}, not less than total time {self.t_total}"
            )
        self.durations[: self.rows] = [float(v) for v in x]
        self.durations[-1] = self.t_total - total
        self.update_observers()

    def get_bounds(self):
        return [self.phase_duration_bounds] * self.rows

    def phase_durations(self):
        """All phase durations, the last one included."""
        return list(self.durations)

    def is_contact_phase(self, t):
        """True if the endeffector is in contact at time ``t``."""
        phase_id = get_segment_id(t, self.durations)
        if phase_id % 2 == 0:
            return self.initial_contact_state
        return not self.initial_contact_state

    def jacobian_of_pos(self, current_phase, dx_dT, xd):
        """Sensitivity of a position in ``current_phase`` wrt the optimised durations."""
        dx_dT = np.asarray(dx_dT, float)
        xd = np.asarray(xd, float)
        jac = np.zeros((len(xd), self.rows))
        in_last_phase = current_phase == len(self.durations) - 1

        # the current duration stretches or compresses the spline
        if not in_last_phase:
            jac[:, current_phase] = dx_dT

        for phase in range(current_phase):
            # earlier durations shift the spline along the time axis
            jac[:, phase] = -xd
            # with the end time fixed, they also compress the last phase
            if in_last_phase:
                jac[:, phase] -= dx_dT

        return jac