"""Contact sequences and phase durations of legged gaits."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import NamedTuple


class Gaits(Enum):
    """Strides that can be strung together into a motion."""

    STAND = "stand"
    FLIGHT = "flight"
    WALK1 = "walk1"
    WALK2 = "walk2"
    WALK2E = "walk2e"
    RUN1 = "run1"
    RUN1E = "run1e"
    RUN2 = "run2"
    RUN2E = "run2e"
    RUN3 = "run3"
    RUN3E = "run3e"
    HOP1 = "hop1"
    HOP1E = "hop1e"
    HOP2 = "hop2"
    HOP3 = "hop3"
    HOP3E = "hop3e"
    HOP5 = "hop5"
    HOP5E = "hop5e"


class Combos(Enum):
    """Predefined sequences of strides."""

    C0 = 0
    C1 = 1
    C2 = 2
    C3 = 3
    C4 = 4


class GaitInfo(NamedTuple):
    """Durations of the phases of a stride and the contact state in each."""

    times: tuple
    contacts: tuple


class GaitGenerator(ABC):
    """Builds per-foot phase durations from a sequence of strides."""

    def __init__(self):
        self.times = []
        self.contacts = []

    @abstractmethod
    def get_gait(self, gait):
        """The GaitInfo of one stride."""

    @abstractmethod
    def set_combo(self, combo):
        """Replace the current strides by a predefined combination."""

    def set_gaits(self, gaits):
        """Replace the current strides by ``gaits``, in order."""
        times = []
        contacts = []
        for gait in gaits:
            info = self.get_gait(gait)
            if len(info.times) != len(info.contacts):
                raise ValueError(f"stride {gait!r} has not one duration per phase")
            times.extend(info.times)
            contacts.extend(tuple(c) for c in info.contacts)
        self.times = times
        self.contacts = contacts

    def foot_durations(self):
        """For each foot, the durations of its alternating contact/swing phases."""
        if not self.contacts:
            raise ValueError("no strides set")
        n_ee = len(self.contacts[0])
        accumulated = [0.0] * n_ee
        durations = [[] for _ in range(n_ee)]

        for time, curr, nxt in zip(self.times, self.contacts, self.contacts[1:]):
            for ee in range(len(curr)):
                accumulated[ee] += time
                # a change of contact in the next phase completes this one
                if curr[ee] != nxt[ee]:
                    durations[ee].append(accumulated[ee])
                    accumulated[ee] = 0.0

        for ee in range(len(self.contacts[-1])):
            durations[ee].append(accumulated[ee] + self.times[-1])
        return durations

    def normalized_phase_durations(self, ee):
        """Phase durations of foot ``ee`` scaled to sum to one."""
        durations = self.foot_durations()[ee]
        total = sum(durations)
        return [d / total for d in durations]

    def phase_durations(self, t_total, ee):
        """Phase durations of foot ``ee`` scaled to sum to ``t_total``."""
        return [d * t_total for d in self.normalized_phase_durations(ee)]

    def is_in_contact_at_start(self, ee):
        """True if foot ``ee`` touches the ground in the first phase."""
        if not self.contacts:
            raise ValueError("no strides set")
        return self.contacts[0][ee]

    def remove_transition(self, gait_info):
        """Drop the final phase of a stride, adding its time to the one before."""
        times = list(gait_info.times)
        contacts = list(gait_info.contacts)
        if len(times) < 2 or len(contacts) < 2:
            raise ValueError("a stride needs at least two phases to drop a transition")
        last = times.pop()
        times[-1] += last
        contacts.pop()
        return GaitInfo(tuple(times), tuple(contacts))