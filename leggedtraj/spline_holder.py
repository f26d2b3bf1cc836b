"""The splines built from all variable sets of a motion."""

from __future__ import annotations

from leggedtraj.node_spline import NodeSpline
from leggedtraj.phase_spline import PhaseSpline


class SplineHolder:
    """Base and endeffector splines, kept up to date with their variables."""

    def __init__(
        self,
        base_lin_nodes,
        base_ang_nodes,
        base_poly_durations,
        ee_motion_nodes,
        ee_force_nodes,
        phase_durations,
        durations_change,
    ):
        self.base_linear = NodeSpline(base_lin_nodes, base_poly_durations)
        self.base_angular = NodeSpline(base_ang_nodes, base_poly_durations)
        self.phase_durations = list(phase_durations)
        self.ee_motion = []
        self.ee_force = []

        ee_motion_nodes = list(ee_motion_nodes)
        ee_force_nodes = list(ee_force_nodes)
        n_ee = len(ee_motion_nodes)
        if len(ee_force_nodes) < n_ee or len(self.phase_durations) < n_ee:
            raise ValueError("every endeffector needs force nodes and phase durations")

        for motion, force, schedule in zip(ee_motion_nodes, ee_force_nodes, self.phase_durations):
            if durations_change:
                self.ee_motion.append(PhaseSpline(motion, schedule))
                self.ee_force.append(PhaseSpline(force, schedule))
            else:
                durations = schedule.phase_durations()
                self.ee_motion.append(
                    NodeSpline(motion, motion.convert_phase_to_poly_durations(durations))
                )
                self.ee_force.append(
                    NodeSpline(force, force.convert_phase_to_poly_durations(durations))
                )