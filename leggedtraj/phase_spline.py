"""Node splines whose polynomial durations follow optimised phase durations."""

from __future__ import annotations

from leggedtraj.node_spline import NodeSpline
from leggedtraj.phase_durations import PhaseDurationsObserver
from leggedtraj.spline import get_segment_id


class PhaseSpline(NodeSpline, PhaseDurationsObserver):
    """A spline over phase-based nodes, timed by a PhaseDurations set.

    Jacobians are dense, so their structure is the same wherever a global
    time falls as the durations change.
    """

    def __init__(self, nodes, phase_durations):
        NodeSpline.__init__(
            self,
            nodes,
            nodes.convert_phase_to_poly_durations(phase_durations.phase_durations()),
        )
        PhaseDurationsObserver.__init__(self, phase_durations)
        self.phase_nodes = nodes
        self.update_polynomial_durations()

    def update_polynomial_durations(self):
        """Take over the current phase durations and refresh the coefficients."""
        poly_durations = self.phase_nodes.convert_phase_to_poly_durations(
            self.schedule.phase_durations()
        )
        for poly, duration in zip(self.cubic_polys, poly_durations):
            poly.duration = duration
        self.update_polynomial_coeff()

    def jacobian_of_pos_wrt_durations(self, t_global):
        """Sensitivity of the position at ``t_global`` wrt the optimised durations."""
        dx_dT = self.derivative_of_pos_wrt_phase_duration(t_global)
        xd = self.get_point(t_global).v()
        current_phase = get_segment_id(t_global, self.schedule.phase_durations())
        return self.schedule.jacobian_of_pos(current_phase, dx_dT, xd)

    def derivative_of_pos_wrt_phase_duration(self, t_global):
        """Change of the position at ``t_global`` as the current phase lengthens."""
        poly_id, t_local = self.get_local_time(t_global, self.poly_durations())
        vel = self.get_point(t_global).v()
        dxdT = self.cubic_polys[poly_id].derivative_of_pos_wrt_duration(t_local)
        inner = self.phase_nodes.derivative_of_poly_duration_wrt_phase_duration(poly_id)
        # earlier polynomials of the same phase also stretch, shifting this one
        prev_polys = self.phase_nodes.number_of_prev_polynomials_in_phase(poly_id)
        return inner * (dxdT - prev_polys * vel)