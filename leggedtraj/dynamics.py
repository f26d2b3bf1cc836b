"""Rigid-body dynamics of the robot base under endeffector forces."""

from __future__ import annotations

import numpy as np

_K3D = 3
_K6D = 6
# rows of the 6D vector: angular part first, then linear part
AX, LX = 0, 3


def cross_matrix(v):
    """Skew-symmetric matrix ``C`` with ``C @ w == v x w``."""
    x, y, z = (float(c) for c in v)
    return np.array(
        [
            [0.0, -z, y],
            [z, 0.0, -x],
            [-y, x, 0.0],
        ]
    )


def build_inertia_tensor(ixx, iyy, izz, ixy, ixz, iyz):
    """Inertia tensor from its moments and products of inertia."""
    return np.array(
        [
            [ixx, -ixy, -ixz],
            [-ixy, iyy, -iyz],
            [-ixz, -iyz, izz],
        ],
        dtype=float,
    )


class DynamicModel:
    """Current state of the base and endeffectors, as seen by a dynamic model."""

    def __init__(self, mass, ee_count):
        self.m = float(mass)
        self.g = 9.80665

        self.com_pos = np.zeros(_K3D)
        self.com_acc = np.zeros(_K3D)

        self.w_R_b = np.eye(_K3D)
        self.omega = np.zeros(_K3D)
        self.omega_dot = np.zeros(_K3D)

        self.ee_force = [np.zeros(_K3D) for _ in range(ee_count)]
        self.ee_pos = [np.zeros(_K3D) for _ in range(ee_count)]

    def set_current(self, com_pos, com_acc, w_R_b, omega, omega_dot, ee_force, ee_pos):
        """Set the state at which violations and Jacobians are evaluated."""
        self.com_pos = np.array(com_pos, dtype=float)
        self.com_acc = np.array(com_acc, dtype=float)

        self.w_R_b = np.array(w_R_b, dtype=float)
        self.omega = np.array(omega, dtype=float)
        self.omega_dot = np.array(omega_dot, dtype=float)

        self.ee_force = [np.array(f, dtype=float) for f in ee_force]
        self.ee_pos = [np.array(p, dtype=float) for p in ee_pos]

    def ee_count(self):
        """Number of endeffectors."""
        return len(self.ee_pos)


class SingleRigidBodyDynamics(DynamicModel):
    """Newton-Euler equations of a single rigid body with constant inertia."""

    def __init__(self, mass, inertia_b, ee_count):
        super().__init__(mass, ee_count)
        self.I_b = np.array(inertia_b, dtype=float)
        if self.I_b.shape != (_K3D, _K3D):
            raise ValueError(f"inertia must be 3x3, got shape {self.I_b.shape}")

    @classmethod
    def from_inertia_components(cls, mass, ixx, iyy, izz, ixy, ixz, iyz, ee_count):
        """Model whose inertia is given by its moments and products."""
        return cls(mass, build_inertia_tensor(ixx, iyy, izz, ixy, ixz, iyz), ee_count)

    def _inertia_world(self):
        return self.w_R_b @ self.I_b @ self.w_R_b.T

    def dynamic_violation(self):
        """Residual of the angular (rows 0-2) and linear (rows 3-5) equations."""
        f_sum = np.zeros(_K3D)
        tau_sum = np.zeros(_K3D)
        for f, p in zip(self.ee_force, self.ee_pos):
            tau_sum += np.cross(f, self.com_pos - p)
            f_sum += f

        I_w = self._inertia_world()
        acc = np.zeros(_K6D)
        acc[AX:AX + _K3D] = (
            I_w @ self.omega_dot
            + cross_matrix(self.omega) @ (I_w @ self.omega)
            - tau_sum
        )
        gravity = np.array([0.0, 0.0, -self.m * self.g])
        acc[LX:LX + _K3D] = self.m * self.com_acc - f_sum - gravity
        return acc

    def jacobian_wrt_base_lin(self, jac_pos_base_lin, jac_acc_base_lin):
        """Sensitivity wrt base-linear variables, given the CoM pos/acc Jacobians."""
        jac_pos = np.asarray(jac_pos_base_lin, dtype=float)
        jac_acc = np.asarray(jac_acc_base_lin, dtype=float)
        n = jac_pos.shape[1]

        jac_tau_sum = np.zeros((_K3D, n))
        for f in self.ee_force:
            jac_tau_sum += cross_matrix(f) @ jac_pos

        jac = np.zeros((_K6D, n))
        jac[AX:AX + _K3D] = -jac_tau_sum
        jac[LX:LX + _K3D] = self.m * jac_acc
        return jac

    def jacobian_wrt_base_ang(self, base_euler, t):
        """Sensitivity wrt the Euler-angle node variables of ``base_euler`` at ``t``."""
        R = self.w_R_b
        I_w = self._inertia_world()

        # derivative of R I_b R^T omega_dot, by the product rule
        v11 = self.I_b @ R.T @ self.omega_dot
        jac11 = base_euler.deriv_of_rot_vec_mult(t, v11, False)
        jac12 = R @ self.I_b @ base_euler.deriv_of_rot_vec_mult(t, self.omega_dot, True)
        jac_ang_acc = base_euler.deriv_of_ang_acc_wrt_euler_nodes(t)
        jac13 = I_w @ jac_ang_acc
        jac1 = jac11 + jac12 + jac13

        # derivative of omega x (R I_b R^T omega)
        v21 = self.I_b @ R.T @ self.omega
        jac21 = base_euler.deriv_of_rot_vec_mult(t, v21, False)
        jac22 = R @ self.I_b @ base_euler.deriv_of_rot_vec_mult(t, self.omega, True)
        jac_ang_vel = base_euler.deriv_of_ang_vel_wrt_euler_nodes(t)
        jac23 = I_w @ jac_ang_vel
        jac2 = (
            cross_matrix(self.omega) @ (jac21 + jac22 + jac23)
            - cross_matrix(I_w @ self.omega) @ jac_ang_vel
        )

        jac = np.zeros((_K6D, jac_ang_vel.shape[1]))
        jac[AX:AX + _K3D] = jac1 + jac2
        return jac

    def jacobian_wrt_force(self, jac_force, ee):
        """Sensitivity wrt force variables of endeffector ``ee``."""
        jac_force = np.asarray(jac_force, dtype=float)
        r = self.com_pos - self.ee_pos[ee]
        jac_tau = -cross_matrix(r) @ jac_force

        jac = np.zeros((_K6D, jac_force.shape[1]))
        jac[AX:AX + _K3D] = -jac_tau
        jac[LX:LX + _K3D] = -jac_force
        return jac

    def jacobian_wrt_ee_pos(self, jac_ee_pos, ee):
        """Sensitivity wrt position variables of endeffector ``ee``."""
        jac_ee_pos = np.asarray(jac_ee_pos, dtype=float)
        jac_tau = cross_matrix(self.ee_force[ee]) @ (-jac_ee_pos)

        # the linear equations do not depend on endeffector positions
        jac = np.zeros((_K6D, jac_tau.shape[1]))
        jac[AX:AX + _K3D] = -jac_tau
        return jac