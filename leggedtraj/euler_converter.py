"""Euler ZYX angles: rotation matrices, angular rates and their node sensitivities."""

from __future__ import annotations

import math

import numpy as np

from leggedtraj.state import Dx

X, Y, Z = 0, 1, 2
_K3D = 3


def m_matrix(xyz):
    """Matrix that maps Euler ZYX rates to the angular velocity in world frame."""
    y, z = float(xyz[Y]), float(xyz[Z])
    M = np.zeros((_K3D, _K3D))
    M[0, Y] = -math.sin(z)
    M[0, X] = math.cos(y) * math.cos(z)
    M[1, Y] = math.cos(z)
    M[1, X] = math.cos(y) * math.sin(z)
    M[2, Z] = 1.0
    M[2, X] = -math.sin(y)
    return M


def mdot_matrix(xyz, xyz_d):
    """Time derivative of :func:`m_matrix` for angles ``xyz`` moving at ``xyz_d``."""
    y, z = float(xyz[Y]), float(xyz[Z])
    yd, zd = float(xyz_d[Y]), float(xyz_d[Z])
    Mdot = np.zeros((_K3D, _K3D))
    Mdot[0, Y] = -math.cos(z) * zd
    Mdot[0, X] = -math.cos(z) * math.sin(y) * yd - math.cos(y) * math.sin(z) * zd
    Mdot[1, Y] = -math.sin(z) * zd
    Mdot[1, X] = math.cos(y) * math.cos(z) * zd - math.sin(y) * math.sin(z) * yd
    Mdot[2, X] = -math.cos(y) * yd
    return Mdot


def rotation_matrix(xyz):
    """Rotation from base to world frame for Euler ZYX angles ``xyz``."""
    x, y, z = float(xyz[X]), float(xyz[Y]), float(xyz[Z])
    cx, sx = math.cos(x), math.sin(x)
    cy, sy = math.cos(y), math.sin(y)
    cz, sz = math.cos(z), math.sin(z)
    return np.array(
        [
            [cy * cz, cz * sx * sy - cx * sz, sx * sz + cx * cz * sy],
            [cy * sz, cx * cz + sx * sy * sz, cx * sy * sz - cz * sx],
            [-sy, cy * sx, cx * cy],
        ]
    )


def quaternion_from_euler(xyz):
    """Unit quaternion (w, x, y, z) of the base-to-world rotation."""
    R = rotation_matrix(xyz)
    trace = R[0, 0] + R[1, 1] + R[2, 2]
    if trace > 0.0:
        s = math.sqrt(trace + 1.0)
        w = 0.5 * s
        s = 0.5 / s
        return np.array(
            [w, (R[2, 1] - R[1, 2]) * s, (R[0, 2] - R[2, 0]) * s, (R[1, 0] - R[0, 1]) * s]
        )
    i = int(np.argmax(np.diag(R)))
    j = (i + 1) % 3
    k = (j + 1) % 3
    s = math.sqrt(R[i, i] - R[j, j] - R[k, k] + 1.0)
    vec = np.zeros(3)
    vec[i] = 0.5 * s
    s = 0.5 / s
    w = (R[k, j] - R[j, k]) * s
    vec[j] = (R[j, i] + R[i, j]) * s
    vec[k] = (R[k, i] + R[i, k]) * s
    return np.array([w, vec[0], vec[1], vec[2]])


def angular_velocity(pos, vel):
    """Angular velocity in world frame from Euler angles and their rates."""
    return m_matrix(pos) @ np.asarray(vel, float)


def angular_acceleration(state):
    """Angular acceleration in world frame from a State of Euler angles."""
    p, v, a = state.p(), state.v(), state.a()
    return mdot_matrix(p, v) @ v + m_matrix(p) @ a


class EulerConverter:
    """Reads a spline of Euler angles as orientation, angular velocity and acceleration."""

    def __init__(self, euler):
        self.euler = euler
        self._jac_structure = np.zeros((_K3D, euler.node_variables_count()))

    def _empty_jac(self):
        return self._jac_structure.copy()

    def _jac(self, t, deriv):
        return self.euler.jacobian_wrt_nodes(t, deriv)

    def quaternion_base_to_world(self, t):
        """Orientation at time ``t`` as quaternion (w, x, y, z)."""
        return quaternion_from_euler(self.euler.get_point(t).p())

    def angular_velocity_in_world(self, t):
        """Angular velocity in world frame at time ``t``."""
        ori = self.euler.get_point(t)
        return angular_velocity(ori.p(), ori.v())

    def angular_acceleration_in_world(self, t):
        """Angular acceleration in world frame at time ``t``."""
        return angular_acceleration(self.euler.get_point(t))

    def rotation_matrix_base_to_world(self, t):
        """Base-to-world rotation matrix at time ``t``."""
        return rotation_matrix(self.euler.get_point(t).p())

    def deriv_of_ang_vel_wrt_euler_nodes(self, t):
        """Jacobian of the world angular velocity at ``t`` wrt the node variables."""
        jac = self._empty_jac()
        ori = self.euler.get_point(t)
        vel = ori.v()
        d_vel = self._jac(t, Dx.VEL)
        M = m_matrix(ori.p())
        for dim in (X, Y, Z):
            d_m = self.deriv_m_wrt_nodes(t, dim)
            jac[dim] = vel @ d_m + M[dim] @ d_vel
        return jac

    def deriv_of_ang_acc_wrt_euler_nodes(self, t):
        """Jacobian of the world angular acceleration at ``t`` wrt the node variables."""
        jac = self._empty_jac()
        ori = self.euler.get_point(t)
        vel, acc = ori.v(), ori.a()
        d_vel = self._jac(t, Dx.VEL)
        d_acc = self._jac(t, Dx.ACC)
        M = m_matrix(ori.p())
        Mdot = mdot_matrix(ori.p(), vel)
        for dim in (X, Y, Z):
            d_mdot = self.deriv_mdot_wrt_nodes(t, dim)
            d_m = self.deriv_m_wrt_nodes(t, dim)
            jac[dim] = vel @ d_mdot + Mdot[dim] @ d_vel + acc @ d_m + M[dim] @ d_acc
        return jac

    def deriv_m_wrt_nodes(self, t, dim):
        """Jacobian of row ``dim`` of M (one row per column of M) wrt the nodes."""
        if dim not in (X, Y, Z):
            raise ValueError(f"no dimension {dim}")
        ori = self.euler.get_point(t)
        z, y = ori.p()[Z], ori.p()[Y]
        jac_pos = self._jac(t, Dx.POS)
        jac_z, jac_y = jac_pos[Z], jac_pos[Y]

        jac = self._empty_jac()
        if dim == X:
            jac[Y] = -math.cos(z) * jac_z
            jac[X] = -math.cos(z) * math.sin(y) * jac_y - math.cos(y) * math.sin(z) * jac_z
        elif dim == Y:
            jac[Y] = -math.sin(z) * jac_z
            jac[X] = math.cos(y) * math.cos(z) * jac_z - math.sin(y) * math.sin(z) * jac_y
        else:
            jac[X] = -math.cos(y) * jac_y
        return jac

    def deriv_mdot_wrt_nodes(self, t, dim):
        """Jacobian of row ``dim`` of M-dot (one row per column) wrt the nodes."""
        if dim not in (X, Y, Z):
            raise ValueError(f"no dimension {dim}")
        ori = self.euler.get_point(t)
        z, y = ori.p()[Z], ori.p()[Y]
        zd, yd = ori.v()[Z], ori.v()[Y]
        jac_pos = self._jac(t, Dx.POS)
        jac_vel = self._jac(t, Dx.VEL)
        jac_z, jac_y = jac_pos[Z], jac_pos[Y]
        jac_zd, jac_yd = jac_vel[Z], jac_vel[Y]
        sy, cy, sz, cz = math.sin(y), math.cos(y), math.sin(z), math.cos(z)

        jac = self._empty_jac()
        if dim == X:
            jac[Y] = sz * zd * jac_z - cz * jac_zd
            jac[X] = (
                sy * sz * yd * jac_z
                - cy * sz * jac_zd
                - cy * cz * yd * jac_y
                - cy * cz * zd * jac_z
                - cz * sy * jac_yd
                + sy * sz * jac_y * zd
            )
        elif dim == Y:
            jac[Y] = -sz * jac_zd - cz * zd * jac_z
            jac[X] = (
                cy * cz * jac_zd
                - sy * sz * jac_yd
                - cy * sz * yd * jac_y
                - cz * sy * yd * jac_z
                - cz * sy * jac_y * zd
                - cy * sz * zd * jac_z
            )
        else:
            jac[X] = sy * yd * jac_y - cy * jac_yd
        return jac

    def deriv_of_rot_vec_mult(self, t, v, inverse):
        """Jacobian of R v (or R^T v if ``inverse``) wrt the node variables."""
        rd = self.derivative_of_rotation_matrix_wrt_nodes(t)
        if inverse:
            # the inverse of a rotation is its transpose
            rd = rd.transpose(1, 0, 2)
        return self._empty_jac() + np.einsum("rcn,c->rn", rd, np.asarray(v, float))

    def derivative_of_rotation_matrix_wrt_nodes(self, t):
        """Array ``d[row, col]`` holding the Jacobian row of each entry of R."""
        ori = self.euler.get_point(t)
        x, y, z = ori.p()
        jac_pos = self._jac(t, Dx.POS)
        jx, jy, jz = jac_pos[X], jac_pos[Y], jac_pos[Z]
        sx, cx = math.sin(x), math.cos(x)
        sy, cy = math.sin(y), math.cos(y)
        sz, cz = math.sin(z), math.cos(z)

        d = np.zeros((_K3D, _K3D, jac_pos.shape[1]))
        d[X, X] = -cz * sy * jy - cy * sz * jz
        d[X, Y] = sx * sz * jx - cx * cz * jz - sx * sy * sz * jz + cx * cz * sy * jx + cy * cz * sx * jy
        d[X, Z] = cx * sz * jx + cz * sx * jz - cz * sx * sy * jx - cx * sy * sz * jz + cx * cy * cz * jy

        d[Y, X] = cy * cz * jz - sy * sz * jy
        d[Y, Y] = cx * sy * sz * jx - cx * sz * jz - cz * sx * jx + cy * sx * sz * jy + cz * sx * sy * jz
        d[Y, Z] = sx * sz * jz - cx * cz * jx - sx * sy * sz * jx + cx * cy * sz * jy + cx * cz * sy * jz

        d[Z, X] = -cy * jy
        d[Z, Y] = cx * cy * jx - sx * sy * jy
        d[Z, Z] = -cy * sx * jx - cx * sy * jy
        return d