"""Terrain heights, their derivatives and the local surface basis."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from enum import Enum

import numpy as np

X_, Y_ = 0, 1
_Z = 2
_STEP = 1e-6

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Vectors of the local terrain basis."""

    NORMAL = 0
    TANGENT1 = 1
    TANGENT2 = 2


class HeightMap(ABC):
    """Terrain as a height over the x-y plane; first derivatives default to zero."""

    friction_coeff = 0.5

    @abstractmethod
    def height(self, x, y):
        """Terrain height at (x, y)."""

    def height_deriv_wrt_x(self, x, y):
        return 0.0

    def height_deriv_wrt_y(self, x, y):
        return 0.0

    def height_deriv_wrt_xx(self, x, y):
        return 0.0

    def height_deriv_wrt_xy(self, x, y):
        """Change of the x-slope along y, by central difference.

        Exactly zero for terrains whose x-slope does not vary with y.
        """
        upper = self.height_deriv_wrt_x(x, y + _STEP)
        lower = self.height_deriv_wrt_x(x, y - _STEP)
        return (upper - lower) / (2.0 * _STEP)

    def height_deriv_wrt_yx(self, x, y):
        """Mixed second derivative; equal to the xy one."""
        return self.height_deriv_wrt_xy(x, y)

    def height_deriv_wrt_yy(self, x, y):
        """Change of the y-slope along y, by central difference.

        Exactly zero for terrains whose y-slope does not vary with y.
        """
        upper = self.height_deriv_wrt_y(x, y + _STEP)
        lower = self.height_deriv_wrt_y(x, y - _STEP)
        return (upper - lower) / (2.0 * _STEP)

    def derivative_of_height_wrt(self, dim, x, y):
        """First derivative of the height along x (0) or y (1)."""
        if dim == X_:
            return self.height_deriv_wrt_x(x, y)
        if dim == Y_:
            return self.height_deriv_wrt_y(x, y)
        raise ValueError(f"no height derivative along dimension {dim}")

    def second_derivative_of_height_wrt(self, dim1, dim2, x, y):
        """Second derivative of the height, first along ``dim1`` then ``dim2``."""
        table = {
            (X_, X_): self.height_deriv_wrt_xx,
            (X_, Y_): self.height_deriv_wrt_xy,
            (Y_, X_): self.height_deriv_wrt_yx,
            (Y_, Y_): self.height_deriv_wrt_yy,
        }
        try:
            return table[(dim1, dim2)](x, y)
        except KeyError:
            raise ValueError(f"no second derivative along ({dim1}, {dim2})") from None

    def basis(self, basis, x, y, deriv=()):
        """Unnormalised basis vector, or its derivative along ``deriv[0]`` if given."""
        deriv = tuple(deriv)
        if basis == Direction.NORMAL:
            return self._normal(x, y, deriv)
        if basis == Direction.TANGENT1:
            return self._tangent1(x, y, deriv)
        if basis == Direction.TANGENT2:
            return self._tangent2(x, y, deriv)
        raise ValueError(f"no basis {basis!r}")

    def normalized_basis(self, basis, x, y):
        """Unit-length basis vector at (x, y)."""
        v = self.basis(basis, x, y)
        return v / np.linalg.norm(v)

    def derivative_of_normalized_basis_wrt(self, basis, dim, x, y):
        """Derivative of the normalised basis vector along ``dim``."""
        dv_wrt_dim = self.basis(basis, x, y, (dim,))
        v = self.basis(basis, x, y)
        outer = self._derivative_of_normalized_vector(v, dim)
        return outer * dv_wrt_dim

    def _normal(self, x, y, deriv):
        n = np.zeros(3)
        requested = not deriv
        for dim in (X_, Y_):
            if requested:
                n[dim] = -self.derivative_of_height_wrt(dim, x, y)
            else:
                n[dim] = -self.second_derivative_of_height_wrt(dim, deriv[0], x, y)
        n[_Z] = 1.0 if requested else 0.0
        return n

    def _tangent1(self, x, y, deriv):
        requested = not deriv
        z = (
            self.derivative_of_height_wrt(X_, x, y)
            if requested
            else self.second_derivative_of_height_wrt(X_, deriv[0], x, y)
        )
        return np.array([1.0 if requested else 0.0, 0.0, z])

    def _tangent2(self, x, y, deriv):
        requested = not deriv
        z = (
            self.derivative_of_height_wrt(Y_, x, y)
            if requested
            else self.second_derivative_of_height_wrt(Y_, deriv[0], x, y)
        )
        return np.array([0.0, 1.0 if requested else 0.0, z])

    @staticmethod
    def _derivative_of_normalized_vector(v, idx):
        norm = np.linalg.norm(v)
        unit = np.zeros(3)
        unit[idx] = 1.0
        return (norm * unit - v[idx] * v / norm) / norm**2


class FlatGround(HeightMap):
    """Level ground at a fixed height."""

    def __init__(self, height=0.0):
        self._height = height

    def height(self, x, y):
        return self._height


class Block(HeightMap):
    """A raised block reached over a very steep ramp."""

    def __init__(self, start, length, height, eps, slope):
        self.start = start
        self.length = length
        self.block_height = height
        self.eps = eps
        self.slope = slope

    def height(self, x, y):
        h = 0.0
        if self.start <= x <= self.start + self.eps:
            h = self.slope * (x - self.start)
        if self.start + self.eps <= x <= self.start + self.length:
            h = self.block_height
        return h

    def height_deriv_wrt_x(self, x, y):
        if self.start <= x <= self.start + self.eps:
            return self.slope
        return 0.0


class Stairs(HeightMap):
    """Two steps up, then back down to the ground."""

    def __init__(self, first_step_start, first_step_width, height_first_step,
                 height_second_step, width_top):
        self.first_step_start = first_step_start
        self.first_step_width = first_step_width
        self.height_first_step = height_first_step
        self.height_second_step = height_second_step
        self.width_top = width_top

    def height(self, x, y):
        h = 0.0
        if x >= self.first_step_start:
            h = self.height_first_step
        if x >= self.first_step_start + self.first_step_width:
            h = self.height_second_step
        if x >= self.first_step_start + self.first_step_width + self.width_top:
            h = 0.0
        return h


class Gap(HeightMap):
    """A gap in the ground, shaped as the parabola a x^2 + b x + c."""

    def __init__(self, gap_start, gap_end, a, b, c):
        self.gap_start = gap_start
        self.gap_end = gap_end
        self.a = a
        self.b = b
        self.c = c

    def _in_gap(self, x):
        return self.gap_start <= x <= self.gap_end

    def height(self, x, y):
        return self.a * x * x + self.b * x + self.c if self._in_gap(x) else 0.0

    def height_deriv_wrt_x(self, x, y):
        return 2 * self.a * x + self.b if self._in_gap(x) else 0.0

    def height_deriv_wrt_xx(self, x, y):
        return 2 * self.a if self._in_gap(x) else 0.0


class Slope(HeightMap):
    """A ramp up to a peak, a ramp down, then flat ground again."""

    def __init__(self, slope_start, x_down_start, x_flat_start, height_center, slope):
        self.slope_start = slope_start
        self.x_down_start = x_down_start
        self.x_flat_start = x_flat_start
        self.height_center = height_center
        self.slope = slope

    def height(self, x, y):
        z = 0.0
        if x >= self.slope_start:
            z = self.slope * (x - self.slope_start)
        if x >= self.x_down_start:
            z = self.height_center - self.slope * (x - self.x_down_start)
        if x >= self.x_flat_start:
            z = 0.0
        return z

    def height_deriv_wrt_x(self, x, y):
        dzdx = 0.0
        if x >= self.slope_start:
            dzdx = self.slope
        if x >= self.x_down_start:
            dzdx = -self.slope
        if x >= self.x_flat_start:
            dzdx = 0.0
        return dzdx


class Chimney(HeightMap):
    """A wall inclined sideways over a stretch of x."""

    def __init__(self, x_start, x_end, y_start, slope):
        self.x_start = x_start
        self.x_end = x_end
        self.y_start = y_start
        self.slope = slope

    def height(self, x, y):
        if self.x_start <= x <= self.x_end:
            return self.slope * (y - self.y_start)
        return 0.0

    def height_deriv_wrt_y(self, x, y):
        return self.slope if self.x_start <= x <= self.x_end else 0.0


class ChimneyLR(HeightMap):
    """An inclined wall on one side, followed by one on the other side."""

    def __init__(self, x_start, x_end1, x_end2, y_start, slope):
        self.x_start = x_start
        self.x_end1 = x_end1
        self.x_end2 = x_end2
        self.y_start = y_start
        self.slope = slope

    def height(self, x, y):
        z = 0.0
        if self.x_start <= x <= self.x_end1:
            z = self.slope * (y - self.y_start)
        if self.x_end1 <= x <= self.x_end2:
            z = -self.slope * (y + self.y_start)
        return z

    def height_deriv_wrt_y(self, x, y):
        dzdy = 0.0
        if self.x_start <= x <= self.x_end1:
            dzdy = self.slope
        if self.x_end1 <= x <= self.x_end2:
            dzdy = -self.slope
        return dzdy


class CSVHeightMap(HeightMap):
    """A grid of heights read from a CSV file.

    Rows of heights come first; a line whose cell starts with 'D' ends the
    grid, and the next line holds discretisation, friction, x0 and y0.
    """

    def __init__(self, path):
        self.terrain_array = []
        self.n_rows = 0
        self.n_cols = 0
        self.discretization = 0.0
        self.x0 = 0.0
        self.y0 = 0.0

        read_heightmap = False
        with open(path, encoding="utf-8") as handle:
            for line in handle.read().splitlines():
                cells = line.split(",")
                if cells and cells[-1] == "":
                    cells.pop()
                if read_heightmap:
                    self.discretization, self.friction_coeff, self.x0, self.y0 = (
                        float(c) for c in cells[:4]
                    )
                    cells = cells[4:]
                for cell in cells:
                    if not cell:
                        raise ValueError(f"empty cell in {path}")
                    if cell[0] == "D":
                        read_heightmap = True
                    if not read_heightmap:
                        self.terrain_array.append(float(cell))
                if not read_heightmap:
                    self.n_rows += 1

        if not self.terrain_array:
            logger.warning("Could not read %s to load CSV.", path)
        else:
            self.n_cols = len(self.terrain_array) // self.n_rows

    def height(self, x, y):
        max_x = self.discretization * self.n_cols
        max_y = self.discretization * self.n_rows
        if x > max_x or x < self.x0 or y > max_y or y < self.y0:
            return 0.0
        col_idx = math.floor((x - self.x0) / self.discretization)
        row_idx = math.floor((y - self.y0) / self.discretization)
        return self.terrain_array[row_idx * self.n_rows + col_idx]

    def is_empty(self):
        """True if no heights were read."""
        return not self.terrain_array