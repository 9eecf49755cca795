"""Rotation models: orientation of a body as a function of time.

Quaternions are (w, x, y, z) tuples. Rotation models are immutable and can
be shared between timeline phases.
"""

import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

Quaternion = Tuple[float, float, float, float]

J2000 = 2451545.0
IDENTITY: Quaternion = (1.0, 0.0, 0.0, 0.0)


def quat_multiply(a: Quaternion, b: Quaternion) -> Quaternion:
    """Hamilton product a * b."""
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return (
        aw * bw - ax * bx - ay * by - az * bz,
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
    )


def x_rotation(angle: float) -> Quaternion:
    s, c = math.sin(angle / 2.0), math.cos(angle / 2.0)
    return (c, s, 0.0, 0.0)


def y_rotation(angle: float) -> Quaternion:
    s, c = math.sin(angle / 2.0), math.cos(angle / 2.0)
    return (c, 0.0, s, 0.0)


def axis_angle(axis: Tuple[float, float, float], angle: float) -> Quaternion:
    """Unit quaternion for a rotation of angle radians about axis."""
    v = np.asarray(axis, dtype=float)
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return IDENTITY
    v = v / norm * math.sin(angle / 2.0)
    return (math.cos(angle / 2.0), float(v[0]), float(v[1]), float(v[2]))


def rotate_vector(q: Quaternion, v) -> np.ndarray:
    """Rotate vector v by unit quaternion q."""
    w, x, y, z = q
    u = np.array([x, y, z])
    v = np.asarray(v, dtype=float)
    return 2.0 * np.dot(u, v) * u + (w * w - np.dot(u, u)) * v + 2.0 * w * np.cross(u, v)


def _equator_orientation(inclination: float, ascending_node: float) -> Quaternion:
    return quat_multiply(x_rotation(-inclination), y_rotation(-ascending_node))


@dataclass(frozen=True)
class ConstantOrientation:
    """Orientation that never changes."""
    orientation: Quaternion = IDENTITY

    @property
    def period(self) -> float:
        return 0.0

    def orientation_at(self, jd: float) -> Quaternion:
        return self.orientation


@dataclass(frozen=True)
class UniformRotation:
    """
    Rotation at a constant rate about a fixed axis.

    Units:
        period         : days
        meridian_angle : radians, rotation offset at epoch
        inclination    : radians, tilt of the equator
        ascending_node : radians
    """
    period: float
    meridian_angle: float = 0.0
    epoch: float = J2000
    inclination: float = 0.0
    ascending_node: float = 0.0

    def spin(self, jd: float) -> Quaternion:
        rotations = (jd - self.epoch) / self.period
        remainder = rotations - math.floor(rotations)
        return y_rotation(-remainder * 2.0 * math.pi - self.meridian_angle)

    def orientation_at(self, jd: float) -> Quaternion:
        return quat_multiply(self.spin(jd), _equator_orientation(self.inclination, self.ascending_node))


@dataclass(frozen=True)
class PrecessingRotation:
    """Uniform rotation whose equator node precesses with precession_period (days)."""
    period: float
    meridian_angle: float = 0.0
    epoch: float = J2000
    inclination: float = 0.0
    ascending_node: float = 0.0
    precession_period: float = 0.0

    def orientation_at(self, jd: float) -> Quaternion:
        node = self.ascending_node
        if self.precession_period != 0.0:
            node += (jd - self.epoch) / self.precession_period * 2.0 * math.pi
        rotations = (jd - self.epoch) / self.period
        remainder = rotations - math.floor(rotations)
        spin = y_rotation(-remainder * 2.0 * math.pi - self.meridian_angle)
        return quat_multiply(spin, _equator_orientation(self.inclination, node))


def fixed_rotation(meridian_angle: float, inclination: float, ascending_node: float) -> ConstantOrientation:
    """Constant orientation described by equator angles (radians)."""
    q = quat_multiply(y_rotation(-math.pi - meridian_angle), _equator_orientation(inclination, ascending_node))
    return ConstantOrientation(q)


RotationModel = Union[ConstantOrientation, UniformRotation, PrecessingRotation]
