"""Orbits: position of a body within its orbit frame as a function of time.

Positions are kilometres in the frame's internal y-up coordinates, times
are Julian days (TDB).
"""

import math
from dataclasses import dataclass
from typing import Any, Tuple, Union

import numpy as np

from .rotations import J2000, rotate_vector


def solve_kepler(mean_anomaly: float, e: float, tol: float = 1e-12, max_iter: int = 50) -> float:
    """
    Solve Kepler's equation M = E - e*sin(E) for an elliptical orbit.
    Angles in radians.
    """
    M = math.fmod(mean_anomaly, 2.0 * math.pi)
    E = M + e * math.sin(M) * (1.0 + e * math.cos(M))
    for _ in range(max_iter):
        dE = (M - E + e * math.sin(E)) / (1.0 - e * math.cos(E))
        E += dE
        if abs(dE) < tol:
            break
    return E


def solve_kepler_hyperbolic(mean_anomaly: float, e: float, tol: float = 1e-12, max_iter: int = 100) -> float:
    """Solve M = e*sinh(H) - H for a hyperbolic orbit."""
    M = mean_anomaly
    H = math.asinh(M / e) if e != 0.0 else M
    for _ in range(max_iter):
        dH = (M - e * math.sinh(H) + H) / (e * math.cosh(H) - 1.0)
        H += dH
        if abs(dH) < tol:
            break
    return H


def _rotation_matrix_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def _rotation_matrix_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


@dataclass(frozen=True)
class EllipticalOrbit:
    """
    Keplerian orbit (elliptical or hyperbolic).

    Units:
        pericenter_distance : km
        period              : days
        angles              : radians
        epoch               : Julian date
    """
    pericenter_distance: float
    eccentricity: float
    inclination: float
    ascending_node: float
    arg_of_pericenter: float
    mean_anomaly_at_epoch: float
    period: float
    epoch: float = J2000

    @property
    def semi_major_axis(self) -> float:
        return self.pericenter_distance / (1.0 - self.eccentricity)

    def _plane_position(self, jd: float) -> np.ndarray:
        e = self.eccentricity
        mean_motion = 2.0 * math.pi / self.period if self.period else 0.0
        M = self.mean_anomaly_at_epoch + (jd - self.epoch) * mean_motion
        a = self.semi_major_axis
        if e < 1.0:
            E = solve_kepler(M, e)
            x = a * (math.cos(E) - e)
            y = a * math.sqrt(1.0 - e * e) * math.sin(E)
        else:
            H = solve_kepler_hyperbolic(M, e)
            x = -a * (e - math.cosh(H))
            y = -a * math.sqrt(e * e - 1.0) * math.sinh(H)
        return np.array([x, y, 0.0])

    def position_at(self, jd: float) -> np.ndarray:
        rotation = (
            _rotation_matrix_z(self.ascending_node)
            @ _rotation_matrix_x(self.inclination)
            @ _rotation_matrix_z(self.arg_of_pericenter)
        )
        p = rotation @ self._plane_position(jd)
        # Ecliptic z-up to internal y-up
        return np.array([p[0], p[2], -p[1]])


@dataclass(frozen=True)
class FixedPosition:
    """Body that stays at one point of its orbit frame."""
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    @property
    def period(self) -> float:
        return 0.0

    def position_at(self, jd: float) -> np.ndarray:
        return np.array(self.position, dtype=float)


@dataclass(frozen=True, eq=False)
class SynchronousOrbit:
    """Point fixed on the surface of a central body, turning with it."""
    central_body: Any  # Body
    position: Tuple[float, float, float]
    period: float = 0.0

    def position_at(self, jd: float) -> np.ndarray:
        phase = self.central_body.timeline.find_phase(jd) if self.central_body.timeline else None
        if phase is None:
            return np.array(self.position, dtype=float)
        q = phase.rotation_model.orientation_at(jd)
        w, x, y, z = q
        # Body-fixed to frame coordinates uses the conjugate orientation
        return rotate_vector((w, -x, -y, -z), self.position)


Orbit = Union[EllipticalOrbit, FixedPosition, SynchronousOrbit]
