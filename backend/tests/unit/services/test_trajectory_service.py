"""Tests for orbit and rotation model creation."""

import math

import numpy as np
import pytest

from solarsys.models import (
    ConstantOrientation,
    EllipticalOrbit,
    FixedPosition,
    PrecessingRotation,
    SynchronousOrbit,
    UniformRotation,
)
from solarsys.models.orbits import solve_kepler
from solarsys.services.attribute_reader import AttributeReader
from solarsys.services.trajectory_service import DAYS_PER_YEAR, KM_PER_AU, TrajectoryService


@pytest.fixture
def trajectory_service(settings):
    return TrajectoryService(settings)


class TestOrbits:
    """Test orbit descriptors."""

    def test_elliptical_orbit_planet_units(self, trajectory_service):
        """Test AU and year units for orbits around a star."""
        data = AttributeReader({
            "EllipticalOrbit": {"Period": 1.0, "SemiMajorAxis": 1.0, "Eccentricity": 0.0167},
        })
        orbit = trajectory_service.create_orbit(data, use_planet_units=True)

        assert isinstance(orbit, EllipticalOrbit)
        assert orbit.period == pytest.approx(DAYS_PER_YEAR)
        assert orbit.semi_major_axis == pytest.approx(KM_PER_AU)

    def test_elliptical_orbit_satellite_units(self, trajectory_service):
        """Test km and day units for orbits around a body."""
        data = AttributeReader({
            "EllipticalOrbit": {
                "Period": 27.321661,
                "SemiMajorAxis": 384400.0,
                "Inclination": 5.145,
                "AscendingNode": 125.08,
                "LongOfPericenter": 83.35,
            },
        })
        orbit = trajectory_service.create_orbit(data, use_planet_units=False)

        assert orbit.period == pytest.approx(27.321661)
        assert orbit.semi_major_axis == pytest.approx(384400.0)
        assert orbit.inclination == pytest.approx(math.radians(5.145))
        assert orbit.arg_of_pericenter == pytest.approx(math.radians(83.35 - 125.08))

    def test_circular_orbit_keeps_distance(self, trajectory_service):
        """Test that a circular orbit stays at its radius."""
        data = AttributeReader({"EllipticalOrbit": {"Period": 10.0, "SemiMajorAxis": 1000.0}})
        orbit = trajectory_service.create_orbit(data, use_planet_units=False)

        for jd in (orbit.epoch, orbit.epoch + 2.5, orbit.epoch + 7.1):
            assert np.linalg.norm(orbit.position_at(jd)) == pytest.approx(1000.0)
        np.testing.assert_allclose(orbit.position_at(orbit.epoch), [1000.0, 0.0, 0.0], atol=1e-6)

    def test_incomplete_elliptical_orbit(self, trajectory_service):
        """Test that an orbit without size or period is unusable."""
        assert trajectory_service.create_orbit(
            AttributeReader({"EllipticalOrbit": {"Period": 1.0}}), use_planet_units=False
        ) is None
        assert trajectory_service.create_orbit(
            AttributeReader({"EllipticalOrbit": {"SemiMajorAxis": 1.0}}), use_planet_units=False
        ) is None

    def test_parabolic_orbit(self, trajectory_service):
        """Test that an orbit with eccentricity 1 is unusable."""
        data = AttributeReader({"EllipticalOrbit": {"Period": 10.0, "PericenterDistance": 1.0, "Eccentricity": 1.0}})
        assert trajectory_service.create_orbit(data, use_planet_units=False) is None

    def test_describes_orbit(self):
        """Test detection of orbit fields whether or not they are usable."""
        assert TrajectoryService.describes_orbit(AttributeReader({"EllipticalOrbit": {"Period": 1.0}}))
        assert TrajectoryService.describes_orbit(AttributeReader({"LongLat": [0.0, 0.0, 0.0]}))
        assert not TrajectoryService.describes_orbit(AttributeReader({"Radius": 1.0}))

    def test_fixed_position(self, trajectory_service):
        """Test fixed positions as a vector and as a Rectangular group."""
        orbit = trajectory_service.create_orbit(
            AttributeReader({"FixedPosition": [1.0, 2.0, 3.0]}), use_planet_units=False
        )
        assert isinstance(orbit, FixedPosition)
        assert orbit.position == (1.0, 3.0, -2.0)
        assert orbit.period == 0.0

        orbit = trajectory_service.create_orbit(
            AttributeReader({"FixedPosition": {"Rectangular": [1.0, 2.0, 3.0]}}), use_planet_units=True
        )
        assert orbit.position == (1.0, 3.0, -2.0)

    def test_long_lat_orbit(self, trajectory_service, earth):
        """Test a position fixed to the surface of the primary body."""
        system = earth.get_or_create_satellites()
        orbit = trajectory_service.create_orbit(
            AttributeReader({"LongLat": [0.0, 90.0, 0.0]}), use_planet_units=False, system=system
        )
        assert isinstance(orbit, SynchronousOrbit)
        assert orbit.central_body is earth
        assert orbit.position[1] == pytest.approx(earth.radius)

    def test_no_orbit(self, trajectory_service):
        """Test that entries without an orbit yield None."""
        assert trajectory_service.create_orbit(AttributeReader({"Radius": 1.0}), use_planet_units=False) is None


class TestRotationModels:
    """Test rotation descriptors."""

    def test_uniform_rotation(self, trajectory_service):
        """Test UniformRotation with a period in hours."""
        data = AttributeReader({"UniformRotation": {"Period": 24.0, "Inclination": 23.44, "MeridianAngle": 10.0}})
        rotation = trajectory_service.create_rotation_model(data, sync_period=0.0)

        assert isinstance(rotation, UniformRotation)
        assert rotation.period == pytest.approx(1.0)
        assert rotation.inclination == pytest.approx(math.radians(23.44))
        assert rotation.meridian_angle == pytest.approx(math.radians(10.0))

    def test_uniform_rotation_defaults_to_synchronous(self, trajectory_service):
        """Test that a missing period makes the rotation synchronous."""
        rotation = trajectory_service.create_rotation_model(
            AttributeReader({"UniformRotation": {}}), sync_period=27.3
        )
        assert rotation.period == pytest.approx(27.3)

    def test_fixed_rotation(self, trajectory_service):
        """Test a constant orientation."""
        rotation = trajectory_service.create_rotation_model(
            AttributeReader({"FixedRotation": {"Inclination": 90.0}}), sync_period=0.0
        )
        assert isinstance(rotation, ConstantOrientation)
        assert rotation.orientation_at(0.0) == rotation.orientation_at(1e6)

    def test_precessing_rotation(self, trajectory_service):
        """Test a rotation with precession period in years."""
        rotation = trajectory_service.create_rotation_model(
            AttributeReader({"PrecessingRotation": {"Period": 12.0, "PrecessionPeriod": 2.0}}), sync_period=0.0
        )
        assert isinstance(rotation, PrecessingRotation)
        assert rotation.period == pytest.approx(0.5)
        assert rotation.precession_period == pytest.approx(2.0 * DAYS_PER_YEAR)

    def test_legacy_rotation_fields(self, trajectory_service):
        """Test rotation given by RotationPeriod, Obliquity and friends."""
        data = AttributeReader({"RotationPeriod": 23.9344694, "Obliquity": 23.4392911, "RotationOffset": 280.5})
        rotation = trajectory_service.create_rotation_model(data, sync_period=365.25)

        assert isinstance(rotation, UniformRotation)
        assert rotation.period == pytest.approx(23.9344694 / 24.0)
        assert rotation.inclination == pytest.approx(math.radians(23.4392911))
        assert rotation.meridian_angle == pytest.approx(math.radians(280.5))

    def test_legacy_precession(self, trajectory_service):
        """Test that PrecessionRate selects a precessing rotation."""
        data = AttributeReader({"RotationPeriod": 24.0, "PrecessionRate": 0.5})
        rotation = trajectory_service.create_rotation_model(data, sync_period=0.0)
        assert isinstance(rotation, PrecessingRotation)
        assert rotation.precession_period == pytest.approx(-720.0)

    def test_no_rotation(self, trajectory_service):
        """Test that entries without rotation fields yield None."""
        assert trajectory_service.create_rotation_model(AttributeReader({}), sync_period=1.0) is None

    def test_default_rotation(self, trajectory_service):
        """Test synchronous default rotation."""
        assert isinstance(trajectory_service.create_default_rotation_model(0.0), ConstantOrientation)
        rotation = trajectory_service.create_default_rotation_model(27.3)
        assert isinstance(rotation, UniformRotation)
        assert rotation.period == 27.3


def test_solve_kepler():
    """Test the eccentric anomaly satisfies Kepler's equation."""
    for e in (0.0, 0.2, 0.9):
        for M in (0.1, 1.0, 3.0):
            E = solve_kepler(M, e)
            assert E - e * math.sin(E) == pytest.approx(M)
