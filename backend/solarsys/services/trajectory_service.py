"""Orbit and rotation model descriptors.

Each family is closed: an entry selects one variant with a tag key
(EllipticalOrbit, FixedPosition, LongLat for orbits; UniformRotation,
FixedRotation, PrecessingRotation or the legacy inline fields for rotation).
"""

import logging
import math
from typing import Optional

from solarsys.core.config import LoaderSettings, get_settings
from solarsys.models import (
    ConstantOrientation,
    EllipticalOrbit,
    FixedPosition,
    PlanetarySystem,
    PrecessingRotation,
    SynchronousOrbit,
    UniformRotation,
)
from solarsys.models.orbits import Orbit
from solarsys.models.rotations import J2000, RotationModel, fixed_rotation

from .attribute_reader import AttributeReader

logger = logging.getLogger(__name__)

KM_PER_AU = 149597870.7
DAYS_PER_YEAR = 365.25

ORBIT_KEYS = ("EllipticalOrbit", "FixedPosition", "LongLat")


class TrajectoryService:
    """Creates orbits and rotation models from catalog fields."""

    def __init__(self, settings: Optional[LoaderSettings] = None):
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Orbits
    # ------------------------------------------------------------------

    @staticmethod
    def describes_orbit(data: AttributeReader) -> bool:
        """Whether data names an orbit, usable or not."""
        return any(key in data for key in ORBIT_KEYS)

    def create_orbit(
        self,
        data: AttributeReader,
        use_planet_units: bool,
        system: Optional[PlanetarySystem] = None,
    ) -> Optional[Orbit]:
        """
        Build the orbit described by data, if any.

        Args:
            data: Entry or timeline phase fields
            use_planet_units: Distances in AU and periods in years rather
                than km and days (orbits centered on a star)
            system: System the body belongs to, needed for LongLat

        Returns:
            Orbit, or None if no usable orbit is described
        """
        elliptical = data.get_map("EllipticalOrbit")
        if elliptical is not None:
            return self._create_elliptical_orbit(elliptical, use_planet_units)

        position = data.get_vector("FixedPosition")
        if position is not None:
            scale = KM_PER_AU if use_planet_units else 1.0
            x, y, z = (c * scale for c in position)
            # Swap to the internal y-up convention
            return FixedPosition((x, z, -y))

        fixed = data.get_map("FixedPosition")
        if fixed is not None:
            rectangular = fixed.get_vector("Rectangular")
            if rectangular is not None:
                x, y, z = rectangular
                return FixedPosition((x, z, -y))
            logger.warning("FixedPosition property group has no Rectangular position")

        long_lat = data.get_vector("LongLat")
        if long_lat is not None:
            central = system.primary_body if system is not None else None
            if central is None:
                logger.warning("LongLat used for an object orbiting a star")
            else:
                position = central.planetocentric_to_cartesian(*long_lat)
                period = 0.0
                if central.timeline is not None and len(central.timeline) > 0:
                    period = central.timeline[-1].rotation_model.period
                return SynchronousOrbit(central, tuple(float(c) for c in position), period)

        return None

    def _create_elliptical_orbit(self, data: AttributeReader, use_planet_units: bool) -> Optional[EllipticalOrbit]:
        semi_major_axis = data.get_number("SemiMajorAxis")
        pericenter_distance = data.get_number("PericenterDistance")
        if semi_major_axis is None and pericenter_distance is None:
            logger.warning("SemiMajorAxis/PericenterDistance missing from EllipticalOrbit")
            return None

        period = data.get_number("Period")
        if period is None:
            logger.warning("Period missing from EllipticalOrbit")
            return None

        eccentricity = data.get_number("Eccentricity", 0.0)
        if eccentricity == 1.0:
            logger.warning("Parabolic orbits (Eccentricity 1) are not supported")
            return None
        inclination = data.get_number("Inclination", 0.0)
        ascending_node = data.get_number("AscendingNode", 0.0)

        arg_of_pericenter = data.get_number("ArgOfPericenter")
        if arg_of_pericenter is None:
            long_of_pericenter = data.get_number("LongOfPericenter")
            arg_of_pericenter = long_of_pericenter - ascending_node if long_of_pericenter is not None else 0.0

        epoch = data.get_date("Epoch", J2000)

        anomaly_at_epoch = data.get_number("MeanAnomaly")
        if anomaly_at_epoch is None:
            mean_longitude = data.get_number("MeanLongitude")
            if mean_longitude is not None:
                anomaly_at_epoch = mean_longitude - (arg_of_pericenter + ascending_node)
            else:
                anomaly_at_epoch = 0.0

        if use_planet_units:
            if semi_major_axis is not None:
                semi_major_axis *= KM_PER_AU
            if pericenter_distance is not None:
                pericenter_distance *= KM_PER_AU
            period *= DAYS_PER_YEAR

        if semi_major_axis is not None:
            pericenter_distance = semi_major_axis * (1.0 - eccentricity)

        return EllipticalOrbit(
            pericenter_distance=pericenter_distance,
            eccentricity=eccentricity,
            inclination=math.radians(inclination),
            ascending_node=math.radians(ascending_node),
            arg_of_pericenter=math.radians(arg_of_pericenter),
            mean_anomaly_at_epoch=math.radians(anomaly_at_epoch),
            period=period,
            epoch=epoch,
        )

    # ------------------------------------------------------------------
    # Rotation models
    # ------------------------------------------------------------------

    def create_rotation_model(self, data: AttributeReader, sync_period: float) -> Optional[RotationModel]:
        """
        Build the rotation model described by data, if any.

        Args:
            data: Entry or timeline phase fields
            sync_period: Orbital period in days, the default rotation period

        Returns:
            Rotation model, or None if none is described
        """
        uniform = data.get_map("UniformRotation")
        if uniform is not None:
            return self._create_uniform_rotation(uniform, sync_period)

        fixed = data.get_map("FixedRotation")
        if fixed is not None:
            return fixed_rotation(
                math.radians(fixed.get_number("MeridianAngle", 0.0)),
                math.radians(fixed.get_number("Inclination", self.settings.default_obliquity)),
                math.radians(fixed.get_number("AscendingNode", 0.0)),
            )

        precessing = data.get_map("PrecessingRotation")
        if precessing is not None:
            return self._create_precessing_rotation(precessing, sync_period)

        return self._create_legacy_rotation(data, sync_period)

    def create_default_rotation_model(self, sync_period: float) -> RotationModel:
        """Rotation synchronous with the orbit; constant when the orbit has no period."""
        if sync_period == 0.0:
            return ConstantOrientation()
        return UniformRotation(period=sync_period, inclination=math.radians(self.settings.default_obliquity))

    def _create_uniform_rotation(self, data: AttributeReader, sync_period: float) -> RotationModel:
        period = data.get_number("Period")
        period = period / 24.0 if period is not None else sync_period
        if period == 0.0:
            return ConstantOrientation()
        return UniformRotation(
            period=period,
            meridian_angle=math.radians(data.get_number("MeridianAngle", 0.0)),
            epoch=data.get_date("Epoch", J2000),
            inclination=math.radians(data.get_number("Inclination", self.settings.default_obliquity)),
            ascending_node=math.radians(data.get_number("AscendingNode", 0.0)),
        )

    def _create_precessing_rotation(self, data: AttributeReader, sync_period: float) -> RotationModel:
        period = data.get_number("Period")
        period = period / 24.0 if period is not None else sync_period
        if period == 0.0:
            return ConstantOrientation()
        precession_years = data.get_number("PrecessionPeriod", 0.0)
        return PrecessingRotation(
            period=period,
            meridian_angle=math.radians(data.get_number("MeridianAngle", 0.0)),
            epoch=data.get_date("Epoch", J2000),
            inclination=math.radians(data.get_number("Inclination", self.settings.default_obliquity)),
            ascending_node=math.radians(data.get_number("AscendingNode", 0.0)),
            precession_period=precession_years * DAYS_PER_YEAR,
        )

    def _create_legacy_rotation(self, data: AttributeReader, sync_period: float) -> Optional[RotationModel]:
        """Rotation from the RotationPeriod/Obliquity/... fields written directly in the entry."""
        rotation_period = data.get_number("RotationPeriod")
        offset = data.get_number("RotationOffset")
        epoch = data.get_date("RotationEpoch")
        obliquity = data.get_number("Obliquity")
        ascending_node = data.get_number("EquatorAscendingNode")
        precession_rate = data.get_number("PrecessionRate")

        fields = (rotation_period, offset, epoch, obliquity, ascending_node, precession_rate)
        if all(value is None for value in fields):
            return None

        period = rotation_period / 24.0 if rotation_period is not None else sync_period
        meridian_angle = math.radians(offset or 0.0)
        inclination = math.radians(obliquity if obliquity is not None else self.settings.default_obliquity)
        node = math.radians(ascending_node or 0.0)
        epoch = epoch if epoch is not None else J2000

        if period == 0.0:
            # A period of zero means the body does not rotate
            return ConstantOrientation()
        if not precession_rate:
            return UniformRotation(period, meridian_angle, epoch, inclination, node)
        return PrecessingRotation(period, meridian_angle, epoch, inclination, node, -360.0 / precession_rate)
