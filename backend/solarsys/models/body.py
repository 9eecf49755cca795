"""Bodies and the planetary systems that hold them."""

import math
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np

from .frames import FrameTree, ReferenceFrame
from .location import Location
from .rotations import IDENTITY, Quaternion
from .surface import Atmosphere, Color, ResourceRef, RingSystem, Surface
from .timeline import Timeline


class BodyClassification(Enum):
    """Kinds of bodies that a catalog can define."""
    PLANET = "planet"
    MOON = "moon"
    COMET = "comet"
    ASTEROID = "asteroid"
    SPACECRAFT = "spacecraft"
    INVISIBLE = "invisible"
    SURFACE_FEATURE = "surfacefeature"
    COMPONENT = "component"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, name: str) -> Optional["BodyClassification"]:
        """Case-insensitive lookup of a catalog class name; None if unrecognized."""
        normalized = name.strip().lower()
        for classification in cls:
            if classification.value == normalized and classification is not cls.UNKNOWN:
                return classification
        return None


class Body:
    """A planet, moon, spacecraft, reference point or other solar system object."""

    def __init__(self, system: Optional["PlanetarySystem"], name: str = ""):
        self.name = name
        self.system = system
        self.timeline: Optional[Timeline] = None
        self.satellites: Optional[PlanetarySystem] = None
        self.frame_tree: Optional[FrameTree] = None

        self.classification = BodyClassification.UNKNOWN
        self.semi_axes: Tuple[float, float, float] = (1.0, 1.0, 1.0)
        self.mass = 0.0
        self.albedo = 0.5
        self.orientation: Quaternion = IDENTITY

        self.visible = True
        self.visible_as_point = True
        self.clickable = True

        self.surface = Surface()
        self.atmosphere: Optional[Atmosphere] = None
        self.rings: Optional[RingSystem] = None
        self.model: Optional[ResourceRef] = None
        self.info_url = ""
        self.orbit_color: Color = (1.0, 1.0, 1.0, 1.0)
        self.orbit_color_overridden = False

        self.alternate_surfaces: Dict[str, Surface] = {}
        self.locations: List[Location] = []

    def __repr__(self) -> str:
        return f"Body({self.name!r}, {self.classification.value})"

    @property
    def radius(self) -> float:
        return max(self.semi_axes)

    @property
    def star(self):
        return self.system.star if self.system is not None else None

    def get_or_create_frame_tree(self) -> FrameTree:
        if self.frame_tree is None:
            self.frame_tree = FrameTree(self)
        return self.frame_tree

    def get_or_create_satellites(self) -> "PlanetarySystem":
        if self.satellites is None:
            self.satellites = PlanetarySystem(primary_body=self)
        return self.satellites

    def orbit_frame_at(self, jd: float) -> Optional[ReferenceFrame]:
        phase = self.timeline.find_phase(jd) if self.timeline else None
        return phase.orbit_frame if phase else None

    def body_frame_at(self, jd: float) -> Optional[ReferenceFrame]:
        phase = self.timeline.find_phase(jd) if self.timeline else None
        return phase.body_frame if phase else None

    def planetocentric_to_cartesian(self, longitude: float, latitude: float, altitude: float) -> np.ndarray:
        """
        Convert planetocentric coordinates to a body-fixed Cartesian offset.

        Args:
            longitude: Degrees east
            latitude: Degrees north
            altitude: km above the mean radius

        Returns:
            Position in km in the body's y-up frame
        """
        phi = -math.radians(latitude) + math.pi / 2.0
        theta = math.radians(longitude) - math.pi
        direction = np.array([
            math.cos(theta) * math.sin(phi),
            math.cos(phi),
            -math.sin(theta) * math.sin(phi),
        ])
        return direction * (self.radius + altitude)

    def add_location(self, location: Location) -> None:
        location.parent = self
        self.locations.append(location)

    def find_location(self, name: str) -> Optional[Location]:
        key = name.lower()
        return next((loc for loc in self.locations if loc.name.lower() == key), None)

    def add_alternate_surface(self, name: str, surface: Surface) -> None:
        self.alternate_surfaces[name] = surface


class PlanetarySystem:
    """Ordered collection of bodies sharing one parent star or body."""

    def __init__(self, star=None, primary_body: Optional[Body] = None):
        self._star = star
        self.primary_body = primary_body
        self.bodies: List[Body] = []

    def __repr__(self) -> str:
        parent = self.primary_body.name if self.primary_body else getattr(self._star, "name", None)
        return f"PlanetarySystem({parent!r}, {len(self.bodies)} bodies)"

    def __len__(self) -> int:
        return len(self.bodies)

    def __iter__(self):
        return iter(self.bodies)

    @property
    def star(self):
        if self.primary_body is not None:
            return self.primary_body.star
        return self._star

    def find(self, name: str) -> Optional[Body]:
        """First body with the given name (case-insensitive), or None."""
        key = name.lower()
        return next((body for body in self.bodies if body.name.lower() == key), None)

    def add_body(self, body: Body) -> None:
        body.system = self
        self.bodies.append(body)

    def replace_body(self, old_body: Body, new_body: Body) -> None:
        """Put new_body in old_body's slot."""
        index = self.bodies.index(old_body)
        new_body.system = self
        self.bodies[index] = new_body
        old_body.system = None

    def remove_body(self, body: Body) -> None:
        self.bodies.remove(body)
        body.system = None
