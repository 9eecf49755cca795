"""The universe: stars and the solar systems attached to them."""

from typing import Dict, Iterator, List, Optional, Union

from .body import Body, PlanetarySystem
from .frames import FrameTree
from .star import Star

Selection = Union[Star, Body]


class SolarSystem:
    """Planets and default reference frame of a single star."""

    def __init__(self, star: Star):
        self.star = star
        self.planets = PlanetarySystem(star=star)
        self.frame_tree = FrameTree(star)

    def __repr__(self) -> str:
        return f"SolarSystem({self.star.name!r}, {len(self.planets)} planets)"


class Universe:
    """Registry of stars and their lazily created solar systems."""

    def __init__(self, stars: Optional[List[Star]] = None):
        self._stars: Dict[str, Star] = {}
        self._solar_systems: Dict[int, SolarSystem] = {}
        for star in stars or []:
            self.add_star(star)

    def add_star(self, star: Star) -> Star:
        self._stars[star.name.lower()] = star
        return star

    def find_star(self, name: str) -> Optional[Star]:
        return self._stars.get(name.strip().lower())

    @property
    def stars(self) -> List[Star]:
        return list(self._stars.values())

    def get_solar_system(self, star: Star) -> Optional[SolarSystem]:
        return self._solar_systems.get(id(star))

    def create_solar_system(self, star: Star) -> SolarSystem:
        solar_system = SolarSystem(star)
        self._solar_systems[id(star)] = solar_system
        return solar_system

    def get_or_create_solar_system(self, star: Star) -> SolarSystem:
        return self.get_solar_system(star) or self.create_solar_system(star)

    def solar_systems(self) -> Iterator[SolarSystem]:
        return iter(self._solar_systems.values())

    def find_path(self, path: str) -> Optional[Selection]:
        """
        Resolve a slash-separated path such as "Sol/Earth/Moon".

        The first component names a star; if no star has that name, a body
        of that name directly orbiting any star is accepted instead.

        Returns:
            The Star or Body named by the path, or None if not found
        """
        names = [part.strip() for part in path.split("/")]
        if not names or not names[0]:
            return None

        selection: Optional[Selection] = self.find_star(names[0])
        if selection is None:
            selection = self._find_top_level_body(names[0])

        for name in names[1:]:
            if selection is None:
                return None
            selection = self._find_child(selection, name)

        return selection

    def _find_top_level_body(self, name: str) -> Optional[Body]:
        for solar_system in self._solar_systems.values():
            body = solar_system.planets.find(name)
            if body is not None:
                return body
        return None

    def _find_child(self, parent: Selection, name: str) -> Optional[Body]:
        if isinstance(parent, Star):
            solar_system = self.get_solar_system(parent)
            return solar_system.planets.find(name) if solar_system else None
        if parent.satellites is not None:
            return parent.satellites.find(name)
        return None
