"""Pytest configuration and shared fixtures."""

import pytest

from solarsys.core.config import LoaderSettings
from solarsys.models import Star, Universe
from solarsys.services.catalog_loader import CatalogLoader

EARTH_CATALOG = """
"Earth" "Sol"
{
    Class "planet"
    Radius 6378.14
    Albedo 0.3
    EllipticalOrbit
    {
        Period          1.0000174
        SemiMajorAxis   1.0000001
        Eccentricity    0.0167
        Inclination     0.0001
        AscendingNode   348.739
        LongOfPericenter 102.947
        MeanLongitude   100.464
    }
    RotationPeriod 23.9344694
    Obliquity 23.4392911
}
"""


@pytest.fixture
def settings():
    """Loader settings independent of the environment."""
    return LoaderSettings(
        max_frame_depth=50,
        default_albedo=0.5,
        default_obliquity=0.0,
        synthesize_default_orbit=True,
        _env_file=None,
    )


@pytest.fixture
def empty_universe():
    """Universe containing only the star Sol."""
    return Universe([Star("Sol")])


@pytest.fixture
def universe(empty_universe, settings):
    """Universe with Sol and the planet Earth."""
    result = CatalogLoader(empty_universe, settings).load(EARTH_CATALOG)
    assert result.success and result.entries_applied == 1
    return empty_universe


@pytest.fixture
def loader(universe, settings):
    """Catalog loader bound to the Sol/Earth universe."""
    return CatalogLoader(universe, settings)


@pytest.fixture
def sol(universe):
    return universe.find_star("Sol")


@pytest.fixture
def earth(universe):
    return universe.find_path("Sol/Earth")
