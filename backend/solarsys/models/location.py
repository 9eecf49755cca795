"""Named points on the surface of a body."""

from dataclasses import dataclass
from enum import IntFlag
from typing import Any, Tuple


class FeatureType(IntFlag):
    """Surface feature classification."""
    CITY = 0x00000001
    OBSERVATORY = 0x00000002
    LANDING_SITE = 0x00000004
    CRATER = 0x00000008
    VALLIS = 0x00000010
    MONS = 0x00000020
    PLANUM = 0x00000040
    CHASMA = 0x00000080
    PATERA = 0x00000100
    MARE = 0x00000200
    RUPES = 0x00000400
    TESSERA = 0x00000800
    REGIO = 0x00001000
    CHAOS = 0x00002000
    TERRA = 0x00004000
    ASTRUM = 0x00008000
    CORONA = 0x00010000
    DORSUM = 0x00020000
    FOSSA = 0x00040000
    CATENA = 0x00080000
    MENSA = 0x00100000
    RIMA = 0x00200000
    UNDAE = 0x00400000
    THOLUS = 0x00800000
    RETICULUM = 0x01000000
    PLANITIA = 0x02000000
    LINEA = 0x04000000
    FLUCTUS = 0x08000000
    FARRUM = 0x10000000
    INSULA = 0x20000000
    OTHER = 0x40000000


# Catalog spelling -> feature type
_FEATURE_NAMES = {
    "city": FeatureType.CITY,
    "observatory": FeatureType.OBSERVATORY,
    "landingsite": FeatureType.LANDING_SITE,
    "crater": FeatureType.CRATER,
    "vallis": FeatureType.VALLIS,
    "mons": FeatureType.MONS,
    "planum": FeatureType.PLANUM,
    "chasma": FeatureType.CHASMA,
    "patera": FeatureType.PATERA,
    "mare": FeatureType.MARE,
    "rupes": FeatureType.RUPES,
    "tessera": FeatureType.TESSERA,
    "regio": FeatureType.REGIO,
    "chaos": FeatureType.CHAOS,
    "terra": FeatureType.TERRA,
    "astrum": FeatureType.ASTRUM,
    "corona": FeatureType.CORONA,
    "dorsum": FeatureType.DORSUM,
    "fossa": FeatureType.FOSSA,
    "catena": FeatureType.CATENA,
    "mensa": FeatureType.MENSA,
    "rima": FeatureType.RIMA,
    "undae": FeatureType.UNDAE,
    "tholus": FeatureType.THOLUS,
    "reticulum": FeatureType.RETICULUM,
    "planitia": FeatureType.PLANITIA,
    "linea": FeatureType.LINEA,
    "fluctus": FeatureType.FLUCTUS,
    "farrum": FeatureType.FARRUM,
    "insula": FeatureType.INSULA,
    "other": FeatureType.OTHER,
}


def parse_feature_type(name: str) -> FeatureType:
    """Map a catalog feature type name (case-insensitive) to a FeatureType; unknown names are OTHER."""
    return _FEATURE_NAMES.get(name.strip().lower(), FeatureType.OTHER)


@dataclass(eq=False)
class Location:
    """A labelled point fixed to a body's surface."""
    name: str
    parent: Any  # Body
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)  # km, body-fixed
    size: float = 1.0
    importance: float = -1.0
    feature_type: FeatureType = FeatureType.OTHER

    def __repr__(self) -> str:
        return f"Location({self.name!r}, parent={self.parent.name!r})"
