"""Typed access to the property groups of a catalog entry.

Every getter returns the supplied default when the field is missing *or*
holds a value of the wrong type. Nothing here raises; builders rely on this
to apply only the fields an entry actually sets.
"""

import math
import re
from typing import Any, Dict, List, Optional, Tuple

from astropy.time import Time

from solarsys.models.rotations import Quaternion, axis_angle
from solarsys.models.surface import Color

# "1997 10 15 09:27:00" style dates used by older catalogs
_SPACED_DATE = re.compile(
    r"^\s*(-?\d+)\s+(\d{1,2})\s+(\d{1,2})(?:\s+(\d{1,2}):(\d{1,2})(?::(\d{1,2}(?:\.\d*)?))?)?\s*$"
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_date_string(text: str) -> Optional[float]:
    """
    Convert a calendar date string (UTC) to a TDB Julian date.

    Accepts ISO 8601 ("2004-06-30T12:00:00") and the space separated
    "YYYY MM DD HH:MM:SS" form.

    Returns:
        Julian date, or None if the string is not a date
    """
    match = _SPACED_DATE.match(text)
    if match:
        year, month, day, hour, minute, second = match.groups()
        text = f"{int(year):04d}-{int(month):02d}-{int(day):02d}T{int(hour or 0):02d}:{int(minute or 0):02d}:{float(second or 0):06.3f}"
    try:
        return float(Time(text.strip(), scale="utc").tdb.jd)
    except ValueError:
        return None


class AttributeReader:
    """Typed accessors over one associative map from the catalog."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.values = values if values is not None else {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def get_value(self, name: str) -> Any:
        """Untyped value, for fields whose meaning depends on their shape."""
        return self.values.get(name)

    def get_number(self, name: str, default: Optional[float] = None) -> Optional[float]:
        value = self.values.get(name)
        return float(value) if _is_number(value) else default

    def get_string(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self.values.get(name)
        return value if isinstance(value, str) else default

    def get_boolean(self, name: str, default: Optional[bool] = None) -> Optional[bool]:
        value = self.values.get(name)
        return value if isinstance(value, bool) else default

    def get_vector(self, name: str, default: Optional[Tuple[float, float, float]] = None):
        value = self.values.get(name)
        if isinstance(value, list) and len(value) == 3 and all(_is_number(v) for v in value):
            return tuple(float(v) for v in value)
        return default

    def get_color(self, name: str, default: Optional[Color] = None) -> Optional[Color]:
        """Color from [r g b], [r g b a] or "#rrggbb"; alpha defaults to 1."""
        value = self.values.get(name)
        if isinstance(value, list) and len(value) in (3, 4) and all(_is_number(v) for v in value):
            components = [float(v) for v in value]
            if len(components) == 3:
                components.append(1.0)
            return tuple(components)
        if isinstance(value, str) and re.fullmatch(r"#[0-9a-fA-F]{6}", value):
            return (
                int(value[1:3], 16) / 255.0,
                int(value[3:5], 16) / 255.0,
                int(value[5:7], 16) / 255.0,
                1.0,
            )
        return default

    def get_rotation(self, name: str, default: Optional[Quaternion] = None) -> Optional[Quaternion]:
        """Rotation written as [angle_degrees axis_x axis_y axis_z]."""
        value = self.values.get(name)
        if isinstance(value, list) and len(value) == 4 and all(_is_number(v) for v in value):
            angle, x, y, z = (float(v) for v in value)
            return axis_angle((x, y, z), math.radians(angle))
        return default

    def get_map(self, name: str) -> Optional["AttributeReader"]:
        value = self.values.get(name)
        return AttributeReader(value) if isinstance(value, dict) else None

    def get_array(self, name: str) -> Optional[List[Any]]:
        value = self.values.get(name)
        return value if isinstance(value, list) else None

    def get_date(self, name: str, default: Optional[float] = None) -> Optional[float]:
        """Julian date from a number, or from a calendar date string in UTC."""
        value = self.values.get(name)
        if _is_number(value):
            return float(value)
        if isinstance(value, str):
            jd = parse_date_string(value)
            if jd is not None:
                return jd
        return default
