"""Surface, atmosphere and ring descriptions attached to bodies.

Texture and mesh references are recorded as ResourceRef values only; this
package never loads the resources they name.
"""

from enum import IntFlag
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, Field

Color = Tuple[float, float, float, float]

WHITE: Color = (1.0, 1.0, 1.0, 1.0)
BLACK: Color = (0.0, 0.0, 0.0, 1.0)


class TextureFlags(IntFlag):
    """Parameters recorded with texture references."""
    NONE = 0
    WRAP_TEXTURE = 1
    ALLOW_SPLITTING = 2
    COMPRESS_TEXTURE = 4


class AppearanceFlags(IntFlag):
    """Surface appearance bits derived from the supplied fields."""
    NONE = 0
    BLEND_TEXTURE = 0x01
    APPLY_BASE_TEXTURE = 0x02
    APPLY_BUMP_MAP = 0x04
    APPLY_NIGHT_MAP = 0x08
    SEPARATE_SPECULAR_MAP = 0x10
    APPLY_OVERLAY = 0x20
    SPECULAR_REFLECTION = 0x40
    EMISSIVE = 0x80


class ResourceRef(BaseModel):
    """Opaque handle key for a texture or mesh: identifier, base path, parameters."""
    name: str = Field(description="Resource identifier as written in the catalog")
    path: str = Field(default="", description="Directory of the catalog that referenced it")
    flags: int = Field(default=0, description="TextureFlags bits")
    params: Dict[str, float] = Field(default_factory=dict, description="Extra parameters (bump height, mesh center)")


class Surface(BaseModel):
    """Visual surface properties of a body."""
    color: Color = WHITE
    haze_color: Color = (0.0, 0.0, 0.0, 0.0)  # Alpha holds the legacy haze density
    specular_color: Color = BLACK
    specular_power: float = 0.0
    lunar_lambert: float = 0.0
    base_texture: Optional[ResourceRef] = None
    bump_texture: Optional[ResourceRef] = None
    night_texture: Optional[ResourceRef] = None
    specular_texture: Optional[ResourceRef] = None
    overlay_texture: Optional[ResourceRef] = None
    appearance_flags: int = 0

    def has_flag(self, flag: AppearanceFlags) -> bool:
        return bool(self.appearance_flags & flag)


class Atmosphere(BaseModel):
    """Atmosphere and cloud layer of a body."""
    height: float = 0.0
    lower_color: Color = BLACK
    upper_color: Color = BLACK
    sky_color: Color = BLACK
    sunset_color: Color = (1.0, 0.6, 0.5, 1.0)
    mie_coeff: float = 0.0
    mie_scale_height: float = 0.0
    mie_asymmetry: float = 0.0
    rayleigh_coeff: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    absorption_coeff: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    cloud_height: float = 0.0
    cloud_speed: float = 0.0  # Radians per day
    cloud_texture: Optional[ResourceRef] = None
    cloud_normal_map: Optional[ResourceRef] = None


class RingSystem(BaseModel):
    """Planetary rings."""
    inner_radius: float = 0.0
    outer_radius: float = 0.0
    color: Color = WHITE
    texture: Optional[ResourceRef] = None
