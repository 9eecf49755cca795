"""Bodies, reference points, locations and surfaces built from catalog entries.

Builders never touch an existing body until every part of the entry has
been validated: all new values are staged in a BodyDraft and committed in
one step, so a rejected Modify leaves the body exactly as it was.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from solarsys.core.config import LoaderSettings, get_settings
from solarsys.core.errors import InvalidStructure
from solarsys.models import (
    AppearanceFlags,
    Atmosphere,
    Body,
    BodyClassification,
    Disposition,
    Location,
    PlanetarySystem,
    ResourceRef,
    RingSystem,
    Surface,
    TextureFlags,
    Universe,
    parse_feature_type,
)
from solarsys.models.rotations import Quaternion
from solarsys.models.surface import Color

from .attribute_reader import AttributeReader
from .timeline_service import TimelineService

logger = logging.getLogger(__name__)

DEFAULT_BUMP_HEIGHT = 2.5

# Radius thresholds (km) used to guess a classification
MOON_MIN_RADIUS = 0.1
PLANET_MIN_RADIUS = 1000.0

_NOT_POINT_CLASSES = {
    BodyClassification.INVISIBLE,
    BodyClassification.SURFACE_FEATURE,
    BodyClassification.COMPONENT,
}


def fill_surface(data: AttributeReader, surface: Surface, path: str = "") -> Surface:
    """
    Apply the surface fields present in data on top of surface.

    Args:
        data: Entry fields
        surface: Starting values (fresh defaults or the body's current surface)
        path: Catalog directory recorded with texture references

    Returns:
        A new Surface; the one passed in is not modified
    """
    surface = surface.model_copy(deep=True)

    color = data.get_color("Color")
    if color is not None:
        surface.color = color

    # Haze density is carried in the alpha channel of the haze color
    haze_color = data.get_color("HazeColor")
    haze_density = data.get_number("HazeDensity")
    r, g, b, density = surface.haze_color
    if haze_color is not None:
        r, g, b = haze_color[:3]
    if haze_density is not None:
        density = haze_density
    surface.haze_color = (r, g, b, density)

    specular_color = data.get_color("SpecularColor")
    if specular_color is not None:
        surface.specular_color = specular_color
    surface.specular_power = data.get_number("SpecularPower", surface.specular_power)
    surface.lunar_lambert = data.get_number("LunarLambert", surface.lunar_lambert)

    base_texture = data.get_string("Texture")
    bump_texture = data.get_string("BumpMap")
    night_texture = data.get_string("NightTexture")
    specular_texture = data.get_string("SpecularTexture")
    normal_texture = data.get_string("NormalMap")
    overlay_texture = data.get_string("OverlayTexture")

    texture_flags = TextureFlags.WRAP_TEXTURE | TextureFlags.ALLOW_SPLITTING
    base_flags = texture_flags
    if data.get_boolean("CompressTexture", False):
        base_flags |= TextureFlags.COMPRESS_TEXTURE
    bump_height = data.get_number("BumpHeight", DEFAULT_BUMP_HEIGHT)

    flags = AppearanceFlags(surface.appearance_flags)
    if data.get_boolean("BlendTexture", False):
        flags |= AppearanceFlags.BLEND_TEXTURE
    if data.get_boolean("Emissive", False):
        flags |= AppearanceFlags.EMISSIVE
    if base_texture is not None:
        flags |= AppearanceFlags.APPLY_BASE_TEXTURE
    if bump_texture is not None or normal_texture is not None:
        flags |= AppearanceFlags.APPLY_BUMP_MAP
    if night_texture is not None:
        flags |= AppearanceFlags.APPLY_NIGHT_MAP
    if specular_texture is not None:
        flags |= AppearanceFlags.SEPARATE_SPECULAR_MAP
    if overlay_texture is not None:
        flags |= AppearanceFlags.APPLY_OVERLAY
    if surface.specular_color[:3] != (0.0, 0.0, 0.0):
        flags |= AppearanceFlags.SPECULAR_REFLECTION
    surface.appearance_flags = int(flags)

    if base_texture is not None:
        surface.base_texture = ResourceRef(name=base_texture, path=path, flags=int(base_flags))
    if night_texture is not None:
        surface.night_texture = ResourceRef(name=night_texture, path=path, flags=int(texture_flags))
    if specular_texture is not None:
        surface.specular_texture = ResourceRef(name=specular_texture, path=path, flags=int(texture_flags))

    # NormalMap wins over BumpMap when both are given
    if normal_texture is not None:
        surface.bump_texture = ResourceRef(name=normal_texture, path=path, flags=int(texture_flags))
    elif bump_texture is not None:
        surface.bump_texture = ResourceRef(
            name=bump_texture, path=path, flags=int(texture_flags), params={"bump_height": bump_height}
        )

    if overlay_texture is not None:
        surface.overlay_texture = ResourceRef(name=overlay_texture, path=path, flags=int(base_flags))

    return surface


def fill_atmosphere(data: AttributeReader, atmosphere: Atmosphere, path: str = "") -> Atmosphere:
    """Apply the atmosphere fields present in data on top of a copy of atmosphere."""
    atmosphere = atmosphere.model_copy(deep=True)

    atmosphere.height = data.get_number("Height", atmosphere.height)
    atmosphere.lower_color = data.get_color("Lower", atmosphere.lower_color)
    atmosphere.upper_color = data.get_color("Upper", atmosphere.upper_color)
    atmosphere.sky_color = data.get_color("Sky", atmosphere.sky_color)
    atmosphere.sunset_color = data.get_color("Sunset", atmosphere.sunset_color)

    atmosphere.mie_coeff = data.get_number("Mie", atmosphere.mie_coeff)
    atmosphere.mie_scale_height = data.get_number("MieScaleHeight", atmosphere.mie_scale_height)
    atmosphere.mie_asymmetry = data.get_number("MieAsymmetry", atmosphere.mie_asymmetry)
    atmosphere.rayleigh_coeff = data.get_vector("Rayleigh", atmosphere.rayleigh_coeff)
    atmosphere.absorption_coeff = data.get_vector("Absorption", atmosphere.absorption_coeff)

    atmosphere.cloud_height = data.get_number("CloudHeight", atmosphere.cloud_height)
    cloud_speed = data.get_number("CloudSpeed")
    if cloud_speed is not None:
        atmosphere.cloud_speed = math.radians(cloud_speed)

    cloud_map = data.get_string("CloudMap")
    if cloud_map is not None:
        atmosphere.cloud_texture = ResourceRef(name=cloud_map, path=path, flags=int(TextureFlags.WRAP_TEXTURE))
    cloud_normal_map = data.get_string("CloudNormalMap")
    if cloud_normal_map is not None:
        atmosphere.cloud_normal_map = ResourceRef(
            name=cloud_normal_map, path=path, flags=int(TextureFlags.WRAP_TEXTURE)
        )

    return atmosphere


def fill_rings(data: AttributeReader, rings: RingSystem, path: str = "") -> RingSystem:
    """Apply the ring fields present in data on top of a copy of rings."""
    rings = rings.model_copy(deep=True)
    rings.inner_radius = data.get_number("Inner", rings.inner_radius)
    rings.outer_radius = data.get_number("Outer", rings.outer_radius)
    rings.color = data.get_color("Color", rings.color)
    texture = data.get_string("Texture")
    if texture is not None:
        rings.texture = ResourceRef(name=texture, path=path)
    return rings


@dataclass
class BodyDraft:
    """Every body field an entry sets, staged before anything is written."""
    semi_axes: Tuple[float, float, float]
    classification: BodyClassification
    visible: bool
    visible_as_point: bool
    clickable: bool
    albedo: float
    mass: float
    orientation: Quaternion
    surface: Surface
    atmosphere: Optional[Atmosphere] = None
    rings: Optional[RingSystem] = None
    model: Optional[ResourceRef] = None
    info_url: str = ""
    orbit_color: Optional[Color] = None

    @classmethod
    def from_body(cls, body: Body) -> "BodyDraft":
        return cls(
            semi_axes=body.semi_axes,
            classification=body.classification,
            visible=body.visible,
            visible_as_point=body.visible_as_point,
            clickable=body.clickable,
            albedo=body.albedo,
            mass=body.mass,
            orientation=body.orientation,
            surface=body.surface,
            atmosphere=body.atmosphere,
            rings=body.rings,
            model=body.model,
            info_url=body.info_url,
            orbit_color=body.orbit_color if body.orbit_color_overridden else None,
        )

    def apply(self, body: Body) -> None:
        body.semi_axes = self.semi_axes
        body.classification = self.classification
        body.visible = self.visible
        body.visible_as_point = self.visible_as_point
        body.clickable = self.clickable
        body.albedo = self.albedo
        body.mass = self.mass
        body.orientation = self.orientation
        body.surface = self.surface
        body.atmosphere = self.atmosphere
        body.rings = self.rings
        body.model = self.model
        body.info_url = self.info_url
        if self.orbit_color is not None:
            body.orbit_color = self.orbit_color
            body.orbit_color_overridden = True


class BodyService:
    """Builds and updates bodies from catalog entries."""

    def __init__(
        self,
        universe: Universe,
        timeline_service: Optional[TimelineService] = None,
        settings: Optional[LoaderSettings] = None,
    ):
        self.universe = universe
        self.settings = settings or get_settings()
        self.timeline_service = timeline_service or TimelineService(universe, settings=self.settings)

    def _new_body(self, system: PlanetarySystem, name: str) -> Body:
        body = Body(system, name)
        body.albedo = self.settings.default_albedo
        return body

    def build_body(
        self,
        name: str,
        system: PlanetarySystem,
        existing_body: Optional[Body],
        data: AttributeReader,
        path: str = "",
        disposition: Disposition = Disposition.ADD,
    ) -> Body:
        """
        Create a body, or update existing_body in place under Modify.

        Args:
            name: Body name
            system: Planetary system the body belongs to
            existing_body: Body of the same name already in system, if any
            data: Entry fields
            path: Directory of the catalog, recorded with resource references
            disposition: Add, Replace or Modify

        Returns:
            The new body, or existing_body after modification

        Raises:
            EntryError: If the entry cannot be applied; existing_body is unchanged
        """
        modify = disposition == Disposition.MODIFY and existing_body is not None
        body = existing_body if modify else self._new_body(system, name)

        update = self.timeline_service.build_timeline(body, name, system, data, disposition)
        draft = self._stage_body(body, system, data, path)

        self.timeline_service.commit(body, update)
        draft.apply(body)
        return body

    def build_reference_point(
        self,
        name: str,
        system: PlanetarySystem,
        existing_body: Optional[Body],
        data: AttributeReader,
        path: str = "",
        disposition: Disposition = Disposition.ADD,
    ) -> Body:
        """Create an invisible, massless reference point (e.g. a barycenter)."""
        modify = disposition == Disposition.MODIFY and existing_body is not None
        body = existing_body if modify else self._new_body(system, name)

        update = self.timeline_service.build_timeline(body, name, system, data, disposition)

        draft = BodyDraft.from_body(body)
        draft.semi_axes = (1.0, 1.0, 1.0)
        draft.classification = BodyClassification.INVISIBLE
        draft.visible = False
        draft.visible_as_point = False
        draft.clickable = False

        self.timeline_service.commit(body, update)
        draft.apply(body)
        return body

    def _stage_body(
        self,
        body: Body,
        system: PlanetarySystem,
        data: AttributeReader,
        path: str,
    ) -> BodyDraft:
        draft = BodyDraft.from_body(body)

        # Radius, SemiAxes and Oblateness interact for backward
        # compatibility: SemiAxes overrides a bare Radius, Radius scales
        # SemiAxes when both are given, and Oblateness only applies
        # without SemiAxes.
        radius = max(draft.semi_axes)
        specified_radius = data.get_number("Radius")
        if specified_radius is not None:
            radius = specified_radius
            draft.semi_axes = (radius, radius, radius)

        semi_axes = data.get_vector("SemiAxes")
        if semi_axes is not None:
            if specified_radius is not None:
                semi_axes = tuple(c * specified_radius for c in semi_axes)
            # Swap y and z into the internal y-up convention
            draft.semi_axes = (semi_axes[0], semi_axes[2], semi_axes[1])
        else:
            oblateness = data.get_number("Oblateness")
            if oblateness is not None:
                r = max(draft.semi_axes)
                draft.semi_axes = (r, r * (1.0 - oblateness), r)

        class_name = data.get_string("Class")
        if class_name is not None:
            classification = BodyClassification.parse(class_name)
            if classification is None:
                logger.warning(f"Unknown class '{class_name}' for {body.name or 'body'}")
            else:
                draft.classification = classification

        if draft.classification == BodyClassification.UNKNOWN:
            draft.classification = self.infer_classification(system, radius)

        if draft.classification == BodyClassification.INVISIBLE:
            draft.visible = False
        if draft.classification in _NOT_POINT_CLASSES:
            draft.visible_as_point = False

        info_url = data.get_string("InfoURL")
        if info_url is not None:
            draft.info_url = self.resolve_info_url(info_url, path)

        draft.albedo = data.get_number("Albedo", draft.albedo)
        draft.mass = data.get_number("Mass", draft.mass)
        draft.orientation = data.get_rotation("Orientation", draft.orientation)

        draft.surface = fill_surface(data, body.surface, path)

        mesh = data.get_string("Mesh")
        if mesh is not None:
            center = data.get_vector("MeshCenter", (0.0, 0.0, 0.0))
            draft.model = ResourceRef(
                name=mesh, path=path, params={"center_x": center[0], "center_y": center[1], "center_z": center[2]}
            )

        if "Atmosphere" in data:
            atmosphere_data = data.get_map("Atmosphere")
            if atmosphere_data is None:
                raise InvalidStructure("Atmosphere must be an assoc array")
            base = body.atmosphere if body.atmosphere is not None else Atmosphere()
            draft.atmosphere = fill_atmosphere(atmosphere_data, base, path)

        if "Rings" in data:
            rings_data = data.get_map("Rings")
            if rings_data is None:
                raise InvalidStructure("Rings must be an assoc array")
            base = body.rings if body.rings is not None else RingSystem()
            draft.rings = fill_rings(rings_data, base, path)

        draft.clickable = data.get_boolean("Clickable", draft.clickable)
        draft.visible = data.get_boolean("Visible", draft.visible)
        draft.orbit_color = data.get_color("OrbitColor", draft.orbit_color)

        return draft

    @staticmethod
    def infer_classification(system: PlanetarySystem, radius: float) -> BodyClassification:
        """Guess a classification from the parent and the radius."""
        if system.primary_body is not None:
            return BodyClassification.MOON if radius > MOON_MIN_RADIUS else BodyClassification.SPACECRAFT
        return BodyClassification.ASTEROID if radius < PLANET_MIN_RADIUS else BodyClassification.PLANET

    @staticmethod
    def resolve_info_url(info_url: str, path: str) -> str:
        """Make a relative InfoURL relative to the catalog directory."""
        if ":" in info_url:
            return info_url
        if len(path) > 1 and path[1] == ":":
            # Absolute Windows path
            return f"file:///{path}/{info_url}"
        if path:
            return f"{path}/{info_url}"
        return info_url

    def build_surface(self, data: AttributeReader, path: str = "") -> Surface:
        """Standalone surface definition, used for alternate surfaces."""
        return fill_surface(data, Surface(), path)

    def build_location(self, name: str, data: AttributeReader, body: Body) -> Location:
        """Create a location on body from planetocentric coordinates."""
        longitude, latitude, altitude = data.get_vector("LongLat", (0.0, 0.0, 0.0))
        position = body.planetocentric_to_cartesian(longitude, latitude, altitude)

        location = Location(
            name=name,
            parent=body,
            position=tuple(float(c) for c in position),
            size=data.get_number("Size", 1.0),
            importance=data.get_number("Importance", -1.0),
        )
        feature_type = data.get_string("Type")
        if feature_type is not None:
            location.feature_type = parse_feature_type(feature_type)
        return location
