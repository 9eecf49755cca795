"""Reference frame construction and the frame-graph depth check."""

import logging
from typing import Any, List, Optional, Tuple

from solarsys.core.config import LoaderSettings, get_settings
from solarsys.core.errors import FrameTooDeep, InvalidFrameDescriptor
from solarsys.models import (
    Body,
    BodyFixedFrame,
    EclipticJ2000Frame,
    EquatorJ2000Frame,
    FrameType,
    FrameVector,
    MeanEquatorFrame,
    ReferenceFrame,
    TwoVectorFrame,
    Universe,
    VectorKind,
)

from .attribute_reader import AttributeReader

logger = logging.getLogger(__name__)

# Time at which a body's frames are looked up for the depth check
FRAME_CHECK_TIME = 0.0

_AXES = {"x", "y", "z", "-x", "-y", "-z"}


def nesting_depth(frame: ReferenceFrame, frame_type: FrameType, limit: int, depth: int = 0) -> int:
    """
    Count frame-to-frame indirections reachable from frame.

    Args:
        frame: Frame to start from
        frame_type: Whether position or orientation frames are followed
        limit: Maximum depth to explore
        depth: Depth of frame itself (used when recursing)

    Returns:
        Number of indirections, saturating at limit + 1 (which signals a
        chain too deep or circular)
    """
    if depth > limit:
        return limit + 1

    deepest = depth
    for obj, dep_type in frame.dependencies(frame_type):
        dep_type = dep_type or frame_type
        if isinstance(obj, ReferenceFrame):
            n = nesting_depth(obj, dep_type, limit, depth)
        else:
            n = _object_depth(obj, dep_type, limit, depth)
        if n > limit:
            return limit + 1
        deepest = max(deepest, n)
    return deepest


def _object_depth(obj: Any, frame_type: FrameType, limit: int, depth: int) -> int:
    """Depth contributed by the frames of obj; stars and bodies without timelines add nothing."""
    if depth > limit:
        return limit + 1
    if not isinstance(obj, Body):
        return depth

    deepest = depth
    orbit_frame = None
    if frame_type == FrameType.POSITION:
        orbit_frame = obj.orbit_frame_at(FRAME_CHECK_TIME)
        if orbit_frame is not None:
            deepest = nesting_depth(orbit_frame, frame_type, limit, depth + 1)
            if deepest > limit:
                return deepest

    body_frame = obj.body_frame_at(FRAME_CHECK_TIME)
    # A body frame shared with the orbit frame has already been walked
    if body_frame is not None and body_frame is not orbit_frame:
        deepest = max(deepest, nesting_depth(body_frame, frame_type, limit, depth + 1))
    return deepest


class FrameService:
    """Builds reference frames from catalog descriptors and checks their nesting."""

    def __init__(self, universe: Universe, settings: Optional[LoaderSettings] = None):
        self.universe = universe
        self.settings = settings or get_settings()

    def create_frame(self, descriptor: Any) -> ReferenceFrame:
        """
        Interpret a frame descriptor such as { EclipticJ2000 { Center "Sol/Earth" } }.

        Raises:
            InvalidFrameDescriptor: If the descriptor is malformed or names
                objects that do not exist
        """
        if not isinstance(descriptor, dict):
            raise InvalidFrameDescriptor("Reference frame must be a property group")

        data = AttributeReader(descriptor)
        for kind, factory in (
            ("EclipticJ2000", self._create_ecliptic_frame),
            ("EquatorJ2000", self._create_equator_frame),
            ("BodyFixed", self._create_body_fixed_frame),
            ("MeanEquator", self._create_mean_equator_frame),
            ("TwoVector", self._create_two_vector_frame),
        ):
            if kind in data:
                frame_data = data.get_map(kind)
                if frame_data is None:
                    raise InvalidFrameDescriptor(f"{kind} frame definition must be a property group")
                return factory(frame_data)

        kinds = ", ".join(descriptor.keys()) or "none"
        raise InvalidFrameDescriptor(f"Unknown reference frame type (found: {kinds})")

    def is_frame_circular(self, frame: ReferenceFrame, frame_type: FrameType) -> bool:
        limit = self.settings.max_frame_depth
        return nesting_depth(frame, frame_type, limit) > limit

    def check_new_frames(self, body: Body, frames: List[Tuple[ReferenceFrame, FrameType]]) -> None:
        """
        Verify frames newly given to body are not nested too deep.

        Raises:
            FrameTooDeep: If any frame exceeds the maximum nesting depth
        """
        for frame, frame_type in frames:
            if self.is_frame_circular(frame, frame_type):
                label = "Orbit" if frame_type == FrameType.POSITION else "Body"
                raise FrameTooDeep(f"{label} frame for {body.name} is nested too deep (probably circular)")

    def _resolve(self, data: AttributeReader, field: str, required: bool = True):
        path = data.get_string(field)
        if path is None:
            if required:
                raise InvalidFrameDescriptor(f"No {field.lower()} specified for reference frame")
            return None
        obj = self.universe.find_path(path)
        if obj is None:
            raise InvalidFrameDescriptor(f"{field} object '{path}' of reference frame not found")
        return obj

    def _create_ecliptic_frame(self, data: AttributeReader) -> ReferenceFrame:
        return EclipticJ2000Frame(self._resolve(data, "Center"))

    def _create_equator_frame(self, data: AttributeReader) -> ReferenceFrame:
        return EquatorJ2000Frame(self._resolve(data, "Center"))

    def _create_body_fixed_frame(self, data: AttributeReader) -> ReferenceFrame:
        center = self._resolve(data, "Center")
        return BodyFixedFrame(center, fixed_object=center)

    def _create_mean_equator_frame(self, data: AttributeReader) -> ReferenceFrame:
        center = self._resolve(data, "Center")
        equator_object = self._resolve(data, "Object", required=False) or center
        return MeanEquatorFrame(center, equator_object=equator_object, freeze_epoch=data.get_date("Freeze"))

    def _create_two_vector_frame(self, data: AttributeReader) -> ReferenceFrame:
        center = self._resolve(data, "Center")

        primary_data = data.get_map("Primary")
        secondary_data = data.get_map("Secondary")
        if primary_data is None:
            raise InvalidFrameDescriptor("Primary axis missing from two-vector frame")
        if secondary_data is None:
            raise InvalidFrameDescriptor("Secondary axis missing from two-vector frame")

        primary = self._create_frame_vector(primary_data, center)
        secondary = self._create_frame_vector(secondary_data, center)
        if primary.axis.lstrip("-") == secondary.axis.lstrip("-"):
            raise InvalidFrameDescriptor("Primary and secondary axes of two-vector frame must be orthogonal")

        return TwoVectorFrame(center, primary=primary, secondary=secondary)

    def _create_frame_vector(self, data: AttributeReader, center) -> FrameVector:
        axis = (data.get_string("Axis") or "").lower()
        if axis not in _AXES:
            raise InvalidFrameDescriptor(f"Bad axis '{axis}' in two-vector frame")

        for kind in (VectorKind.RELATIVE_POSITION, VectorKind.RELATIVE_VELOCITY):
            vector_data = data.get_map(kind.value)
            if vector_data is not None:
                observer = self._resolve(vector_data, "Observer", required=False) or center
                target = self._resolve(vector_data, "Target")
                return FrameVector(kind, axis, observer=observer, target=target)

        vector_data = data.get_map(VectorKind.CONSTANT_VECTOR.value)
        if vector_data is not None:
            vector = vector_data.get_vector("Vector")
            if vector is None:
                raise InvalidFrameDescriptor("Vector missing from constant vector")
            frame_value = vector_data.get_value("Frame")
            frame = self.create_frame(frame_value) if frame_value is not None else EclipticJ2000Frame(center)
            return FrameVector(VectorKind.CONSTANT_VECTOR, axis, vector=vector, frame=frame)

        raise InvalidFrameDescriptor("Bad two-vector frame direction")
