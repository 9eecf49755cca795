"""Models package."""

from .body import Body, BodyClassification, PlanetarySystem
from .diagnostics import Diagnostic, LoadResult, Severity
from .disposition import Disposition
from .frames import (
    BodyFixedFrame,
    EclipticJ2000Frame,
    EquatorJ2000Frame,
    FrameTree,
    FrameType,
    FrameVector,
    MeanEquatorFrame,
    ReferenceFrame,
    TwoVectorFrame,
    VectorKind,
)
from .location import FeatureType, Location, parse_feature_type
from .orbits import EllipticalOrbit, FixedPosition, SynchronousOrbit
from .rotations import ConstantOrientation, PrecessingRotation, UniformRotation
from .star import Star
from .surface import AppearanceFlags, Atmosphere, ResourceRef, RingSystem, Surface, TextureFlags
from .timeline import Timeline, TimelinePhase
from .universe import SolarSystem, Universe

__all__ = [
    "Body",
    "BodyClassification",
    "PlanetarySystem",
    "Diagnostic",
    "LoadResult",
    "Severity",
    "Disposition",
    # Frames
    "BodyFixedFrame",
    "EclipticJ2000Frame",
    "EquatorJ2000Frame",
    "FrameTree",
    "FrameType",
    "FrameVector",
    "MeanEquatorFrame",
    "ReferenceFrame",
    "TwoVectorFrame",
    "VectorKind",
    # Surface features
    "FeatureType",
    "Location",
    "parse_feature_type",
    # Orbits and rotation models
    "EllipticalOrbit",
    "FixedPosition",
    "SynchronousOrbit",
    "ConstantOrientation",
    "PrecessingRotation",
    "UniformRotation",
    "Star",
    "AppearanceFlags",
    "Atmosphere",
    "ResourceRef",
    "RingSystem",
    "Surface",
    "TextureFlags",
    "Timeline",
    "TimelinePhase",
    "SolarSystem",
    "Universe",
]
