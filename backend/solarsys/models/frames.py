"""Reference frames.

A frame names a center object (a Star or a Body) and, depending on its
kind, further objects that fix its axes. Frames are immutable and shared
by reference between timeline phases; the nesting-depth walk over the
frame graph lives in solarsys.services.frame_service.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple, Union


class FrameType(Enum):
    """What a frame is used to determine."""
    POSITION = "position"
    ORIENTATION = "orientation"


@dataclass(frozen=True, eq=False)
class ReferenceFrame:
    """Base class for all reference frames."""
    center: Any  # Star or Body

    kind_name = "ReferenceFrame"

    def dependencies(self, frame_type: FrameType) -> List[Tuple[Any, FrameType]]:
        """Objects whose own frames this frame is defined through."""
        return [(self.center, frame_type)]

    def __repr__(self) -> str:
        return f"{self.kind_name}(center={getattr(self.center, 'name', self.center)!r})"


@dataclass(frozen=True, eq=False, repr=False)
class EclipticJ2000Frame(ReferenceFrame):
    kind_name = "EclipticJ2000"


@dataclass(frozen=True, eq=False, repr=False)
class EquatorJ2000Frame(ReferenceFrame):
    kind_name = "EquatorJ2000"


@dataclass(frozen=True, eq=False, repr=False)
class BodyFixedFrame(ReferenceFrame):
    """Axes turn with fixed_object (usually the center itself)."""
    fixed_object: Any = None

    kind_name = "BodyFixed"

    def dependencies(self, frame_type: FrameType) -> List[Tuple[Any, FrameType]]:
        return [(self.center, frame_type), (self.fixed_object or self.center, FrameType.ORIENTATION)]


@dataclass(frozen=True, eq=False, repr=False)
class MeanEquatorFrame(ReferenceFrame):
    """Axes follow the equator of equator_object, optionally frozen at a date."""
    equator_object: Any = None
    freeze_epoch: Optional[float] = None

    kind_name = "MeanEquator"

    def dependencies(self, frame_type: FrameType) -> List[Tuple[Any, FrameType]]:
        return [(self.center, frame_type), (self.equator_object or self.center, FrameType.ORIENTATION)]


class VectorKind(Enum):
    RELATIVE_POSITION = "RelativePosition"
    RELATIVE_VELOCITY = "RelativeVelocity"
    CONSTANT_VECTOR = "ConstantVector"


@dataclass(frozen=True, eq=False)
class FrameVector:
    """One direction of a two-vector frame."""
    kind: VectorKind
    axis: str  # "x", "-y", ...
    observer: Any = None
    target: Any = None
    vector: Tuple[float, float, float] = (0.0, 0.0, 1.0)
    frame: Optional[ReferenceFrame] = None

    def dependencies(self) -> List[Tuple[Any, FrameType]]:
        if self.kind == VectorKind.CONSTANT_VECTOR:
            return [(self.frame, None)] if self.frame is not None else []
        return [(obj, FrameType.POSITION) for obj in (self.observer, self.target) if obj is not None]


@dataclass(frozen=True, eq=False, repr=False)
class TwoVectorFrame(ReferenceFrame):
    """Axes built from a primary and a secondary direction."""
    primary: Optional[FrameVector] = None
    secondary: Optional[FrameVector] = None

    kind_name = "TwoVector"

    def dependencies(self, frame_type: FrameType) -> List[Tuple[Any, FrameType]]:
        deps = [(self.center, frame_type)]
        for vector in (self.primary, self.secondary):
            if vector is not None:
                deps.extend(vector.dependencies())
        return deps


class FrameTree:
    """Default reference frame for objects orbiting a star or body."""

    def __init__(self, root: Any):
        self.root = root
        self.default_frame = EclipticJ2000Frame(root)

    def __repr__(self) -> str:
        return f"FrameTree(root={getattr(self.root, 'name', self.root)!r})"


Frame = Union[EclipticJ2000Frame, EquatorJ2000Frame, BodyFixedFrame, MeanEquatorFrame, TwoVectorFrame]
