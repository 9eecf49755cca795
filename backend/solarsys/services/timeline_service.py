"""Timeline construction for bodies.

Two forms are supported. An explicit ``Timeline`` array lists every phase
and always replaces the body's timeline. Without one, the orbit, rotation
and frames written directly in the entry describe a single phase; under
Modify those fields override the matching parts of an existing one-phase
timeline individually.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from solarsys.core.config import LoaderSettings, get_settings
from solarsys.core.errors import (
    BarycenterMismatch,
    FrameTooDeep,
    InvalidTimeline,
    MisplacedBeginning,
    MissingEnding,
    MissingOrbit,
    NoTimelineData,
    TimelineError,
)
from solarsys.models import (
    Body,
    ConstantOrientation,
    Disposition,
    FixedPosition,
    FrameTree,
    FrameType,
    PlanetarySystem,
    ReferenceFrame,
    Star,
    Timeline,
    TimelinePhase,
    Universe,
)

from .attribute_reader import AttributeReader
from .frame_service import FrameService
from .trajectory_service import TrajectoryService

logger = logging.getLogger(__name__)


@dataclass
class TimelineUpdate:
    """A timeline built for a body but not yet installed on it."""
    timeline: Optional[Timeline] = None  # None leaves the current timeline in place
    new_frames: List[Tuple[ReferenceFrame, FrameType]] = field(default_factory=list)


class TimelineService:
    """Builds body timelines from catalog entries."""

    def __init__(
        self,
        universe: Universe,
        frame_service: Optional[FrameService] = None,
        trajectory_service: Optional[TrajectoryService] = None,
        settings: Optional[LoaderSettings] = None,
    ):
        self.universe = universe
        self.settings = settings or get_settings()
        self.frame_service = frame_service or FrameService(universe, self.settings)
        self.trajectory_service = trajectory_service or TrajectoryService(self.settings)

    def orbit_barycenter(self, name: str, system: PlanetarySystem, data: Optional[AttributeReader] = None):
        """
        Object whose frame tree supplies a body's default frames.

        This is the object named by OrbitBarycenter if given, else the
        system's primary body, else its star.

        Raises:
            BarycenterMismatch: If the barycenter is missing or not in the
                system's star system
        """
        barycenter = system.primary_body if system.primary_body is not None else system.star
        barycenter_path = data.get_string("OrbitBarycenter") if data is not None else None
        if barycenter_path is not None:
            barycenter = self.universe.find_path(barycenter_path)
            if barycenter is None:
                raise BarycenterMismatch(f"OrbitBarycenter '{barycenter_path}' of {name} not found")

        if isinstance(barycenter, Body):
            barycenter_star = barycenter.star
        else:
            barycenter_star = barycenter

        if barycenter is None or barycenter_star is not system.star:
            raise BarycenterMismatch(f"OrbitBarycenter of {name} must be in same star system")
        return barycenter

    def parent_frame_tree(self, barycenter) -> FrameTree:
        if isinstance(barycenter, Star):
            return self.universe.get_or_create_solar_system(barycenter).frame_tree
        return barycenter.get_or_create_frame_tree()

    def build_timeline(
        self,
        body: Body,
        name: str,
        system: PlanetarySystem,
        data: AttributeReader,
        disposition: Disposition,
    ) -> TimelineUpdate:
        """
        Build the timeline an entry describes for body without installing it.

        Raises:
            TimelineError: If the entry's timeline fields are unusable
            BarycenterMismatch: If the default barycenter is outside the star system
            InvalidFrameDescriptor: If a frame cannot be created
        """
        barycenter = self.orbit_barycenter(name, system, data)
        default_frame = self.parent_frame_tree(barycenter).default_frame

        if "Timeline" in data:
            phases = data.get_array("Timeline")
            if phases is None:
                raise InvalidTimeline("Timeline must be an array")
            return self.build_timeline_from_array(phases, default_frame, system)

        return self._build_single_phase_timeline(body, name, system, data, disposition, default_frame)

    def build_timeline_from_array(
        self,
        phases: List[Any],
        default_frame: ReferenceFrame,
        system: Optional[PlanetarySystem] = None,
    ) -> TimelineUpdate:
        """Build a multi-phase timeline from an explicit Timeline array."""
        if not phases:
            raise InvalidTimeline("Timeline must contain at least one phase")

        timeline = Timeline()
        new_frames: List[Tuple[ReferenceFrame, FrameType]] = []
        previous_end = -math.inf

        for index, phase_value in enumerate(phases):
            if not isinstance(phase_value, dict):
                raise InvalidTimeline(f"Timeline phase {index + 1} is not a property group")

            try:
                phase, phase_frames = self.create_timeline_phase(
                    AttributeReader(phase_value),
                    default_frame,
                    is_first=index == 0,
                    is_last=index == len(phases) - 1,
                    previous_end=previous_end,
                    system=system,
                )
            except TimelineError as exc:
                raise type(exc)(f"Error in timeline phase {index + 1}: {exc}") from exc

            timeline.append_phase(phase)
            new_frames.extend(phase_frames)
            previous_end = phase.end

        return TimelineUpdate(timeline, new_frames)

    def create_timeline_phase(
        self,
        data: AttributeReader,
        default_frame: ReferenceFrame,
        is_first: bool,
        is_last: bool,
        previous_end: float,
        system: Optional[PlanetarySystem] = None,
    ) -> Tuple[TimelinePhase, List[Tuple[ReferenceFrame, FrameType]]]:
        """Build one phase of an explicit timeline."""
        # Beginning is optional for the first phase and not allowed for the
        # others, which always begin where the previous phase ends.
        beginning = data.get_date("Beginning")
        if beginning is not None and not is_first:
            raise MisplacedBeginning("Beginning can only be specified for initial phase of timeline")
        if beginning is None:
            beginning = previous_end

        ending = data.get_date("Ending")
        if ending is None:
            if not is_last:
                raise MissingEnding("Ending is required for all timeline phases other than the final one")
            ending = math.inf

        if not ending > beginning:
            raise InvalidTimeline("Phase ends before it begins")

        new_frames = []
        orbit_frame = default_frame
        if data.get_value("OrbitFrame") is not None:
            orbit_frame = self.frame_service.create_frame(data.get_value("OrbitFrame"))
            new_frames.append((orbit_frame, FrameType.POSITION))

        body_frame = default_frame
        if data.get_value("BodyFrame") is not None:
            body_frame = self.frame_service.create_frame(data.get_value("BodyFrame"))
            new_frames.append((body_frame, FrameType.ORIENTATION))

        # Planet units (AU, years) when the orbit frame is centered on a star
        use_planet_units = isinstance(orbit_frame.center, Star)
        orbit = self.trajectory_service.create_orbit(data, use_planet_units, system)
        if orbit is None:
            raise MissingOrbit("Missing orbit in timeline phase")

        rotation_model = self.trajectory_service.create_rotation_model(data, orbit.period)
        if rotation_model is None:
            rotation_model = ConstantOrientation()

        phase = TimelinePhase(beginning, ending, orbit_frame, orbit, body_frame, rotation_model)
        return phase, new_frames

    def _build_single_phase_timeline(
        self,
        body: Body,
        name: str,
        system: PlanetarySystem,
        data: AttributeReader,
        disposition: Disposition,
        default_frame: ReferenceFrame,
    ) -> TimelineUpdate:
        orbit_frame = body_frame = orbit = rotation_model = None
        beginning, ending = -math.inf, math.inf

        # Fields of an existing single-phase timeline are modified one at a
        # time; a multi-phase timeline is replaced outright.
        if disposition == Disposition.MODIFY and body.timeline is not None and len(body.timeline) == 1:
            phase = body.timeline[0]
            orbit_frame = phase.orbit_frame
            body_frame = phase.body_frame
            orbit = phase.orbit
            rotation_model = phase.rotation_model
            beginning, ending = phase.begin, phase.end

        overridden = False
        new_frames: List[Tuple[ReferenceFrame, FrameType]] = []

        if data.get_value("OrbitFrame") is not None:
            orbit_frame = self.frame_service.create_frame(data.get_value("OrbitFrame"))
            new_frames.append((orbit_frame, FrameType.POSITION))
            overridden = True

        if data.get_value("BodyFrame") is not None:
            body_frame = self.frame_service.create_frame(data.get_value("BodyFrame"))
            new_frames.append((body_frame, FrameType.ORIENTATION))
            overridden = True

        orbit_frame = orbit_frame or default_frame
        body_frame = body_frame or default_frame

        # Orbital elements are in AU and years when the orbit frame is
        # centered on a star, km and days otherwise.
        use_planet_units = isinstance(orbit_frame.center, Star)
        new_orbit = self.trajectory_service.create_orbit(data, use_planet_units, system)
        if new_orbit is not None:
            orbit = new_orbit
            overridden = True
        elif self.trajectory_service.describes_orbit(data):
            raise NoTimelineData(f"No valid orbit specified for object '{name}'")

        sync_period = orbit.period if orbit is not None else 0.0
        new_rotation = self.trajectory_service.create_rotation_model(data, sync_period)
        if new_rotation is not None:
            rotation_model = new_rotation
            overridden = True

        new_beginning = data.get_date("Beginning")
        new_ending = data.get_date("Ending")
        if new_beginning is not None:
            beginning = new_beginning
            overridden = True
        if new_ending is not None:
            ending = new_ending
            overridden = True

        if not overridden:
            if disposition == Disposition.MODIFY and body.timeline is not None:
                return TimelineUpdate()
            if not self.settings.synthesize_default_orbit:
                raise NoTimelineData(f"No timeline data given for new object '{name}'")

        if orbit is None:
            if not self.settings.synthesize_default_orbit or body.timeline is not None:
                raise NoTimelineData(f"No valid orbit specified for object '{name}'")
            logger.debug(f"No orbit given for {name}; placing it at the center of its orbit frame")
            orbit = FixedPosition()

        if rotation_model is None:
            # Uniform rotation synchronous with the orbit, as for most
            # natural satellites
            rotation_model = self.trajectory_service.create_default_rotation_model(orbit.period)

        if not ending > beginning:
            raise InvalidTimeline(f"Ending of {name} precedes its beginning")

        phase = TimelinePhase(beginning, ending, orbit_frame, orbit, body_frame, rotation_model)
        return TimelineUpdate(Timeline([phase]), new_frames)

    def commit(self, body: Body, update: TimelineUpdate) -> None:
        """
        Install a built timeline on body, then check its new frames.

        Raises:
            FrameTooDeep: If a new frame is nested too deep; body keeps its
                previous timeline
        """
        if update.timeline is None:
            return

        previous = body.timeline
        body.timeline = update.timeline
        try:
            self.frame_service.check_new_frames(body, update.new_frames)
        except FrameTooDeep:
            body.timeline = previous
            raise
