"""Timelines: time-partitioned orbit and rotation descriptions of a body."""

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .frames import ReferenceFrame
from .orbits import Orbit
from .rotations import RotationModel


@dataclass(frozen=True, eq=False)
class TimelinePhase:
    """
    One interval of a body's timeline.

    Times are Julian days (TDB); begin may be -inf and end may be +inf.
    """
    begin: float
    end: float
    orbit_frame: ReferenceFrame
    orbit: Orbit
    body_frame: ReferenceFrame
    rotation_model: RotationModel

    def __post_init__(self):
        if not self.end > self.begin:
            raise ValueError(f"Timeline phase must end after it begins ({self.begin} >= {self.end})")

    def includes(self, jd: float) -> bool:
        return self.begin <= jd < self.end


class Timeline:
    """Ordered, contiguous, non-overlapping sequence of phases."""

    def __init__(self, phases: Optional[List[TimelinePhase]] = None):
        self._phases: List[TimelinePhase] = []
        for phase in phases or []:
            self.append_phase(phase)

    def append_phase(self, phase: TimelinePhase) -> None:
        """
        Append a phase to the end of the timeline.

        Raises:
            ValueError: If the phase does not begin where the last one ends
        """
        if self._phases and self._phases[-1].end != phase.begin:
            raise ValueError(
                f"Timeline phase begins at {phase.begin}, previous phase ends at {self._phases[-1].end}"
            )
        self._phases.append(phase)

    @property
    def phases(self) -> List[TimelinePhase]:
        return list(self._phases)

    def phase_count(self) -> int:
        return len(self._phases)

    def __len__(self) -> int:
        return len(self._phases)

    def __iter__(self) -> Iterator[TimelinePhase]:
        return iter(self._phases)

    def __getitem__(self, index: int) -> TimelinePhase:
        return self._phases[index]

    @property
    def start_time(self) -> float:
        return self._phases[0].begin if self._phases else -math.inf

    @property
    def end_time(self) -> float:
        return self._phases[-1].end if self._phases else math.inf

    def find_phase(self, jd: float) -> Optional[TimelinePhase]:
        """Phase containing jd; times outside the timeline clamp to the first or last phase."""
        if not self._phases:
            return None
        if jd < self._phases[0].begin:
            return self._phases[0]
        for phase in self._phases:
            if phase.includes(jd):
                return phase
        return self._phases[-1]

    def __repr__(self) -> str:
        return f"Timeline({len(self._phases)} phases, {self.start_time} .. {self.end_time})"
