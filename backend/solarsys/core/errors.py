"""Exceptions raised while loading solar system catalogs.

Two tiers exist. CatalogSyntaxError means the token stream itself is
malformed and the whole load stops. EntryError subclasses are scoped to a
single catalog entry: the loader reports them and moves on.
"""


class CatalogError(Exception):
    """Base exception for catalog loading errors."""

    pass


class CatalogSyntaxError(CatalogError):
    """Raised when the catalog text cannot be parsed into entries."""

    def __init__(self, message: str, line_number: int = 0):
        super().__init__(message)
        self.line_number = line_number


class EntryError(CatalogError):
    """Raised when a single catalog entry cannot be applied."""

    pass


class ParentNotFound(EntryError):
    """Raised when the parent path of an entry does not resolve."""

    pass


class InvalidFrameDescriptor(EntryError):
    """Raised when a reference frame description cannot be turned into a frame."""

    pass


class FrameTooDeep(EntryError):
    """Raised when a newly supplied frame is nested too deep (probably circular)."""

    pass


class BarycenterMismatch(EntryError):
    """Raised when the orbit barycenter lies outside the body's star system."""

    pass


class InvalidStructure(EntryError):
    """Raised when a nested property group has the wrong shape."""

    pass


class TimelineError(EntryError):
    """Base exception for timeline construction errors."""

    pass


class MisplacedBeginning(TimelineError):
    """Raised when Beginning appears on a timeline phase other than the first."""

    pass


class MissingEnding(TimelineError):
    """Raised when a timeline phase other than the last has no Ending."""

    pass


class MissingOrbit(TimelineError):
    """Raised when a timeline phase has no orbit."""

    pass


class InvalidTimeline(TimelineError):
    """Raised when a Timeline value is not an array of property groups."""

    pass


class NoTimelineData(TimelineError):
    """Raised when a new body definition does not define a timeline."""

    pass
