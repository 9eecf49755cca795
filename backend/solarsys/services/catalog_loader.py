"""Loader for solar system catalog (.ssc) files.

A catalog is a sequence of entries:

    [Add | Replace | Modify] [Body | ReferencePoint | Location | AltSurface]
    "Name" "Parent/Path"
    {
        ...
    }

A malformed entry header or property block stops the load. Any other
problem rejects only the entry it occurs in; loading continues with the
next one.
"""

import logging
from typing import Optional, TextIO, Union

from solarsys.core.config import LoaderSettings, get_settings
from solarsys.core.errors import CatalogSyntaxError, EntryError, InvalidStructure, ParentNotFound
from solarsys.models import (
    Body,
    Diagnostic,
    Disposition,
    LoadResult,
    PlanetarySystem,
    Severity,
    Star,
    Universe,
)
from solarsys.parser import Tokenizer, TokenType, ValueParser

from .attribute_reader import AttributeReader
from .body_service import BodyService
from .frame_service import FrameService
from .timeline_service import TimelineService
from .trajectory_service import TrajectoryService

logger = logging.getLogger(__name__)


class CatalogLoader:
    """Applies catalog entries to a Universe."""

    def __init__(self, universe: Universe, settings: Optional[LoaderSettings] = None):
        self.universe = universe
        self.settings = settings or get_settings()

        self.frame_service = FrameService(universe, self.settings)
        self.trajectory_service = TrajectoryService(self.settings)
        self.timeline_service = TimelineService(
            universe,
            frame_service=self.frame_service,
            trajectory_service=self.trajectory_service,
            settings=self.settings,
        )
        self.body_service = BodyService(universe, self.timeline_service, self.settings)

    def load(self, source: Union[str, TextIO], directory: str = "") -> LoadResult:
        """
        Read every entry of a catalog and apply it to the universe.

        Args:
            source: Catalog text or an open text stream
            directory: Directory the catalog came from; recorded with
                texture and mesh references and used for relative InfoURLs

        Returns:
            LoadResult with success False if a syntax error stopped the load
        """
        result = LoadResult()
        tokenizer = Tokenizer(source)
        parser = ValueParser(tokenizer)

        try:
            while tokenizer.next_token() != TokenType.END:
                self._load_entry(tokenizer, parser, directory, result)
        except CatalogSyntaxError as e:
            result.success = False
            self._report(result, Severity.ERROR, e.line_number, str(e), error_type=type(e).__name__)

        logger.info(
            f"Catalog loaded: {result.entries_applied} entries applied, "
            f"{result.entries_rejected} rejected, {len(result.warnings)} warnings"
        )
        return result

    def _load_entry(self, tokenizer: Tokenizer, parser: ValueParser, directory: str, result: LoadResult) -> None:
        tokenizer.push_back()

        disposition = Disposition.ADD
        item_type = "Body"

        if tokenizer.next_token() == TokenType.NAME:
            token_disposition = Disposition.from_token(tokenizer.name_value)
            if token_disposition is not None:
                disposition = token_disposition
            else:
                tokenizer.push_back()
        else:
            tokenizer.push_back()

        if tokenizer.next_token() == TokenType.NAME:
            item_type = tokenizer.name_value
        else:
            tokenizer.push_back()

        if tokenizer.next_token() != TokenType.STRING:
            raise CatalogSyntaxError("object name expected", tokenizer.line_number)
        name = tokenizer.string_value
        line_number = tokenizer.line_number

        if tokenizer.next_token() != TokenType.STRING:
            raise CatalogSyntaxError(f"bad parent object name for {name}", tokenizer.line_number)
        parent_name = tokenizer.string_value

        if tokenizer.next_token() != TokenType.BEGIN_GROUP:
            raise CatalogSyntaxError(f"'{{' expected after {parent_name} {name}", tokenizer.line_number)
        tokenizer.push_back()
        values = parser.read_value()
        if not isinstance(values, dict):
            raise CatalogSyntaxError(f"bad object definition for {name}", line_number)

        data = AttributeReader(values)
        try:
            if item_type in ("Body", "ReferencePoint"):
                self._load_body(item_type, disposition, name, parent_name, data, directory, line_number, result)
            elif item_type == "AltSurface":
                self._load_alt_surface(name, parent_name, data, directory)
            elif item_type == "Location":
                self._load_location(disposition, name, parent_name, data)
            else:
                self._report(
                    result,
                    Severity.ERROR,
                    line_number,
                    f"unknown object type '{item_type}' for {parent_name} {name}",
                    name,
                    parent_name,
                )
                result.entries_rejected += 1
                return
        except EntryError as e:
            self._report(
                result,
                Severity.ERROR,
                line_number,
                f"error loading {parent_name} {name}: {e}",
                name,
                parent_name,
                type(e).__name__,
            )
            result.entries_rejected += 1
            return

        result.entries_applied += 1

    def _resolve_parent_system(self, parent_name: str) -> PlanetarySystem:
        """
        Planetary system that a new child of parent_name belongs to.

        A body's satellite system is created only when a satellite is
        actually inserted; until then a detached system stands in for it.
        """
        parent = self.universe.find_path(parent_name)
        if isinstance(parent, Star):
            return self.universe.get_or_create_solar_system(parent).planets
        if isinstance(parent, Body):
            if parent.satellites is not None:
                return parent.satellites
            return PlanetarySystem(primary_body=parent)
        raise ParentNotFound(f"parent body '{parent_name}' not found")

    def _resolve_parent_body(self, parent_name: str) -> Body:
        parent = self.universe.find_path(parent_name)
        if not isinstance(parent, Body):
            raise ParentNotFound(f"parent body '{parent_name}' not found")
        return parent

    @staticmethod
    def _attach(system: PlanetarySystem) -> None:
        primary = system.primary_body
        if primary is not None and primary.satellites is None:
            primary.satellites = system

    def _load_body(
        self,
        item_type: str,
        disposition: Disposition,
        name: str,
        parent_name: str,
        data: AttributeReader,
        directory: str,
        line_number: int,
        result: LoadResult,
    ) -> None:
        system = self._resolve_parent_system(parent_name)

        existing = system.find(name)
        if existing is None and disposition != Disposition.ADD:
            # Nothing to replace or modify
            disposition = Disposition.ADD
        elif existing is not None and disposition == Disposition.ADD:
            self._report(
                result,
                Severity.WARNING,
                line_number,
                f"duplicate definition of {parent_name} {name}",
                name,
                parent_name,
            )

        if item_type == "ReferencePoint":
            build = self.body_service.build_reference_point
        else:
            build = self.body_service.build_body
        body = build(name, system, existing, data, directory, disposition)

        if disposition == Disposition.MODIFY:
            logger.debug(f"Modified {parent_name}/{name}")
        elif disposition == Disposition.REPLACE:
            system.replace_body(existing, body)
            logger.debug(f"Replaced {parent_name}/{name}")
        else:
            self._attach(system)
            system.add_body(body)
            logger.debug(f"Added {parent_name}/{name}")

    def _load_alt_surface(self, name: str, parent_name: str, data: AttributeReader, directory: str) -> None:
        body = self._resolve_parent_body(parent_name)
        surface = self.body_service.build_surface(data, directory)
        body.add_alternate_surface(name, surface)

    def _load_location(self, disposition: Disposition, name: str, parent_name: str, data: AttributeReader) -> None:
        body = self._resolve_parent_body(parent_name)
        if "LongLat" in data and data.get_vector("LongLat") is None:
            raise InvalidStructure(f"LongLat of location {name} must be a vector")

        location = self.body_service.build_location(name, data, body)
        existing = body.find_location(name)
        if existing is not None and disposition != Disposition.ADD:
            body.locations[body.locations.index(existing)] = location
        else:
            body.add_location(location)

    def _report(
        self,
        result: LoadResult,
        severity: Severity,
        line_number: int,
        message: str,
        entry_name: str = "",
        parent_name: str = "",
        error_type: str = "",
    ) -> None:
        diagnostic = Diagnostic(
            severity=severity,
            line_number=line_number,
            message=message,
            entry_name=entry_name,
            parent_name=parent_name,
            error_type=error_type,
        )
        result.diagnostics.append(diagnostic)
        if severity == Severity.WARNING:
            logger.warning(str(diagnostic))
        else:
            logger.error(str(diagnostic))


def load_solar_system_objects(
    source: Union[str, TextIO],
    universe: Universe,
    directory: str = "",
    settings: Optional[LoaderSettings] = None,
) -> LoadResult:
    """Load a catalog into universe with a one-off CatalogLoader."""
    return CatalogLoader(universe, settings).load(source, directory)
