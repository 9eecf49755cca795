"""Tests for loading catalogs into a universe."""

import io
import logging

import pytest

from solarsys import load_solar_system_objects
from solarsys.models import BodyClassification, FeatureType, Severity


def frame_chain_catalog(length):
    """Bodies C0..C{length}, each orbiting in a frame centered on the previous one."""
    entries = ['"C0" "Sol" { FixedPosition [ 1 0 0 ] }']
    for i in range(1, length + 1):
        entries.append(
            f'"C{i}" "Sol" {{ OrbitFrame {{ EclipticJ2000 {{ Center "Sol/C{i - 1}" }} }} '
            f'FixedPosition [ 1000 0 0 ] }}'
        )
    return "\n".join(entries)


class TestDispositions:
    """Test Add, Replace and Modify."""

    def test_add_satellite(self, loader, universe, earth):
        """Test adding a moon with no orbit data."""
        result = loader.load('"Luna" "Sol/Earth" { Radius 1737.4 }')

        assert result.success
        assert result.entries_applied == 1
        assert result.diagnostics == []

        luna = universe.find_path("Sol/Earth/Luna")
        assert luna is not None
        assert luna.radius == 1737.4
        assert luna.classification == BodyClassification.MOON
        assert len(luna.timeline) == 1
        assert luna.timeline[0].orbit_frame.center is earth
        assert earth.satellites.find("Luna") is luna

    def test_modify(self, loader, universe, earth):
        """Test changing one property of an existing body."""
        phase = earth.timeline[0]
        result = loader.load('Modify "Earth" "Sol" { Albedo 0.1 }')

        assert result.success and result.entries_applied == 1
        assert universe.find_path("Sol/Earth") is earth
        assert earth.albedo == 0.1
        assert earth.radius == pytest.approx(6378.14)
        assert earth.timeline[0] is phase

    def test_modify_keeps_surface(self, loader, universe):
        """Test that Modify leaves unmentioned surface fields alone."""
        loader.load('"Mars" "Sol" { Radius 3396 Color [ 1 0.75 0.7 ] Texture "mars.jpg" }')
        mars = universe.find_path("Sol/Mars")

        result = loader.load('Modify "Mars" "Sol" { NightTexture "n.jpg" }')

        assert result.success and result.diagnostics == []
        assert universe.find_path("Sol/Mars") is mars
        assert mars.surface.color == (1.0, 0.75, 0.7, 1.0)
        assert mars.surface.base_texture.name == "mars.jpg"
        assert mars.surface.night_texture.name == "n.jpg"
        assert mars.radius == 3396.0

    def test_modify_moon_albedo(self, loader, universe, earth):
        """Test an Add then Modify of a moon's albedo."""
        loader.load('Add Body "Luna" "Sol/Earth" { Class "Moon" Radius 1737.4 }')
        luna = universe.find_path("Sol/Earth/Luna")
        timeline = luna.timeline

        result = loader.load('Modify "Luna" "Sol/Earth" { Albedo 0.12 }')

        assert result.entries_applied == 1 and result.diagnostics == []
        assert universe.find_path("Sol/Earth/Luna") is luna
        assert luna.albedo == 0.12
        assert luna.classification == BodyClassification.MOON
        assert luna.radius == 1737.4
        assert luna.timeline is timeline
        assert len(earth.satellites) == 1

    def test_duplicate_add(self, loader, universe, sol, earth):
        """Test that a second Add inserts another body and warns."""
        result = loader.load('"Earth" "Sol" { Radius 6000 }')

        planets = universe.get_solar_system(sol).planets
        assert [b.name for b in planets].count("Earth") == 2
        assert len(result.warnings) == 1
        assert result.warnings[0].entry_name == "Earth"
        assert result.entries_applied == 1
        assert universe.find_path("Sol/Earth") is earth

    def test_replace(self, loader, universe, sol, earth):
        """Test that Replace substitutes a new body in the same slot."""
        loader.load('"Mars" "Sol" { Radius 3396 }')
        result = loader.load('Replace "Earth" "Sol" { Radius 6000 }')

        planets = universe.get_solar_system(sol).planets
        assert result.success and result.diagnostics == []
        assert [b.name for b in planets] == ["Earth", "Mars"]
        replacement = universe.find_path("Sol/Earth")
        assert replacement is not earth
        assert replacement.radius == 6000.0
        assert replacement.albedo == 0.5

    @pytest.mark.parametrize("disposition", ["Modify", "Replace"])
    def test_missing_target_is_added(self, loader, universe, disposition):
        """Test that Modify and Replace of an unknown body add it."""
        result = loader.load(f'{disposition} "Mars" "Sol" {{ Radius 3396 }}')

        assert result.entries_applied == 1
        assert result.warnings == []
        assert universe.find_path("Sol/Mars").radius == 3396.0

    def test_explicit_item_type(self, loader, universe):
        """Test Body and ReferencePoint item types."""
        result = loader.load("""
            Add Body "Mars" "Sol" { Radius 3396 }
            ReferencePoint "EMB" "Sol" { FixedPosition [ 1 0 0 ] }
        """)

        assert result.entries_applied == 2
        emb = universe.find_path("Sol/EMB")
        assert emb.classification == BodyClassification.INVISIBLE
        assert emb.visible is False


class TestRejectedEntries:
    """Test entries that fail without stopping the load."""

    def test_missing_ending(self, loader, universe):
        """Test that a bad timeline prevents insertion."""
        result = loader.load("""
            "Probe" "Sol"
            {
                Timeline [
                    { FixedPosition [ 1 0 0 ] }
                    { FixedPosition [ 2 0 0 ] }
                ]
            }
        """)

        assert result.success
        assert result.entries_applied == 0
        assert result.entries_rejected == 1
        assert result.errors[0].error_type == "MissingEnding"
        assert result.errors[0].line_number == 2
        assert universe.find_path("Sol/Probe") is None

    @pytest.mark.parametrize("orbit", [
        "EllipticalOrbit { SemiMajorAxis 1.52 }",
        "EllipticalOrbit { Period 1.88 }",
        "EllipticalOrbit { PericenterDistance 1 Period 10 Eccentricity 1 }",
        "FixedPosition { Planetographic [ 0 0 0 ] }",
        "LongLat [ 10 20 0 ]",
    ])
    def test_unusable_orbit(self, loader, universe, orbit):
        """Test that an orbit that cannot be built rejects the body."""
        result = loader.load(f'"Mars" "Sol" {{ Radius 3396 {orbit} }}')

        assert result.entries_applied == 0
        assert result.entries_rejected == 1
        assert result.errors[0].error_type == "NoTimelineData"
        assert result.errors[0].entry_name == "Mars"
        assert universe.find_path("Sol/Mars") is None

    def test_unusable_orbit_in_modify(self, loader, earth):
        """Test that Modify with an unusable orbit keeps the old one."""
        timeline = earth.timeline
        result = loader.load('Modify "Earth" "Sol" { Albedo 0.9 EllipticalOrbit { Period 1 } }')

        assert result.entries_rejected == 1
        assert result.errors[0].error_type == "NoTimelineData"
        assert earth.albedo == 0.3
        assert earth.timeline is timeline

    def test_rejected_modify_is_atomic(self, loader, earth):
        """Test that a rejected Modify changes nothing."""
        timeline = earth.timeline
        result = loader.load("""
            Modify "Earth" "Sol"
            {
                Albedo 0.9
                Radius 1
                Timeline [
                    { Beginning 2451545 Ending 2451600 FixedPosition [ 0 0 0 ] }
                    { Beginning 2451600 FixedPosition [ 0 0 0 ] }
                ]
            }
        """)

        assert result.entries_rejected == 1
        assert result.errors[0].error_type == "MisplacedBeginning"
        assert earth.albedo == 0.3
        assert earth.radius == pytest.approx(6378.14)
        assert earth.timeline is timeline

    def test_parent_not_found(self, loader, universe):
        """Test that an unknown parent rejects the entry and loading continues."""
        result = loader.load("""
            "Phobos" "Sol/Mars" { Radius 11 }
            "Mars" "Sol" { Radius 3396 }
        """)

        assert result.success
        assert result.entries_rejected == 1
        assert result.entries_applied == 1
        assert result.errors[0].error_type == "ParentNotFound"
        assert result.errors[0].parent_name == "Sol/Mars"
        assert universe.find_path("Sol/Mars") is not None

    def test_unknown_item_type(self, loader, universe):
        """Test that an unknown item type is reported and skipped."""
        result = loader.load("""
            Spaceship "Enterprise" "Sol" { Radius 0.3 }
            "Mars" "Sol" { Radius 3396 }
        """)

        assert result.success
        assert result.entries_rejected == 1
        assert "Spaceship" in result.errors[0].message
        assert universe.find_path("Sol/Enterprise") is None
        assert universe.find_path("Sol/Mars") is not None

    def test_atmosphere_not_a_group(self, loader, universe):
        """Test that a malformed Atmosphere rejects the body."""
        result = loader.load('"Venus" "Sol" { Radius 6051.8 Atmosphere 90 }')

        assert result.errors[0].error_type == "InvalidStructure"
        assert universe.find_path("Sol/Venus") is None

    def test_diagnostics_are_logged(self, loader, caplog):
        """Test that diagnostics also go to the log."""
        with caplog.at_level(logging.WARNING, logger="solarsys.services.catalog_loader"):
            loader.load("""
                "Earth" "Sol" { Radius 6000 }
                "Phobos" "Sol/Mars" { Radius 11 }
            """)

        levels = [record.levelno for record in caplog.records]
        assert logging.WARNING in levels
        assert logging.ERROR in levels


class TestFrameDepth:
    """Test the maximum frame nesting depth."""

    def test_depth_at_limit_is_accepted(self, empty_universe, settings):
        """Test a chain of frames exactly at the maximum depth."""
        result = load_solar_system_objects(frame_chain_catalog(50), empty_universe, settings=settings)

        assert result.success
        assert result.entries_rejected == 0
        assert empty_universe.find_path("Sol/C50") is not None

    def test_depth_over_limit_is_rejected(self, empty_universe, settings):
        """Test that one more level of nesting is rejected."""
        result = load_solar_system_objects(frame_chain_catalog(51), empty_universe, settings=settings)

        assert result.entries_applied == 51
        assert result.entries_rejected == 1
        assert result.errors[0].error_type == "FrameTooDeep"
        assert result.errors[0].entry_name == "C51"
        assert empty_universe.find_path("Sol/C51") is None

    def test_circular_frame(self, loader, earth):
        """Test that a planet cannot orbit in a frame centered on its own moon."""
        timeline = earth.timeline
        result = loader.load("""
            "Luna" "Sol/Earth" { Radius 1737.4 }
            Modify "Earth" "Sol" { OrbitFrame { EclipticJ2000 { Center "Sol/Earth/Luna" } } }
        """)

        assert result.entries_applied == 1
        assert result.entries_rejected == 1
        assert result.errors[0].error_type == "FrameTooDeep"
        assert result.errors[0].entry_name == "Earth"
        assert earth.timeline is timeline


class TestSyntaxErrors:
    """Test errors that stop the load."""

    def test_syntax_error_stops_load(self, loader, universe):
        """Test that entries after a syntax error are not loaded."""
        result = loader.load("""
            "Mars" "Sol" { Radius 3396 }
            "Phobos" "Sol/Mars" Radius 11
            "Deimos" "Sol/Mars" { Radius 6 }
        """)

        assert result.success is False
        assert result.entries_applied == 1
        assert result.errors[-1].error_type == "CatalogSyntaxError"
        assert universe.find_path("Sol/Mars") is not None
        assert universe.find_path("Sol/Mars/Deimos") is None

    @pytest.mark.parametrize("text", [
        'Add Body { Radius 1 }',
        '"Mars" { Radius 1 }',
        '"Mars" "Sol" { Radius }',
        '"Mars" "Sol" { Class planet }',
    ])
    def test_malformed_entries(self, loader, text):
        """Test malformed entry headers and property groups."""
        result = loader.load(text)
        assert result.success is False
        assert result.entries_applied == 0


class TestLocationsAndSurfaces:
    """Test Location and AltSurface entries."""

    def test_location(self, loader, earth):
        """Test adding a location to a body."""
        result = loader.load("""
            Location "Greenwich" "Sol/Earth"
            {
                LongLat [ 0 51.48 0 ]
                Type "Observatory"
                Importance 10
            }
        """)

        assert result.entries_applied == 1
        location = earth.find_location("Greenwich")
        assert location.feature_type == FeatureType.OBSERVATORY
        assert location.importance == 10.0

    def test_replace_location(self, loader, earth):
        """Test that a non-Add disposition replaces a location of the same name."""
        loader.load('Location "Site" "Sol/Earth" { Size 1 }')
        loader.load('Replace Location "Site" "Sol/Earth" { Size 5 }')

        assert len(earth.locations) == 1
        assert earth.locations[0].size == 5.0

    def test_location_needs_body(self, loader):
        """Test that a location cannot be placed on a star."""
        result = loader.load('Location "Somewhere" "Sol" { LongLat [ 0 0 0 ] }')
        assert result.errors[0].error_type == "ParentNotFound"

    def test_alt_surface(self, loader, earth):
        """Test alternate surface definitions."""
        result = loader.load('AltSurface "limit of knowledge" "Sol/Earth" { Texture "earth-lok.jpg" }', "extras")

        assert result.entries_applied == 1
        surface = earth.alternate_surfaces["limit of knowledge"]
        assert surface.base_texture.name == "earth-lok.jpg"
        assert surface.base_texture.path == "extras"


def test_load_from_stream(empty_universe, settings):
    """Test loading an open text stream."""
    stream = io.StringIO('"Mercury" "Sol" { Radius 2439.7 Class "planet" }\n')
    result = load_solar_system_objects(stream, empty_universe, settings=settings)

    assert result.success
    assert empty_universe.find_path("Sol/Mercury").classification == BodyClassification.PLANET


def test_severities(loader):
    """Test that warnings and errors are separated."""
    result = loader.load("""
        "Earth" "Sol" { Radius 6000 }
        "Io" "Sol/Jupiter" { Radius 1821 }
    """)

    assert [d.severity for d in result.diagnostics] == [Severity.WARNING, Severity.ERROR]
    assert "line 2" in str(result.diagnostics[0])
