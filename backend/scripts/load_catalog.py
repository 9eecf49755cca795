#!/usr/bin/env python3
"""
Load one or more solar system catalogs (.ssc) and report the result.

Catalogs are applied in the order given, so later files can Modify or
Replace objects defined by earlier ones. Stars named with --star are
registered before loading; "Sol" is always available.
"""

import logging
import sys
from pathlib import Path
from typing import List

# Add parent directory to path to import solarsys modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from solarsys.core.config import get_settings
from solarsys.models import Body, Star, Universe
from solarsys.services.catalog_loader import CatalogLoader


def print_tree(bodies: List[Body], indent: int = 1) -> None:
    """Print bodies and their satellites as an indented tree."""
    for body in bodies:
        phases = len(body.timeline) if body.timeline is not None else 0
        print(f"{'  ' * indent}{body.name} ({body.classification.value}, "
              f"r={body.radius:g} km, {phases} phase{'s' if phases != 1 else ''})")
        if body.satellites is not None:
            print_tree(body.satellites.bodies, indent + 1)


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description='Load solar system catalog files')
    parser.add_argument(
        'catalogs',
        nargs='+',
        help='Catalog files to load, in order'
    )
    parser.add_argument(
        '--star',
        action='append',
        default=[],
        help='Name of an additional star to register (can be repeated)'
    )
    parser.add_argument(
        '--tree',
        action='store_true',
        help='Print the resulting body hierarchy'
    )

    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    universe = Universe([Star("Sol")] + [Star(name) for name in args.star])
    loader = CatalogLoader(universe, settings)

    failed = False
    for catalog in args.catalogs:
        path = Path(catalog)
        if not path.is_file():
            print(f"Error: catalog not found: {path}")
            failed = True
            continue

        print(f"Loading {path}")
        with open(path, encoding="utf-8") as f:
            result = loader.load(f, str(path.parent))

        print(f"   Applied: {result.entries_applied}")
        print(f"   Rejected: {result.entries_rejected}")
        print(f"   Warnings: {len(result.warnings)}")
        for diagnostic in result.diagnostics:
            print(f"   {path.name}: {diagnostic}")
        if not result.success:
            failed = True

    if args.tree:
        for solar_system in universe.solar_systems():
            print(f"\n{solar_system.star.name}")
            print_tree(solar_system.planets.bodies)

    sys.exit(1 if failed else 0)


if __name__ == '__main__':
    main()
