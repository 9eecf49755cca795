"""Stars known to the universe.

The star database itself lives outside this package; a Star only carries
what the catalog loader needs to anchor solar systems.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple


@dataclass(eq=False)
class Star:
    """A star that planetary systems can be attached to."""
    name: str
    catalog_number: Optional[int] = None
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)  # Light years
    extra: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"Star({self.name!r})"
