"""Solar system catalog loader."""

from .core.config import LoaderSettings, get_settings
from .services.catalog_loader import CatalogLoader, load_solar_system_objects

__all__ = [
    "LoaderSettings",
    "get_settings",
    "CatalogLoader",
    "load_solar_system_objects",
]
