"""Catalog domain - remote track/station catalog with sample-data fallback."""

from .api import (
    REQUEST_TIMEOUT,
    RESOURCE_TIMEOUT,
    CatalogClient,
    CatalogService,
    Endpoints,
    SampleCatalog,
)
from .library import CatalogLibrary

__all__ = [
    "CatalogService",
    "CatalogClient",
    "SampleCatalog",
    "CatalogLibrary",
    "Endpoints",
    "REQUEST_TIMEOUT",
    "RESOURCE_TIMEOUT",
]
