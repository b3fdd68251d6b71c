"""Site map zones and places."""

from .regions import DEFAULT_CATALOG, MapRegion, RegionCatalog, RegionSelection, SpatialRegionResolver, centroid_of

__all__ = [
    "DEFAULT_CATALOG",
    "MapRegion",
    "RegionCatalog",
    "RegionSelection",
    "SpatialRegionResolver",
    "centroid_of",
]
