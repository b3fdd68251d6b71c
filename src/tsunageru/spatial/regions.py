"""Two-level site map (zone -> place) used to pick an incident location.

Zones partition the site plan; every place sits inside exactly one zone.
Selection is driven by the operator tapping a region, not by point lookup:
the presentation layer calls :meth:`SpatialRegionResolver.select` with the
tapped region id and reads the label back with
:meth:`SpatialRegionResolver.resolve_label`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Literal, Optional, Sequence, Tuple

from tsunageru.settings import Settings, get_settings

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
RegionKind = Literal["zone", "place"]


def centroid_of(polygon: Sequence[Point]) -> Point:
    """Arithmetic mean of the polygon's vertices.

    This is not the area-weighted centroid; for the convex, roughly uniform
    regions on the site plan the two are close enough for label placement.
    """
    if not polygon:
        raise ValueError("cannot take the centroid of an empty polygon")
    count = len(polygon)
    return (
        sum(float(x) for x, _ in polygon) / count,
        sum(float(y) for _, y in polygon) / count,
    )


@dataclass(frozen=True)
class MapRegion:
    """A zone or place polygon on the site plan.

    Attributes:
        region_id: Identifier dispatched by the UI when the region is tapped.
        kind: ``"zone"`` or ``"place"``.
        name: Proper name (places) or descriptive name (zones).
        polygon: Ordered vertices in site-plan coordinates.
        parent_zone: Owning zone id; set for places only.
        number: Zone number used for the generated label; zones only.
        detail_image: Optional close-up image shown when a zone is selected.
    """

    region_id: str
    kind: RegionKind
    name: str
    polygon: Tuple[Point, ...]
    parent_zone: Optional[str] = None
    number: Optional[int] = None
    detail_image: Optional[str] = None

    @property
    def centroid(self) -> Point:
        return centroid_of(self.polygon)


@dataclass(frozen=True)
class RegionSelection:
    """Current map selection; a place always carries its owning zone."""

    zone_id: Optional[str] = None
    place_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.zone_id is None and self.place_id is None


class RegionCatalog:
    """Immutable lookup of zones and places, validated on construction."""

    def __init__(self, regions: Iterable[MapRegion]) -> None:
        self._regions: Dict[str, MapRegion] = {}
        for region in regions:
            if region.region_id in self._regions:
                raise ValueError(f"duplicate region id: {region.region_id}")
            if len(region.polygon) < 3:
                raise ValueError(f"region {region.region_id} needs at least three vertices")
            if region.kind == "zone" and region.parent_zone is not None:
                raise ValueError(f"zone {region.region_id} cannot have a parent zone")
            self._regions[region.region_id] = region

        for region in self._regions.values():
            if region.kind != "place":
                continue
            parent = self._regions.get(region.parent_zone or "")
            if parent is None or parent.kind != "zone":
                raise ValueError(f"place {region.region_id} must name an existing zone, got {region.parent_zone!r}")

    def get(self, region_id: str) -> Optional[MapRegion]:
        return self._regions.get(region_id)

    def zones(self) -> Tuple[MapRegion, ...]:
        return tuple(region for region in self._regions.values() if region.kind == "zone")

    def places_in(self, zone_id: str) -> Tuple[MapRegion, ...]:
        return tuple(
            region for region in self._regions.values() if region.kind == "place" and region.parent_zone == zone_id
        )

    def __len__(self) -> int:
        return len(self._regions)


def _rect(x0: float, y0: float, x1: float, y1: float) -> Tuple[Point, ...]:
    return ((x0, y0), (x1, y0), (x1, y1), (x0, y1))


# Site plan is 400 x 300; zones are its four quadrants.
DEFAULT_CATALOG = RegionCatalog(
    [
        MapRegion("zone-1", "zone", "North-west", _rect(0, 0, 200, 150), number=1, detail_image="map_area1.png"),
        MapRegion("zone-2", "zone", "North-east", _rect(200, 0, 400, 150), number=2, detail_image="map_area2.png"),
        MapRegion("zone-3", "zone", "South-west", _rect(0, 150, 200, 300), number=3, detail_image="map_area3.png"),
        MapRegion("zone-4", "zone", "South-east", _rect(200, 150, 400, 300), number=4, detail_image="map_area4.png"),
        MapRegion("place-a", "place", "A棟", _rect(20, 20, 120, 100), parent_zone="zone-1"),
        MapRegion("place-a-parking", "place", "A棟 駐車場", _rect(130, 30, 190, 130), parent_zone="zone-1"),
        MapRegion("place-b", "place", "B棟", _rect(220, 20, 380, 90), parent_zone="zone-2"),
        MapRegion("place-yard", "place", "資材置場", _rect(220, 100, 300, 140), parent_zone="zone-2"),
        MapRegion("place-c", "place", "C棟", _rect(20, 170, 180, 280), parent_zone="zone-3"),
        MapRegion("place-dock", "place", "荷捌き場", _rect(220, 170, 380, 230), parent_zone="zone-4"),
        MapRegion("place-gate", "place", "正門", _rect(300, 240, 380, 290), parent_zone="zone-4"),
    ]
)


class SpatialRegionResolver:
    """Tracks the operator's zone/place selection and turns it into a label."""

    def __init__(self, catalog: RegionCatalog = DEFAULT_CATALOG, *, settings: Settings | None = None) -> None:
        self.catalog = catalog
        self._settings = settings or get_settings()
        self._selection = RegionSelection()

    @property
    def selection(self) -> RegionSelection:
        return self._selection

    def select(self, region_id: str) -> RegionSelection:
        """Apply a tap on ``region_id``.

        A place selects its owning zone as well. A zone selection clears any
        previously selected place and never picks one. Unknown ids leave the
        selection untouched.
        """
        region = self.catalog.get(region_id)
        if region is None:
            logger.warning("Ignoring selection of unknown region %r", region_id)
            return self._selection
        if region.kind == "place":
            self._selection = RegionSelection(zone_id=region.parent_zone, place_id=region.region_id)
        else:
            self._selection = RegionSelection(zone_id=region.region_id)
        return self._selection

    def clear(self) -> None:
        self._selection = RegionSelection()

    def zone_label(self, zone: MapRegion) -> str:
        number = zone.number if zone.number is not None else zone.region_id
        return self._settings.spatial.zone_label_template.format(number=number)

    def resolve_label(self, selection: RegionSelection | None = None) -> str:
        """Place name if a place is selected, else the zone label, else ``""``."""
        selection = selection if selection is not None else self._selection
        if selection.place_id:
            place = self.catalog.get(selection.place_id)
            if place is not None:
                return place.name
        if selection.zone_id:
            zone = self.catalog.get(selection.zone_id)
            if zone is not None:
                return self.zone_label(zone)
        return ""

    def detail_image(self, selection: RegionSelection | None = None) -> Optional[str]:
        selection = selection if selection is not None else self._selection
        zone = self.catalog.get(selection.zone_id) if selection.zone_id else None
        return zone.detail_image if zone is not None else None

    def centroid(self, selection: RegionSelection | None = None) -> Optional[Point]:
        """Label anchor for the most specific selected region."""
        selection = selection if selection is not None else self._selection
        region_id = selection.place_id or selection.zone_id
        region = self.catalog.get(region_id) if region_id else None
        return region.centroid if region is not None else None


__all__ = [
    "DEFAULT_CATALOG",
    "MapRegion",
    "RegionCatalog",
    "RegionSelection",
    "SpatialRegionResolver",
    "centroid_of",
]
