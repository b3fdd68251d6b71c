"""Unit tests for the zone/place site map."""

from __future__ import annotations

import pytest

from tsunageru.settings.config import Settings
from tsunageru.spatial.regions import (
    DEFAULT_CATALOG,
    MapRegion,
    RegionCatalog,
    RegionSelection,
    SpatialRegionResolver,
    centroid_of,
)


@pytest.fixture()
def resolver() -> SpatialRegionResolver:
    return SpatialRegionResolver(DEFAULT_CATALOG, settings=Settings(env="test"))


def test_centroid_is_vertex_mean() -> None:
    assert centroid_of([(0, 0), (4, 0), (4, 2), (0, 2)]) == (2.0, 1.0)
    # Not area-weighted: a duplicated vertex pulls the mean.
    assert centroid_of([(0, 0), (0, 0), (3, 0), (0, 3)]) == (0.75, 0.75)


def test_centroid_of_empty_polygon_raises() -> None:
    with pytest.raises(ValueError):
        centroid_of([])


def test_place_selection_returns_place_name_and_owning_zone(resolver: SpatialRegionResolver) -> None:
    """Selecting a place also selects the zone that owns it."""

    selection = resolver.select("place-b")

    assert selection == RegionSelection(zone_id="zone-2", place_id="place-b")
    assert resolver.resolve_label() == "B棟"
    assert resolver.detail_image() == "map_area2.png"


def test_zone_selection_generates_label_and_clears_place(resolver: SpatialRegionResolver) -> None:
    resolver.select("place-a")
    selection = resolver.select("zone-3")

    assert selection.place_id is None
    assert resolver.resolve_label() == "Zone 3"


def test_empty_selection_has_empty_label(resolver: SpatialRegionResolver) -> None:
    assert resolver.resolve_label() == ""
    assert resolver.centroid() is None


def test_unknown_region_is_ignored(resolver: SpatialRegionResolver, caplog: pytest.LogCaptureFixture) -> None:
    """Unknown ids are logged and leave the current selection untouched."""

    resolver.select("zone-1")
    with caplog.at_level("WARNING"):
        selection = resolver.select("nowhere")

    assert selection == RegionSelection(zone_id="zone-1")
    assert "nowhere" in caplog.text


def test_resolve_label_accepts_explicit_selection(resolver: SpatialRegionResolver) -> None:
    assert resolver.resolve_label(RegionSelection(zone_id="zone-4", place_id="place-gate")) == "正門"
    assert resolver.resolve_label(RegionSelection(zone_id="zone-4")) == "Zone 4"


def test_zone_label_template_is_configurable() -> None:
    settings = Settings(env="test", spatial={"zone_label_template": "エリア{number}"})
    resolver = SpatialRegionResolver(DEFAULT_CATALOG, settings=settings)
    resolver.select("zone-2")
    assert resolver.resolve_label() == "エリア2"


def test_centroid_follows_most_specific_selection(resolver: SpatialRegionResolver) -> None:
    resolver.select("zone-1")
    assert resolver.centroid() == (100.0, 75.0)
    resolver.select("place-a")
    assert resolver.centroid() == (70.0, 60.0)


def test_every_default_place_lies_inside_its_zone() -> None:
    for zone in DEFAULT_CATALOG.zones():
        xs = [x for x, _ in zone.polygon]
        ys = [y for _, y in zone.polygon]
        for place in DEFAULT_CATALOG.places_in(zone.region_id):
            for x, y in place.polygon:
                assert min(xs) <= x <= max(xs)
                assert min(ys) <= y <= max(ys)


def test_clear_resets_selection(resolver: SpatialRegionResolver) -> None:
    resolver.select("place-dock")
    resolver.clear()
    assert resolver.selection.is_empty


@pytest.mark.parametrize(
    "regions",
    [
        [MapRegion("p", "place", "Orphan", ((0, 0), (1, 0), (1, 1)), parent_zone="missing")],
        [MapRegion("z", "zone", "Tiny", ((0, 0), (1, 1)), number=1)],
        [
            MapRegion("z", "zone", "One", ((0, 0), (1, 0), (1, 1)), number=1),
            MapRegion("z", "zone", "Dup", ((0, 0), (1, 0), (1, 1)), number=2),
        ],
        [MapRegion("z", "zone", "Nested", ((0, 0), (1, 0), (1, 1)), parent_zone="other")],
    ],
)
def test_invalid_catalogs_are_rejected(regions: list[MapRegion]) -> None:
    """Orphan places, degenerate polygons, duplicate ids and nested zones fail fast."""

    with pytest.raises(ValueError):
        RegionCatalog(regions)
