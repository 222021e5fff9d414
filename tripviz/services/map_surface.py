from __future__ import annotations

import logging
from html import escape
from typing import Optional, Sequence

import folium
from branca.element import MacroElement
from jinja2 import Template

from .interaction import HoverState
from .route_map_service import (
    GLOW_STYLES,
    LatLon,
    MapMarker,
    PathStyle,
    RouteProjection,
    Viewport,
    project_trip_route,
)
from .trip_result import TripRoute


logger = logging.getLogger(__name__)

DEFAULT_CENTER = (39.8283, -98.5795)  # contiguous US
DEFAULT_ZOOM = 4
TILE_URL = "https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png"
TILE_ATTRIBUTION = "&copy; OpenStreetMap contributors &copy; CARTO"
PLACEHOLDER_TEXT = "Plan a trip to see the route here"


class ZoomControl(MacroElement):
    """Leaflet zoom buttons at a chosen corner (the map is created without them)."""

    _template = Template(
        """
        {% macro script(this, kwargs) %}
            L.control.zoom({position: {{ this.position|tojson }}}).addTo({{ this._parent.get_name() }});
        {% endmacro %}
        """
    )

    def __init__(self, position: str = "bottomright") -> None:
        super().__init__()
        self._name = "ZoomControl"
        self.position = position


def _children(element) -> dict:
    # folium has no public removal API; every child lookup goes through here
    return element._children


def _detach(parent, element) -> None:
    _children(parent).pop(element.get_name(), None)


def stop_icon(marker: MapMarker) -> folium.DivIcon:
    color = marker.kind.color
    html = (
        f'<div class="stop-marker-inner" style="--stop-color: {color}">'
        f'<span class="stop-emoji">{marker.kind.emoji}</span></div>'
        f'<div class="stop-marker-label" style="--stop-color: {color}">{escape(marker.label)}</div>'
    )
    return folium.DivIcon(html=html, icon_size=(36, 36), icon_anchor=(18, 18), class_name="stop-marker")


class MapSurface:
    """
    Narrow wrapper over a folium map.

    Created once, then updated in place: everything route related lives in a
    single feature group that is cleared and redrawn, so the base map and
    its tile layer are never rebuilt.
    """

    def __init__(self, center: LatLon = DEFAULT_CENTER, zoom: int = DEFAULT_ZOOM) -> None:
        self.map: Optional[folium.Map] = folium.Map(
            location=list(center),
            zoom_start=zoom,
            tiles=None,
            zoom_control=False,
            attribution_control=False,
        )
        ZoomControl("bottomright").add_to(self.map)
        folium.TileLayer(TILE_URL, attr=TILE_ATTRIBUTION, max_zoom=19, name="basemap").add_to(self.map)
        self.group = folium.FeatureGroup(name="route").add_to(self.map)
        self.viewport: Optional[Viewport] = None
        self._fit: Optional[folium.FitBounds] = None

    def _require_map(self) -> folium.Map:
        if self.map is None:
            raise RuntimeError("Map surface has been destroyed")
        return self.map

    def clear(self) -> None:
        self._require_map()
        _children(self.group).clear()

    def draw_path(self, points: Sequence[LatLon], style: PathStyle) -> folium.PolyLine:
        self._require_map()
        line = folium.PolyLine(
            [list(p) for p in points],
            color=style.color,
            weight=style.weight,
            opacity=style.opacity,
            line_cap=style.line_cap,
            line_join=style.line_join,
        )
        line.add_to(self.group)
        return line

    def fit_bounds(self, viewport: Viewport) -> None:
        base_map = self._require_map()
        # one fit element, replaced on every fit
        if self._fit is not None:
            _detach(base_map, self._fit)
        self._fit = folium.FitBounds(viewport.bounds, padding=viewport.padding)
        self._fit.add_to(base_map)
        self.viewport = viewport

    def add_marker(self, marker: MapMarker) -> folium.Marker:
        self._require_map()
        folium_marker = folium.Marker(
            list(marker.position),
            icon=stop_icon(marker),
            popup=folium.Popup(marker.popup_html, max_width=300),
            tooltip=marker.hover_text,
            z_index_offset=marker.z_index_offset,
        )
        folium_marker.add_to(self.group)
        return folium_marker

    @property
    def layer_count(self) -> int:
        return len(_children(self.group))

    def render(self) -> str:
        return self._require_map().get_root().render()

    def destroy(self) -> None:
        self.map = None
        self.viewport = None
        self._fit = None


class RouteMapView:
    """Draws a trip route onto one map surface and tracks hover for it."""

    def __init__(self, surface: Optional[MapSurface] = None) -> None:
        self.surface = surface or MapSurface()
        self.projection: Optional[RouteProjection] = None
        self.hover = HoverState(default_text=PLACEHOLDER_TEXT)

    @property
    def show_placeholder(self) -> bool:
        return self.projection is None or self.projection.is_empty

    def show(self, route: Optional[TripRoute]) -> RouteProjection:
        self.surface.clear()
        self.hover.leave()
        projection = project_trip_route(route or TripRoute())
        self.projection = projection
        if projection.is_empty:
            logger.debug("Empty route geometry, leaving viewport untouched")
            self.hover.default_text = PLACEHOLDER_TEXT
            return projection

        for style in GLOW_STYLES:
            self.surface.draw_path(projection.points, style)
        self.surface.fit_bounds(projection.viewport)
        for marker in projection.markers:
            self.surface.add_marker(marker)

        estimated = sum(1 for m in projection.markers if m.estimated)
        logger.info(
            "Drew route with %d points and %d markers (%d placed by estimate)",
            len(projection.points),
            len(projection.markers),
            estimated,
        )
        self.hover.default_text = f"{len(projection.markers)} markers along {len(projection.points)} route points"
        return projection

    def render(self) -> str:
        html = self.surface.render()
        if self.show_placeholder:
            overlay = f'<div class="map-empty"><p>{PLACEHOLDER_TEXT}</p></div>'
            html = html.replace("</body>", overlay + "\n</body>", 1)
        return html
