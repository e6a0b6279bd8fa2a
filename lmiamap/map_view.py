"""Map, marker-batch and marker widgets backed by folium/Leaflet."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

import folium
from folium.plugins import MarkerCluster

from . import config
from .filtering import PlottablePoint
from .reporting import atomic_write_text
from .surfaces import StatusSurfaces

logger = logging.getLogger(__name__)


class MarkerBatch(Protocol):
    def add_all(self, markers: Sequence[Any]) -> None: ...

    def __len__(self) -> int: ...


class MapWidget(Protocol):
    def set_view(self, center: Sequence[float], zoom: float) -> None: ...

    def add_layer(self, batch: MarkerBatch) -> None: ...

    def remove_layer(self, batch: MarkerBatch) -> None: ...


class FoliumMarkerBatch:
    def __init__(self, options: Optional[Dict[str, Any]] = None, name: str = "LMIA applications") -> None:
        self.options = dict(options if options is not None else config.cluster_options())
        self.layer = MarkerCluster(name=name, **self.options)
        self._markers: List[folium.Marker] = []

    def add_all(self, markers: Sequence[folium.Marker]) -> None:
        for marker in markers:
            self.layer.add_child(marker)
        self._markers.extend(markers)

    @property
    def markers(self) -> List[folium.Marker]:
        return list(self._markers)

    def __len__(self) -> int:
        return len(self._markers)


def make_marker_batch() -> FoliumMarkerBatch:
    return FoliumMarkerBatch(config.cluster_options())


def make_marker(point: PlottablePoint) -> folium.Marker:
    # popup_html is already escaped, so it is passed through as markup.
    popup = folium.Popup(point.popup_html, max_width=config.POPUP_MAX_WIDTH)
    return folium.Marker(location=point.location, popup=popup)


class FoliumMapView:
    """Holds the live view state and builds a folium.Map on export."""

    def __init__(
        self,
        center: Optional[Sequence[float]] = None,
        zoom: Optional[float] = None,
        tiles_url: Optional[str] = None,
        attribution: Optional[str] = None,
    ) -> None:
        start = center if center is not None else config.INITIAL_CENTER
        self.center: Tuple[float, float] = (float(start[0]), float(start[1]))
        self.zoom = zoom if zoom is not None else config.INITIAL_ZOOM
        self.tiles_url = tiles_url or config.TILES_URL
        self.attribution = attribution or config.TILES_ATTRIBUTION
        self._layers: Dict[int, MarkerBatch] = {}

    @property
    def layers(self) -> List[MarkerBatch]:
        return list(self._layers.values())

    def set_view(self, center: Sequence[float], zoom: float) -> None:
        self.center = (float(center[0]), float(center[1]))
        self.zoom = zoom

    def add_layer(self, batch: MarkerBatch) -> None:
        self._layers[id(batch)] = batch

    def remove_layer(self, batch: MarkerBatch) -> None:
        self._layers.pop(id(batch), None)

    def to_folium(self, surfaces: Optional[StatusSurfaces] = None) -> folium.Map:
        fmap = folium.Map(location=list(self.center), zoom_start=self.zoom, tiles=None)
        folium.TileLayer(tiles=self.tiles_url, attr=self.attribution, name="OpenStreetMap").add_to(fmap)
        for batch in self._layers.values():
            layer = getattr(batch, "layer", None)
            if layer is None:
                logger.warning("Skipping batch without a folium layer: %r", batch)
                continue
            layer.add_to(fmap)
        if surfaces is not None:
            banners = surfaces.to_html()
            if banners:
                fmap.get_root().html.add_child(folium.Element(banners))
        return fmap

    def render_html(self, surfaces: Optional[StatusSurfaces] = None) -> str:
        return self.to_folium(surfaces).get_root().render()

    def save(self, path: str, surfaces: Optional[StatusSurfaces] = None) -> None:
        atomic_write_text(path, self.render_html(surfaces))
        logger.info("Wrote map to %s", path)

