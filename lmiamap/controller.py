"""View controller: owns the live selection and marker batch and drives re-renders."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from . import config, regions
from .controls import ChoiceControl
from .data_source import LoadFailure
from .filtering import PlottablePoint, filter_records, is_all_categories
from .map_view import MapWidget, MarkerBatch, make_marker, make_marker_batch
from .records import Record, known_categories
from .surfaces import StatusSurfaces

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[List[Record]]]
BatchFactory = Callable[[], MarkerBatch]
MarkerFactory = Callable[[PlottablePoint], Any]


class MissingSurface(RuntimeError):
    pass


class ViewState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class Selection:
    region_code: str
    category: str = config.ALL_CATEGORIES


@dataclass(frozen=True)
class RenderedBatch:
    batch: MarkerBatch
    count: int
    selection: Selection


def _stream_suffix(category: Optional[str]) -> str:
    return "" if is_all_categories(category) else f" for {category} stream"


def status_message(region_name: str, category: Optional[str], count: int) -> str:
    return f"Map updated: Showing {count} LMIA applications in {region_name}{_stream_suffix(category)}."


def empty_message(region_name: str, category: Optional[str]) -> str:
    return f"No LMIA applications found{_stream_suffix(category)} in {region_name}."


class ViewController:
    def __init__(
        self,
        map_view: Optional[MapWidget],
        region_control: Optional[ChoiceControl],
        category_control: Optional[ChoiceControl],
        surfaces: Optional[StatusSurfaces] = None,
        batch_factory: BatchFactory = make_marker_batch,
        marker_factory: MarkerFactory = make_marker,
    ) -> None:
        self.map_view = map_view
        self.region_control = region_control
        self.category_control = category_control
        self.surfaces = surfaces if surfaces is not None else StatusSurfaces()
        self.batch_factory = batch_factory
        self.marker_factory = marker_factory

        self.state = ViewState.UNINITIALIZED
        self.records: List[Record] = []
        self.selection: Optional[Selection] = None
        self.rendered: Optional[RenderedBatch] = None
        self.last_summary: Optional[Dict[str, Any]] = None
        self._render_lock = threading.Lock()

    # --- lifecycle ---

    async def initialize(self, loader: Loader) -> ViewState:
        if self.state is not ViewState.UNINITIALIZED:
            logger.warning("initialize() called in state %s; ignoring", self.state.value)
            return self.state

        try:
            self._require_surfaces()
        except MissingSurface as exc:
            self._fail(str(exc))
            return self.state

        self.surfaces.show_loading(True)
        self.region_control.on_change(self.select_region)
        self.category_control.on_change(self.select_category)

        try:
            records = await loader()
        except LoadFailure as exc:
            logger.error("Error loading LMIA data: %s", exc)
            self._fail("Failed to load LMIA data. Please refresh the page.")
            return self.state
        except Exception:
            logger.exception("Error initializing")
            self._fail("An error occurred while initializing the application.")
            return self.state

        self.records = list(records)
        self.category_control.set_options([config.ALL_CATEGORIES, *known_categories(self.records)])
        self.state = ViewState.READY

        region_code = self.region_control.value or config.DEFAULT_REGION
        category = self.category_control.value or config.ALL_CATEGORIES
        try:
            self.render(Selection(region_code, category))
        except Exception:
            logger.exception("Error rendering initial selection")
            self._fail("An error occurred while initializing the application.")
        finally:
            self.surfaces.show_loading(False)
        return self.state

    def _require_surfaces(self) -> None:
        if self.map_view is None:
            raise MissingSurface("Map container not found!")
        if self.region_control is None:
            raise MissingSurface("Province select not found!")
        if self.category_control is None:
            raise MissingSurface("Program stream select not found!")

    def _fail(self, message: str) -> None:
        self.state = ViewState.ERROR
        self.surfaces.show_error(message)
        self.surfaces.show_loading(False)

    # --- selection events ---

    def select_region(self, region_code: str) -> Optional[RenderedBatch]:
        category = self.selection.category if self.selection else config.ALL_CATEGORIES
        return self.render(Selection(region_code, category))

    def select_category(self, category: str) -> Optional[RenderedBatch]:
        if self.selection is not None:
            region_code = self.selection.region_code
        else:
            region_code = (self.region_control.value if self.region_control else None) or config.DEFAULT_REGION
        return self.render(Selection(region_code, category or config.ALL_CATEGORIES))

    # --- render cycle ---

    def render(self, selection: Selection) -> Optional[RenderedBatch]:
        """Replace the live batch with one built for ``selection``.

        Returns the installed batch, or None when nothing was plotted. An unknown
        region aborts the cycle and leaves the current batch and selection alone.
        """
        if self.state is not ViewState.READY:
            logger.warning("Render requested in state %s; ignoring", self.state.value)
            return None

        with self._render_lock:
            try:
                region = regions.resolve(selection.region_code)
            except regions.UnknownRegion as exc:
                logger.error("%s", exc)
                return None

            self.selection = selection
            self._clear_batch()
            self.map_view.set_view(region.center, region.zoom)

            if not self.records:
                logger.error("No LMIA data loaded")
                self.surfaces.show_empty_state("No data available.")
                self._record_summary(selection, region.name, 0, 0, 0)
                return None

            result = filter_records(self.records, region.name, selection.category)
            logger.info(
                "Plotting %s markers for %s%s",
                result.matched,
                selection.region_code,
                "" if is_all_categories(selection.category) else f" ({selection.category})",
            )

            if result.empty:
                message = empty_message(region.name, selection.category)
                self.surfaces.show_empty_state(message)
                # Keep the status channel from announcing the previous region.
                self.surfaces.set_status(message)
                self._record_summary(selection, region.name, result.matched, 0, result.dropped)
                return None

            self.surfaces.hide_empty_state()
            batch = self.batch_factory()
            batch.add_all([self.marker_factory(point) for point in result.points])
            self.map_view.add_layer(batch)
            self.rendered = RenderedBatch(batch=batch, count=len(result.points), selection=selection)
            logger.info("Added %s markers to cluster group", self.rendered.count)

            self.surfaces.set_status(status_message(region.name, selection.category, self.rendered.count))
            self._record_summary(selection, region.name, result.matched, self.rendered.count, result.dropped)
            return self.rendered

    def _clear_batch(self) -> None:
        if self.rendered is None:
            return
        self.map_view.remove_layer(self.rendered.batch)
        self.rendered = None

    def _record_summary(
        self,
        selection: Selection,
        region_name: str,
        matched: int,
        plotted: int,
        dropped: int,
    ) -> None:
        self.last_summary = {
            "region_code": selection.region_code,
            "region_name": region_name,
            "category": selection.category,
            "matched": matched,
            "plotted": plotted,
            "dropped": dropped,
        }
