"""Record selection and coordinate validation for map plotting."""
from __future__ import annotations

import html
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from . import config
from .records import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlottablePoint:
    lat: float
    lon: float
    employer: str
    address: str
    occupation: str

    @property
    def location(self) -> List[float]:
        return [self.lat, self.lon]

    @property
    def popup_html(self) -> str:
        # Fields are escaped at construction; only the wrapping tags are markup.
        return f"<strong>{self.employer}</strong><br>{self.address}<br>{self.occupation}"


@dataclass
class FilterResult:
    points: List[PlottablePoint] = field(default_factory=list)
    matched: int = 0
    dropped: int = 0

    @property
    def empty(self) -> bool:
        return not self.points


def is_all_categories(category: Optional[str]) -> bool:
    return not category or category == config.ALL_CATEGORIES


def parse_coordinate(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def label_text(value: Any, fallback: str) -> str:
    text = fallback if value is None or value == "" else str(value)
    # Popups land inside a JS template literal; "$" and backslashes become entities.
    return html.escape(text, quote=True).replace("\\", "&#92;").replace("$", "&#36;")


def to_plottable(record: Record) -> Optional[PlottablePoint]:
    lat = parse_coordinate(record.latitude)
    lon = parse_coordinate(record.longitude)
    if lat is None or lon is None:
        return None
    return PlottablePoint(
        lat=lat,
        lon=lon,
        employer=label_text(record.employer, config.FALLBACK_EMPLOYER),
        address=label_text(record.address, config.FALLBACK_ADDRESS),
        occupation=label_text(record.occupation, config.FALLBACK_OCCUPATION),
    )


def filter_records(
    records: Iterable[Record],
    region_name: str,
    category: Optional[str] = config.ALL_CATEGORIES,
) -> FilterResult:
    all_categories = is_all_categories(category)
    result = FilterResult()
    for record in records:
        if record.province != region_name:
            continue
        if not all_categories and record.program_stream != category:
            continue
        result.matched += 1
        point = to_plottable(record)
        if point is None:
            result.dropped += 1
            continue
        result.points.append(point)

    if result.dropped:
        logger.debug(
            "Dropped %s of %s records in %s with unusable coordinates",
            result.dropped,
            result.matched,
            region_name,
        )
    return result
