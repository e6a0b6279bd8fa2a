"""Static province/territory registry with hand-tuned map views."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple


class UnknownRegion(KeyError):
    def __init__(self, code: object) -> None:
        super().__init__(code)
        self.code = code

    def __str__(self) -> str:
        return f"No data found for province: {self.code}"


@dataclass(frozen=True)
class RegionDescriptor:
    code: str
    name: str
    center: Tuple[float, float]
    zoom: float


def _region(code: str, name: str, lat: float, lon: float, zoom: float) -> RegionDescriptor:
    return RegionDescriptor(code=code, name=name, center=(lat, lon), zoom=zoom)


# Centers and zooms are calibrated by eye so the populated area fits the viewport.
REGIONS: Dict[str, RegionDescriptor] = {
    r.code: r
    for r in (
        _region("AB", "Alberta", 50.28, -117.47, 6),
        _region("BC", "British Columbia", 54.15, -124.00, 6),
        _region("MB", "Manitoba", 53.50, -95.50, 6),
        _region("NB", "New Brunswick", 46.34, -66.42, 7),
        _region("NL", "Newfoundland and Labrador", 54.50, -60.50, 7),
        _region("NS", "Nova Scotia", 45.22, -63.00, 8),
        _region("NT", "Northwest Territories", 67.00, -119.00, 6),
        _region("NU", "Nunavut", 68.00, -90.00, 4.5),
        _region("ON", "Ontario", 43.65, -79.38, 8),
        _region("PE", "Prince Edward Island", 46.50, -63.20, 8),
        _region("QC", "Quebec", 53.25, -68.43, 5),
        _region("SK", "Saskatchewan", 52.94, -106.45, 6),
        _region("YT", "Yukon", 65.00, -130.00, 6),
    )
}


def resolve(code: str) -> RegionDescriptor:
    try:
        return REGIONS[code]
    except (KeyError, TypeError):
        raise UnknownRegion(code) from None


def region_codes() -> List[str]:
    return list(REGIONS.keys())
