"""LMIA record model and payload parsing."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from . import config


@dataclass(frozen=True)
class Record:
    province: Optional[str]
    program_stream: Optional[str]
    employer: Any = None
    address: Any = None
    occupation: Any = None
    latitude: Any = None
    longitude: Any = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Record":
        return cls(
            province=_opt_str(raw.get(config.FIELD_REGION)),
            program_stream=_opt_str(raw.get(config.FIELD_CATEGORY)),
            employer=raw.get(config.FIELD_EMPLOYER),
            address=raw.get(config.FIELD_ADDRESS),
            occupation=raw.get(config.FIELD_OCCUPATION),
            latitude=raw.get(config.FIELD_LATITUDE),
            longitude=raw.get(config.FIELD_LONGITUDE),
        )

    def to_mapping(self) -> Dict[str, Any]:
        return {
            config.FIELD_REGION: self.province,
            config.FIELD_CATEGORY: self.program_stream,
            config.FIELD_EMPLOYER: self.employer,
            config.FIELD_ADDRESS: self.address,
            config.FIELD_OCCUPATION: self.occupation,
            config.FIELD_LATITUDE: self.latitude,
            config.FIELD_LONGITUDE: self.longitude,
        }


def _opt_str(value: Any) -> Optional[str]:
    # Region and category are matched byte-exact, so only real strings qualify.
    return value if isinstance(value, str) else None


def parse_records(payload: Any) -> List[Record]:
    """Convert a decoded JSON payload into records.

    Raises ValueError when the payload is not a list of objects.
    """
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of records, got {type(payload).__name__}")
    records: List[Record] = []
    for idx, item in enumerate(payload):
        if not isinstance(item, Mapping):
            raise ValueError(f"Record {idx} is not an object")
        records.append(Record.from_mapping(item))
    return records


def known_categories(records: Iterable[Record]) -> List[str]:
    return sorted({r.program_stream for r in records if r.program_stream})
