"""Project configuration.

Loads user-defined map parameters from map_config.json when available,
falling back to sensible defaults. Keep widget option shapes centralized here.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

_REPO_ROOT = Path(__file__).resolve().parent.parent

# --- Data source ---

DATA_SOURCE_ENV = "LMIA_DATA_SOURCE"
OUTPUT_DIR_ENV = "LMIA_OUTPUT_DIR"
DEFAULT_DATA_SOURCE = "data.json"

# --- Record fields ---

FIELD_REGION = "Province/Territory"
FIELD_CATEGORY = "Program Stream"
FIELD_EMPLOYER = "Employer"
FIELD_ADDRESS = "Address"
FIELD_OCCUPATION = "Occupation"
FIELD_LATITUDE = "Latitude"
FIELD_LONGITUDE = "Longitude"

# --- Selection ---

ALL_CATEGORIES = "all"
DEFAULT_REGION = "ON"

# --- Label fallbacks ---

FALLBACK_EMPLOYER = "Unknown"
FALLBACK_ADDRESS = "Address not available"
FALLBACK_OCCUPATION = "Occupation not available"

# --- Map widget ---

TILES_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILES_ATTRIBUTION = "© OpenStreetMap contributors"
# GTA centered
INITIAL_CENTER: List[float] = [43.65, -79.38]
INITIAL_ZOOM = 8

# --- Marker batch (Leaflet.markercluster options) ---

CLUSTER_CHUNKED_LOADING = True
CLUSTER_CHUNK_INTERVAL_MS = 200
CLUSTER_CHUNK_DELAY_MS = 50
CLUSTER_MAX_RADIUS_PX = 50

POPUP_MAX_WIDTH = 300

# --- Surfaces ---

SURFACE_STATUS = "map-status"
SURFACE_ERROR = "error"
SURFACE_EMPTY = "empty-state"
SURFACE_LOADING = "loading"

# --- HTTP ---

HTTP_TIMEOUT_SECONDS = 20
HTTP_RETRY_MAX = 3
HTTP_BACKOFF_BASE = 0.5
HTTP_BACKOFF_MAX = 8.0

# --- Outputs ---

OUTPUT_DIR = "out"
MAP_FILENAME = "lmia_map.html"


def cluster_options() -> Dict[str, Any]:
    return {
        "chunkedLoading": CLUSTER_CHUNKED_LOADING,
        "chunkInterval": CLUSTER_CHUNK_INTERVAL_MS,
        "chunkDelay": CLUSTER_CHUNK_DELAY_MS,
        "maxClusterRadius": CLUSTER_MAX_RADIUS_PX,
    }


def load_map_config(path: Optional[str] = None) -> bool:
    """Load map configuration from a JSON file.

    Updates module-level globals with values from the config file.
    Returns True if config was loaded, False if file not found.
    """
    if path is None:
        path = str(_REPO_ROOT / "map_config.json")

    config_path = Path(path)
    if not config_path.exists():
        return False

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    globals_ref = globals()

    default_region = data.get("default_region")
    if default_region:
        globals_ref["DEFAULT_REGION"] = str(default_region).upper()

    data_source = data.get("data_source")
    if data_source:
        globals_ref["DEFAULT_DATA_SOURCE"] = str(data_source)

    output_dir = data.get("output_dir")
    if output_dir:
        globals_ref["OUTPUT_DIR"] = str(output_dir)

    tiles = data.get("tiles", {})
    if tiles.get("url"):
        globals_ref["TILES_URL"] = str(tiles["url"])
    if tiles.get("attribution"):
        globals_ref["TILES_ATTRIBUTION"] = str(tiles["attribution"])

    initial = data.get("initial_view", {})
    if initial.get("lat") is not None and initial.get("lon") is not None:
        globals_ref["INITIAL_CENTER"] = [float(initial["lat"]), float(initial["lon"])]
    if initial.get("zoom") is not None:
        globals_ref["INITIAL_ZOOM"] = initial["zoom"]

    cluster = data.get("cluster", {})
    if "chunked_loading" in cluster:
        globals_ref["CLUSTER_CHUNKED_LOADING"] = bool(cluster["chunked_loading"])
    if "chunk_interval_ms" in cluster:
        globals_ref["CLUSTER_CHUNK_INTERVAL_MS"] = int(cluster["chunk_interval_ms"])
    if "chunk_delay_ms" in cluster:
        globals_ref["CLUSTER_CHUNK_DELAY_MS"] = int(cluster["chunk_delay_ms"])
    if "max_cluster_radius_px" in cluster:
        globals_ref["CLUSTER_MAX_RADIUS_PX"] = int(cluster["max_cluster_radius_px"])

    http = data.get("http", {})
    if "timeout_seconds" in http:
        globals_ref["HTTP_TIMEOUT_SECONDS"] = float(http["timeout_seconds"])
    if "retry_max" in http:
        globals_ref["HTTP_RETRY_MAX"] = int(http["retry_max"])

    return True
