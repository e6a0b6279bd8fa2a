"""CLI entrypoint."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv as _load_dotenv

from lmiamap import config, regions
from lmiamap.controller import ViewController, ViewState
from lmiamap.controls import ChoiceControl
from lmiamap.data_source import LoadFailure, fetch_records, is_url, load_records
from lmiamap.map_view import FoliumMapView
from lmiamap.records import known_categories
from lmiamap.reporting import build_run_summary, ensure_dir, render_summary_lines, write_json_object
from lmiamap.surfaces import StatusSurfaces

logger = logging.getLogger("run")


def _repo_root() -> Path:
    return Path(__file__).resolve().parent


def load_env(path: str = ".env", root_dir: Optional[Path] = None) -> None:
    """Optionally load a repo-root .env file without overriding real env vars."""
    root = Path(root_dir) if root_dir else _repo_root()
    env_path = (root / path).resolve()
    if not env_path.exists():
        return
    _load_dotenv(dotenv_path=env_path, override=False)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Map LMIA applications by province and program stream")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--preflight", action="store_true", help="Check data source and regions only")
    group.add_argument("--list-provinces", action="store_true", help="Print province codes and exit")
    group.add_argument("--list-streams", action="store_true", help="Print program streams in the data and exit")
    group.add_argument("--all-provinces", action="store_true", help="Write one map per province")
    parser.add_argument("--data", type=str, default=None, help="Path or http(s) URL of the LMIA JSON feed")
    parser.add_argument("--province", type=str, default=None, help="Province/territory code, e.g. ON")
    parser.add_argument("--stream", type=str, default=config.ALL_CATEGORIES, help="Program stream or 'all'")
    parser.add_argument("--out", type=str, default=None, help="HTML output path")
    parser.add_argument("--out-dir", type=str, default=None)
    parser.add_argument("--summary", type=str, default=None, help="Write render summary JSON here")
    parser.add_argument("--config", type=str, default=None, help="Path to map_config.json")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logs")
    return parser.parse_args(argv)


def resolve_data_source(arg: Optional[str]) -> str:
    return arg or os.environ.get(config.DATA_SOURCE_ENV) or config.DEFAULT_DATA_SOURCE


def resolve_output_dir(arg: Optional[str]) -> str:
    return arg or os.environ.get(config.OUTPUT_DIR_ENV) or config.OUTPUT_DIR


def run_preflight(source: str) -> int:
    ok = True
    print(f"Regions: {len(regions.REGIONS)} ({', '.join(regions.region_codes())})")
    if config.DEFAULT_REGION in regions.REGIONS:
        print(f"Default region: OK ({config.DEFAULT_REGION})")
    else:
        print(f"Default region: FAIL ({config.DEFAULT_REGION} not in registry)")
        ok = False

    if is_url(source):
        print(f"Data source: {source} (remote, not fetched)")
    elif Path(source).expanduser().exists():
        print(f"Data source: OK ({source})")
    else:
        print(f"Data source: MISSING ({source})")
        ok = False

    print("Preflight: PASS" if ok else "Preflight: FAIL")
    return 0 if ok else 1


def build_controller(province: str, stream: str) -> ViewController:
    region_control = ChoiceControl("province", regions.region_codes(), value=province)
    category_control = ChoiceControl("program-stream", [config.ALL_CATEGORIES], value=stream)
    return ViewController(
        map_view=FoliumMapView(),
        region_control=region_control,
        category_control=category_control,
        surfaces=StatusSurfaces(),
    )


def render_maps(
    controller: ViewController,
    province_codes: List[str],
    out_dir: str,
    out_path: Optional[str],
) -> List[Dict[str, Any]]:
    summaries: List[Dict[str, Any]] = []
    map_view = controller.map_view
    for code in province_codes:
        if controller.selection is None or controller.selection.region_code != code:
            controller.region_control.choose(code)
        path = out_path or os.path.join(out_dir, f"lmia_map_{code}.html")
        map_view.save(path, controller.surfaces)
        if controller.last_summary is not None:
            summaries.append(dict(controller.last_summary, output=path))
    return summaries


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    args = parse_args(argv)
    config.load_map_config(args.config)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    source = resolve_data_source(args.data)

    if args.list_provinces:
        for region in regions.REGIONS.values():
            print(f"{region.code}\t{region.name}")
        return 0

    if args.preflight:
        return run_preflight(source)

    if args.list_streams:
        try:
            records = load_records(source)
        except LoadFailure as exc:
            print(f"Load error: {exc}", file=sys.stderr)
            return 1
        for stream in known_categories(records):
            print(stream)
        return 0

    province = (args.province or config.DEFAULT_REGION).upper()
    try:
        regions.resolve(province)
    except regions.UnknownRegion as exc:
        print(f"{exc}. Known codes: {', '.join(regions.region_codes())}", file=sys.stderr)
        return 1

    controller = build_controller(province, args.stream)
    state = asyncio.run(controller.initialize(lambda: fetch_records(source)))
    if state is not ViewState.READY:
        message = controller.surfaces.visible_text(config.SURFACE_ERROR) or "Initialization failed"
        print(message, file=sys.stderr)
        return 1

    if args.stream != controller.category_control.value:
        logger.warning("Program stream %r not present in data", args.stream)
        category_control = controller.category_control
        category_control.set_options([*category_control.options, args.stream])
        category_control.choose(args.stream)

    out_dir = resolve_output_dir(args.out_dir)
    if args.all_provinces:
        ensure_dir(out_dir)
        summaries = render_maps(controller, regions.region_codes(), out_dir, None)
    else:
        out_path = args.out or os.path.join(out_dir, config.MAP_FILENAME)
        parent = os.path.dirname(out_path)
        if parent:
            ensure_dir(parent)
        summaries = render_maps(controller, [province], out_dir, out_path)

    summary = build_run_summary(summaries, total_records=len(controller.records))
    if args.summary:
        write_json_object(args.summary, summary)
    for line in render_summary_lines(summary):
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
