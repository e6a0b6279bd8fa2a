"""Output helpers: atomic file writes and render summaries."""
from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO

from . import config


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _fsync_dir(path: str) -> None:
    try:
        dir_fd = os.open(path, os.O_DIRECTORY)
    except (OSError, AttributeError):
        return
    try:
        os.fsync(dir_fd)
    except OSError:
        pass
    finally:
        os.close(dir_fd)


@contextmanager
def atomic_writer(
    path: str,
    mode: str = "w",
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> Iterator[TextIO]:
    dir_path = os.path.dirname(path) or "."
    base = os.path.basename(path)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{base}.", suffix=".tmp", dir=dir_path)
    try:
        with os.fdopen(fd, mode, encoding=encoding, newline=newline) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        _fsync_dir(dir_path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def atomic_write_text(path: str, text: str) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        f.write(text)


def write_json_object(path: str, payload: Dict[str, Any]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)


def build_run_summary(renders: Iterable[Dict[str, Any]], total_records: int) -> Dict[str, Any]:
    renders = list(renders)
    return {
        "generated_at": utc_now_iso(),
        "total_records": total_records,
        "renders": renders,
        "plotted_total": sum(int(r.get("plotted", 0)) for r in renders),
        "dropped_total": sum(int(r.get("dropped", 0)) for r in renders),
    }


def render_summary_lines(summary: Dict[str, Any]) -> List[str]:
    lines = [f"Records loaded: {summary.get('total_records', 0)}"]
    for render in summary.get("renders", []):
        stream = render.get("category")
        stream_text = f" [{stream}]" if stream and stream != config.ALL_CATEGORIES else ""
        lines.append(
            f"- {render.get('region_code')} {render.get('region_name')}{stream_text}: "
            f"plotted={render.get('plotted', 0)} matched={render.get('matched', 0)} "
            f"dropped={render.get('dropped', 0)}"
        )
    return lines
