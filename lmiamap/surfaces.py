"""Text banners shown next to the map: status, error, empty state, loading."""
from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Dict, List, Optional

from . import config


@dataclass
class TextSurface:
    surface_id: str
    css_class: str
    role: Optional[str] = None
    aria_live: Optional[str] = None
    text: str = ""
    visible: bool = False

    def show(self, text: Optional[str] = None) -> None:
        if text is not None:
            self.text = text
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def to_html(self) -> str:
        attrs = [f'id="{html.escape(self.surface_id)}"', f'class="{html.escape(self.css_class)}"']
        if self.role:
            attrs.append(f'role="{self.role}"')
        if self.aria_live:
            attrs.append(f'aria-live="{self.aria_live}"')
        if not self.visible:
            attrs.append('style="display: none"')
        return f"<div {' '.join(attrs)}>{html.escape(self.text)}</div>"


# surface id -> (css class, role, aria-live)
_SURFACE_ATTRS = {
    config.SURFACE_STATUS: ("map-status", "status", "polite"),
    config.SURFACE_ERROR: ("error-message", "alert", None),
    config.SURFACE_EMPTY: ("empty-state-message", None, None),
    config.SURFACE_LOADING: ("loading-message", None, None),
}


class StatusSurfaces:
    """Four idempotent "set visible text" channels, created on first use."""

    def __init__(self) -> None:
        self._surfaces: Dict[str, TextSurface] = {}

    def get(self, surface_id: str) -> TextSurface:
        surface = self._surfaces.get(surface_id)
        if surface is None:
            if surface_id not in _SURFACE_ATTRS:
                raise ValueError(f"Unknown surface: {surface_id}")
            css_class, role, aria_live = _SURFACE_ATTRS[surface_id]
            surface = TextSurface(surface_id, css_class, role=role, aria_live=aria_live)
            self._surfaces[surface_id] = surface
        return surface

    def peek(self, surface_id: str) -> Optional[TextSurface]:
        return self._surfaces.get(surface_id)

    def visible_text(self, surface_id: str) -> Optional[str]:
        surface = self._surfaces.get(surface_id)
        if surface is None or not surface.visible:
            return None
        return surface.text

    def set_status(self, message: str) -> None:
        self.get(config.SURFACE_STATUS).show(message)

    def show_error(self, message: str) -> None:
        self.get(config.SURFACE_ERROR).show(message)

    def show_empty_state(self, message: str) -> None:
        self.get(config.SURFACE_EMPTY).show(message)

    def hide_empty_state(self) -> None:
        surface = self._surfaces.get(config.SURFACE_EMPTY)
        if surface is not None:
            surface.hide()

    def show_loading(self, show: bool) -> None:
        if show:
            self.get(config.SURFACE_LOADING).show("Loading data...")
            return
        surface = self._surfaces.get(config.SURFACE_LOADING)
        if surface is not None:
            surface.hide()

    def to_html(self) -> str:
        # Banners sit above the map, error first.
        order: List[str] = [
            config.SURFACE_ERROR,
            config.SURFACE_LOADING,
            config.SURFACE_EMPTY,
            config.SURFACE_STATUS,
        ]
        return "\n".join(self._surfaces[sid].to_html() for sid in order if sid in self._surfaces)
