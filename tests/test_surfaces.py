import pytest

from lmiamap import config
from lmiamap.surfaces import StatusSurfaces


def test_surfaces_are_created_lazily():
    surfaces = StatusSurfaces()
    assert surfaces.peek(config.SURFACE_EMPTY) is None
    assert surfaces.to_html() == ""

    surfaces.hide_empty_state()
    surfaces.show_loading(False)

    assert surfaces.peek(config.SURFACE_EMPTY) is None
    assert surfaces.peek(config.SURFACE_LOADING) is None


def test_set_text_is_idempotent():
    surfaces = StatusSurfaces()
    surfaces.set_status("Map updated: Showing 1 LMIA applications in Yukon.")
    surfaces.set_status("Map updated: Showing 1 LMIA applications in Yukon.")

    assert surfaces.visible_text(config.SURFACE_STATUS) == "Map updated: Showing 1 LMIA applications in Yukon."
    assert surfaces.to_html().count('id="map-status"') == 1


def test_loading_banner_toggles():
    surfaces = StatusSurfaces()
    surfaces.show_loading(True)
    assert surfaces.visible_text(config.SURFACE_LOADING) == "Loading data..."

    surfaces.show_loading(False)

    assert surfaces.visible_text(config.SURFACE_LOADING) is None
    assert 'style="display: none"' in surfaces.to_html()


def test_banner_text_is_escaped():
    surfaces = StatusSurfaces()
    surfaces.show_empty_state("No LMIA applications found for <b> stream in Ontario.")

    html = surfaces.to_html()

    assert "&lt;b&gt;" in html
    assert "<b>" not in html


def test_accessibility_attributes():
    surfaces = StatusSurfaces()
    surfaces.set_status("x")
    surfaces.show_error("y")

    html = surfaces.to_html()

    assert 'aria-live="polite"' in html
    assert 'role="alert"' in html
    assert html.index('id="error"') < html.index('id="map-status"')


def test_unknown_surface_id():
    with pytest.raises(ValueError):
        StatusSurfaces().get("sidebar")
