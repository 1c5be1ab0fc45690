"""Tests for the terminal browser's state handling and text panels.

The prompt_toolkit application itself is not started; these drive the
``Browser`` actions directly and render controls at fixed sizes.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from geobrowser.config import load_config
from geobrowser.data import DataCache
from geobrowser.gdp import load_gdp_data
from geobrowser.models import Continent, Country
from geobrowser.navigation import Navigator
from geobrowser.tui import Browser, ChartControl, MapControl, Panel


@pytest.fixture()
def browser(config_path: Path) -> Browser:
    cfg = load_config(config_path)
    cache = DataCache(cfg.paths.data_dir)
    return Browser(cfg, Navigator(cache), cache, load_gdp_data(cfg.paths.gdp_csv))


def _to_kenya(browser: Browser) -> None:
    browser.move(1)
    browser.enter()
    browser.move(2)
    browser.enter()


class TestBrowserActions:
    def test_list_marks_selection(self, browser: Browser) -> None:
        browser.move(1)
        fragments = browser.list_fragments()
        assert fragments[1] == ("class:list.selected", ">> Africa\n")
        assert fragments[0] == ("", "   Europe\n")

    def test_drill_down_loads_country_details(self, browser: Browser) -> None:
        _to_kenya(browser)
        assert browser.navigator.state.level == Country("Kenya")
        assert "Capital: Nairobi" in browser.info_text()
        assert browser.gdp_text().startswith("GDP (2022):\n113.40 bn USD")
        assert browser.fact_text() == "Kenya straddles the equator."

    def test_failed_enter_shows_error(self, browser: Browser) -> None:
        browser.enter()
        assert browser.navigator.state.depth == 0
        (style, text), = browser.status_fragments()
        assert style == "class:status.error"
        assert "Europe" in text

    def test_back_clears_details(self, browser: Browser) -> None:
        _to_kenya(browser)
        browser.back()
        assert browser.navigator.state.level == Continent("Africa")
        assert browser.country_info is None
        assert browser.gdp_text() == "Select a country to view GDP data"

    def test_tab_toggles_chart_at_country(self, browser: Browser) -> None:
        _to_kenya(browser)
        browser.tab()
        assert browser.navigator.state.chart_active
        assert browser.chart_series is not None
        # Navigation is frozen while the chart is shown.
        browser.back()
        assert browser.navigator.state.level == Country("Kenya")
        browser.tab()
        assert not browser.navigator.state.chart_active

    def test_tab_cycles_panels_elsewhere(self, browser: Browser) -> None:
        assert browser.active_panel is Panel.LEFT
        browser.tab()
        assert browser.active_panel is Panel.CENTER
        assert browser.panel_title(Panel.CENTER, "Map") == "[Map]"
        assert not browser.navigator.state.chart_active

    def test_no_chart_without_gdp(self, browser: Browser) -> None:
        browser.move(1)
        browser.enter()
        browser.move(3)
        browser.enter()
        assert browser.navigator.state.level == Country("Nigeria")
        browser.tab()
        assert not browser.navigator.state.chart_active

    def test_status_line(self, browser: Browser) -> None:
        browser.move(1)
        (style, text), = browser.status_fragments()
        assert style == "class:status"
        assert "world | World | 2/3" in text

    def test_enter_at_country_keeps_details(self, browser: Browser) -> None:
        _to_kenya(browser)
        browser.fun_fact = "kept"
        browser.enter()
        assert browser.navigator.state.level == Country("Kenya")
        assert browser.fact_text() == "kept"

    def test_failed_enter_keeps_view(self, browser: Browser, data_dir: Path) -> None:
        (data_dir / "country_africa.geojson").write_bytes(b'{"type": "\xff"}')
        browser.move(1)
        browser.enter()
        assert browser.navigator.state.depth == 0
        assert "Africa" in browser.navigator.last_error

    def test_info_text_counts_objects(self, browser: Browser) -> None:
        assert browser.info_text().startswith("World – 3 objects")


class TestControls:
    def test_map_control_renders_requested_size(self, browser: Browser) -> None:
        content = MapControl(browser).create_content(40, 12)
        assert content.line_count == 12
        text = "".join(fragment for _, fragment in content.get_line(0))
        assert len(text) == 40

    def test_map_highlights_selected_continent(self, browser: Browser) -> None:
        browser.move(1)
        content = MapControl(browser).create_content(40, 12)
        styles = {
            style for i in range(content.line_count) for style, _ in content.get_line(i)
        }
        assert "class:map.highlight" in styles

    def test_chart_control(self, browser: Browser) -> None:
        _to_kenya(browser)
        browser.tab()
        content = ChartControl(browser).create_content(60, 15)
        assert content.line_count == 15

    def test_layout_builds(self, browser: Browser) -> None:
        assert browser.build_layout() is not None
