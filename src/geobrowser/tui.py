"""Full-screen terminal browser built on prompt_toolkit."""

from __future__ import annotations

import enum
import logging
from typing import Any

from prompt_toolkit import widgets
from prompt_toolkit.application import Application
from prompt_toolkit.data_structures import Point
from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.containers import ConditionalContainer
from prompt_toolkit.layout.controls import FormattedTextControl, UIContent, UIControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.styles import Style

from .canvas import BrailleCanvas
from .chart import draw_gdp_chart
from .config import AppConfig
from .data import DataCache
from .errors import LoadFailure
from .gdp import GdpData, format_gdp_value, load_gdp_data
from .models import Country, CountryInfo, Frame, World
from .navigation import Navigator
from .render import build_frame

_LOGGER = logging.getLogger("geobrowser.tui")

HELP_TEXT = (
    "Up/Down: move in list\n"
    "Enter: drill down (world > continent > country)\n"
    "Esc / Backspace: back\n"
    "Tab: GDP chart / next panel\n"
    "q: quit"
)

STYLE = Style.from_dict(
    {
        "list.selected": "fg:ansired bold",
        "map.outline": "fg:ansiwhite",
        "map.highlight": "fg:ansired",
        "chart.line": "fg:ansigreen",
        "status.error": "fg:ansiwhite bg:ansired",
        "status": "reverse",
    }
)

Fragments = list[tuple[str, str]]


class Panel(enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    def next(self) -> Panel:
        order = list(Panel)
        return order[(order.index(self) + 1) % len(order)]


def canvas_fragments(canvas: BrailleCanvas, plain: str, marked: str) -> list[Fragments]:
    """Style runs per canvas row, merging neighbouring cells of the same style."""
    lines: list[Fragments] = []
    for row in canvas.cells():
        fragments: Fragments = []
        for ch, highlighted in row:
            style = marked if highlighted else plain
            if fragments and fragments[-1][0] == style:
                fragments[-1] = (style, fragments[-1][1] + ch)
            else:
                fragments.append((style, ch))
        lines.append(fragments)
    return lines


class MapControl(UIControl):
    """Draws the current region frame sized to the window it is given."""

    def __init__(self, browser: Browser) -> None:
        self.browser = browser
        self._cache_key: tuple[Any, ...] | None = None
        self._geometry: Any = None
        self._lines: list[Fragments] = []

    def create_content(self, width: int, height: int) -> UIContent:
        width, height = max(width, 1), max(height, 1)
        state = self.browser.navigator.state
        highlight = state.selected_name
        key = (highlight, width, height)
        if key != self._cache_key or state.geometry is not self._geometry:
            canvas = BrailleCanvas(width, height)
            canvas.draw_frame(self.browser.frame_for(canvas, highlight))
            self._lines = canvas_fragments(canvas, "class:map.outline", "class:map.highlight")
            self._cache_key = key
            self._geometry = state.geometry
        lines = self._lines
        return UIContent(get_line=lambda i: lines[i], line_count=len(lines), show_cursor=False)


class ChartControl(UIControl):
    def __init__(self, browser: Browser) -> None:
        self.browser = browser

    def create_content(self, width: int, height: int) -> UIContent:
        canvas = draw_gdp_chart(self.browser.chart_series or {}, max(width, 1), max(height, 1))
        lines = canvas_fragments(canvas, "", "class:chart.line")
        return UIContent(get_line=lambda i: lines[i], line_count=len(lines), show_cursor=False)


class Browser:
    """Binds the navigator to the prompt_toolkit layout and key map."""

    def __init__(
        self,
        cfg: AppConfig,
        navigator: Navigator,
        cache: DataCache,
        gdp: GdpData | None = None,
    ) -> None:
        self.cfg = cfg
        self.navigator = navigator
        self.cache = cache
        self.gdp = gdp
        self.active_panel = Panel.LEFT
        self.country_info: CountryInfo | None = None
        self.fun_fact: str | None = None
        self.current_gdp: tuple[int, float] | None = None
        self.chart_series: dict[int, float] | None = None
        self._refresh_details()

    # -- pipeline --------------------------------------------------------

    def frame_for(self, canvas: BrailleCanvas, highlight: str | None) -> Frame:
        width, height = canvas.surface_size
        return build_frame(
            self.navigator.state.geometry,
            width,
            height,
            threshold=self.cfg.render.minor_polygon_threshold,
            min_extent=self.cfg.render.min_extent_deg,
            highlight=highlight,
        )

    # -- actions ---------------------------------------------------------

    def move(self, delta: int) -> None:
        self.navigator.move_selection(delta)

    def enter(self) -> None:
        if self.navigator.state.chart_active:
            return
        before = self.navigator.state
        try:
            after = self.navigator.descend()
        except LoadFailure:
            return
        if after is not before:
            self._refresh_details()

    def back(self) -> None:
        if self.navigator.state.chart_active:
            return
        before = self.navigator.state
        try:
            after = self.navigator.ascend()
        except LoadFailure:
            return
        if after is not before:
            self._refresh_details()

    def tab(self) -> None:
        state = self.navigator.state
        if isinstance(state.level, Country) and self.current_gdp is not None:
            state = self.navigator.toggle_auxiliary_view()
            if state.chart_active and self.gdp is not None:
                self.chart_series = self.gdp.series(state.level.name)
            return
        self.active_panel = self.active_panel.next()

    def _refresh_details(self) -> None:
        level = self.navigator.state.level
        if isinstance(level, Country):
            self.country_info = self.cache.load_region_metadata(level.name)
            self.fun_fact = self.cache.random_fun_fact(level.name)
            self.current_gdp = self.gdp.latest(level.name) if self.gdp is not None else None
        else:
            self.country_info = None
            self.fun_fact = None
            self.current_gdp = None
        self.chart_series = None

    # -- text ------------------------------------------------------------

    def region_label(self) -> str:
        level = self.navigator.state.level
        return "World" if isinstance(level, World) else level.key

    def list_fragments(self) -> Fragments:
        state = self.navigator.state
        fragments: Fragments = []
        for idx, name in enumerate(state.names):
            if idx == state.selected:
                fragments.append(("class:list.selected", f">> {name}\n"))
            else:
                fragments.append(("", f"   {name}\n"))
        return fragments

    def info_text(self) -> str:
        if self.country_info is not None:
            return self.country_info.describe()
        count = self.navigator.state.geometry.feature_count
        return f"{self.region_label()} – {count} objects\n\n{HELP_TEXT}"

    def gdp_text(self) -> str:
        if self.current_gdp is None:
            return "Select a country to view GDP data"
        year, value = self.current_gdp
        return f"GDP ({year}):\n{format_gdp_value(value)}\nPress Tab to view chart!"

    def fact_text(self) -> str:
        return self.fun_fact or "Select a country to view a fun fact"

    def status_fragments(self) -> Fragments:
        if self.navigator.last_error:
            return [("class:status.error", f" {self.navigator.last_error} ")]
        ctx = self.navigator.context()
        position = f"{ctx.selected + 1}/{ctx.count}" if ctx.count else "0/0"
        return [("class:status", f" {ctx.level} | {self.region_label()} | {position} ")]

    def panel_title(self, panel: Panel, title: str) -> str:
        return f"[{title}]" if panel is self.active_panel else title

    # -- application -----------------------------------------------------

    def build_layout(self) -> Layout:
        ui = self.cfg.ui
        chart_visible = Condition(lambda: self.navigator.state.chart_active)

        list_window = Window(
            FormattedTextControl(
                self.list_fragments,
                get_cursor_position=lambda: Point(0, self.navigator.state.selected),
            ),
            always_hide_cursor=True,
        )
        right_column = HSplit(
            [
                widgets.Frame(
                    Window(FormattedTextControl(self.info_text), wrap_lines=True),
                    title=lambda: self.panel_title(Panel.RIGHT, "Info"),
                    height=Dimension(weight=40),
                ),
                widgets.Frame(
                    Window(FormattedTextControl(self.gdp_text), wrap_lines=True),
                    title="GDP",
                    height=Dimension(weight=30),
                ),
                widgets.Frame(
                    Window(FormattedTextControl(self.fact_text), wrap_lines=True),
                    title="Did you know?",
                    height=Dimension(weight=30),
                ),
            ],
            width=Dimension(weight=ui.info_width_pct),
        )
        main_view = VSplit(
            [
                widgets.Frame(
                    list_window,
                    title=lambda: self.panel_title(Panel.LEFT, "Selection"),
                    width=Dimension(weight=ui.list_width_pct),
                ),
                widgets.Frame(
                    Window(MapControl(self)),
                    title=lambda: self.panel_title(
                        Panel.CENTER, self.navigator.state.selected_name or self.region_label()
                    ),
                    width=Dimension(weight=ui.map_width_pct),
                ),
                right_column,
            ]
        )
        chart_view = widgets.Frame(
            Window(ChartControl(self)),
            title=lambda: (
                f"{self.navigator.state.selected_name} GDP History "
                "(Press Tab to return to map view)"
            ),
        )
        root = HSplit(
            [
                ConditionalContainer(main_view, filter=~chart_visible),
                ConditionalContainer(chart_view, filter=chart_visible),
                Window(FormattedTextControl(self.status_fragments), height=1),
            ]
        )
        return Layout(root)

    def key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("q")
        @kb.add("c-c")
        def _quit(event: Any) -> None:
            event.app.exit()

        @kb.add("up")
        def _up(event: Any) -> None:
            self.move(-1)

        @kb.add("down")
        def _down(event: Any) -> None:
            self.move(1)

        @kb.add("enter")
        def _enter(event: Any) -> None:
            self.enter()

        @kb.add("escape", eager=True)
        @kb.add("backspace")
        def _back(event: Any) -> None:
            self.back()

        @kb.add("tab")
        def _tab(event: Any) -> None:
            self.tab()

        return kb

    def application(self) -> Application[None]:
        return Application(
            layout=self.build_layout(),
            key_bindings=self.key_bindings(),
            style=STYLE,
            full_screen=True,
        )


def run_browser(cfg: AppConfig) -> int:
    cache = DataCache(cfg.paths.data_dir)
    navigator = Navigator(cache)
    gdp = load_gdp_data(cfg.paths.gdp_csv)
    browser = Browser(cfg, navigator, cache, gdp)
    _LOGGER.info("Starting browser with data from %s", cfg.paths.data_dir)
    browser.application().run()
    return 0
