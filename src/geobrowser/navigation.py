"""World -> continent -> country navigation state machine.

Transitions are plain functions from an ``AppState`` (and a region source)
to a new ``AppState``. A transition that cannot load its target raises
``LoadFailure`` before anything is built, so callers always hold either the
old state or the complete new one.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Protocol, assert_never

from .errors import LoadFailure, MalformedInputError, NotFoundError
from .models import (
    AppState,
    Continent,
    Country,
    HistoryEntry,
    NavigationContext,
    NavigationLevel,
    RegionGeometry,
    World,
)

_LOGGER = logging.getLogger("geobrowser.navigation")


class RegionSource(Protocol):
    def load_region_names(self, level: NavigationLevel) -> tuple[str, ...]: ...

    def load_region_geometry(self, level: NavigationLevel) -> RegionGeometry: ...


def _load(
    source: RegionSource, level: NavigationLevel, *, with_names: bool
) -> tuple[RegionGeometry, tuple[str, ...] | None]:
    try:
        names = source.load_region_names(level) if with_names else None
        geometry = source.load_region_geometry(level)
    except (NotFoundError, MalformedInputError) as exc:
        raise LoadFailure(level.key, f"Cannot load {level.tag} '{level.key}': {exc}") from exc
    return geometry, names


def child_level(level: NavigationLevel, name: str) -> NavigationLevel | None:
    """Level entered by descending into ``name``; ``None`` at the leaf."""
    match level:
        case World():
            return Continent(name)
        case Continent():
            return Country(name)
        case Country():
            return None
        case _:
            assert_never(level)


def level_depth(level: NavigationLevel) -> int:
    match level:
        case World():
            return 0
        case Continent():
            return 1
        case Country():
            return 2
        case _:
            assert_never(level)


def initial_state(source: RegionSource) -> AppState:
    """World level with the continent list and world outlines loaded."""
    level = World()
    geometry, names = _load(source, level, with_names=True)
    return AppState(level=level, selected=0, names=names or (), geometry=geometry)


def move_selection(state: AppState, delta: int) -> AppState:
    """Move the selection by ``delta``, clamped to the list bounds."""
    if not state.names:
        return state
    selected = min(max(state.selected + delta, 0), len(state.names) - 1)
    if selected == state.selected:
        return state
    return replace(state, selected=selected)


def descend(state: AppState, source: RegionSource) -> AppState:
    """Enter the selected child region.

    No-op at country level or on an empty list.

    Raises:
        LoadFailure: If the child's names or outlines cannot be loaded.
    """
    name = state.selected_name
    if name is None:
        return state
    target = child_level(state.level, name)
    if target is None:
        return state

    geometry, names = _load(source, target, with_names=True)
    entry = HistoryEntry(level=state.level, selected=state.selected, names=state.names)
    return AppState(
        level=target,
        selected=0,
        names=names or (),
        geometry=geometry,
        history=(*state.history, entry),
        chart_active=False,
    )


def ascend(state: AppState, source: RegionSource) -> AppState:
    """Return to the level recorded by the most recent history entry.

    No-op when the history is empty.

    Raises:
        LoadFailure: If the parent's outlines cannot be reloaded.
    """
    if not state.history:
        return state
    entry = state.history[-1]
    geometry, _ = _load(source, entry.level, with_names=False)
    return AppState(
        level=entry.level,
        selected=entry.selected,
        names=entry.names,
        geometry=geometry,
        history=state.history[:-1],
        chart_active=False,
    )


def toggle_auxiliary_view(state: AppState) -> AppState:
    return replace(state, chart_active=not state.chart_active)


def navigation_context(state: AppState) -> NavigationContext:
    return NavigationContext(
        level=state.level.tag,
        selected_name=state.selected_name,
        selected=state.selected,
        count=len(state.names),
    )


class Navigator:
    """Owns the one ``AppState`` and applies transitions to it."""

    def __init__(self, source: RegionSource, state: AppState | None = None) -> None:
        self.source = source
        self.state = state if state is not None else initial_state(source)
        self.last_error: str | None = None

    def move_selection(self, delta: int) -> AppState:
        self.state = move_selection(self.state, delta)
        return self.state

    def descend(self) -> AppState:
        return self._apply("descend", lambda state: descend(state, self.source))

    def ascend(self) -> AppState:
        return self._apply("ascend", lambda state: ascend(state, self.source))

    def toggle_auxiliary_view(self) -> AppState:
        self.state = toggle_auxiliary_view(self.state)
        return self.state

    def context(self) -> NavigationContext:
        return navigation_context(self.state)

    def _apply(self, name: str, transition: Callable[[AppState], AppState]) -> AppState:
        try:
            new_state = transition(self.state)
        except LoadFailure as exc:
            self.last_error = exc.message
            _LOGGER.warning("%s failed: %s", name, exc.message)
            raise
        self.last_error = None
        if new_state is not self.state:
            _LOGGER.debug(
                "%s: %s '%s' -> %s '%s' (depth %d)",
                name,
                self.state.level.tag,
                self.state.level.key,
                new_state.level.tag,
                new_state.level.key,
                new_state.depth,
            )
        self.state = new_state
        return self.state
