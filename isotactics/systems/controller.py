from __future__ import annotations

import logging
from typing import FrozenSet, Optional, Set, Tuple

from ..components import NOTHING_SELECTED, SelectedUnit, Selection, Unit
from ..events import (
    DeselectUnit,
    EventBus,
    HoverTileChanged,
    MoveCommand,
    MoveRejected,
    PathAssigned,
    ReachableChanged,
    SelectUnit,
    UnitDeselected,
    UnitSelected,
)
from ..grid import Map
from ..pathing import PathStatus, reachable, shortest_path
from ..pos import Pos
from ..world import Roster
from .motion import MotionSystem

logger = logging.getLogger(__name__)


class ControllerSystem:
    """
    Selection state, hover, reachable set, path preview and path assignment.

    Clicks become queued requests (select / deselect / move); the simulation
    drains them in stage order and the handlers below apply them.
    """

    def __init__(self, grid: Map, roster: Roster, motion: MotionSystem, bus: EventBus) -> None:
        self.grid = grid
        self.roster = roster
        self.motion = motion
        self.bus = bus
        # subscriptions
        bus.subscribe(SelectUnit, self._on_select)
        bus.subscribe(DeselectUnit, self._on_deselect)
        bus.subscribe(MoveCommand, self._on_move)

        self.selection: Selection = NOTHING_SELECTED
        self._hovered: Optional[Pos] = None
        self._reachable: FrozenSet[Pos] = frozenset()
        self._preview: Tuple[Pos, ...] = ()
        self._assigned_this_tick: Set[int] = set()

    # --- Queries ---
    def selected_unit(self) -> Optional[Unit]:
        if isinstance(self.selection, SelectedUnit):
            return self.roster.get(self.selection.uid)
        return None

    @property
    def hovered(self) -> Optional[Pos]:
        return self._hovered

    # Exposed for RenderSystem
    @property
    def reachable(self) -> FrozenSet[Pos]:
        return self._reachable

    @property
    def preview(self) -> Tuple[Pos, ...]:
        return self._preview

    # --- Per tick ---
    def begin_tick(self) -> None:
        self._assigned_this_tick.clear()

    def set_hover(self, pos: Optional[Pos]) -> None:
        if pos != self._hovered:
            self._hovered = pos
            self.bus.publish(HoverTileChanged(pos))

    def interpret_click(self, pos: Optional[Pos]) -> None:
        """Turn a click on ``pos`` (None = empty space) into a queued request."""
        current = self.selected_unit()
        if pos is None:
            if current is not None:
                self.bus.post(DeselectUnit())
            return

        clicked = self.roster.at(pos)
        if clicked is not None:
            if current is not None and clicked.uid == current.uid:
                self.bus.post(DeselectUnit())
            else:
                self.bus.post(SelectUnit(clicked.uid))
            return

        if current is not None and pos in self._reachable:
            self.bus.post(MoveCommand(current.uid, pos))

    def refresh(self) -> None:
        """Recompute the reachable set and hover preview for the selected unit."""
        unit = self.selected_unit()
        if unit is None:
            found: FrozenSet[Pos] = frozenset()
        else:
            blocked = self.roster.positions(exclude=unit.uid)
            found = frozenset(reachable(self.grid, unit.pos, unit.move_range, blocked))
        if found != self._reachable:
            self._reachable = found
            self.bus.publish(ReachableChanged(found))

        self._preview = ()
        if unit is not None and self._hovered in self._reachable:
            plan = shortest_path(self.grid, unit.pos, self._hovered, self.roster.positions(exclude=unit.uid))
            self._preview = plan.path

    # --- Events ---
    def _on_select(self, ev: SelectUnit) -> None:
        unit = self.roster.get(ev.uid)
        if unit is None:
            logger.warning("select: no unit %d", ev.uid)
            return
        previous = self.selected_unit()
        if previous is not None:
            if previous.uid == ev.uid and self.selection.mode is ev.mode:
                return
            self.bus.publish(UnitDeselected(previous.uid))

        self.selection = SelectedUnit(ev.uid, ev.mode)
        logger.info("selected unit %d (%s)", ev.uid, ev.mode.value)
        self.bus.publish(UnitSelected(ev.uid, ev.mode))
        self.refresh()

    def _on_deselect(self, _: DeselectUnit) -> None:
        previous = self.selected_unit()
        self.selection = NOTHING_SELECTED
        if previous is None:
            return
        logger.info("deselected unit %d", previous.uid)
        self.bus.publish(UnitDeselected(previous.uid))
        self.refresh()

    def _on_move(self, ev: MoveCommand) -> None:
        # Only allow moving the selected unit
        unit = self.selected_unit()
        if unit is None or unit.uid != ev.uid:
            return
        if ev.uid in self._assigned_this_tick:
            logger.info("unit %d already has a path this tick; dropping move to %r", ev.uid, ev.target)
            return

        blocked = self.roster.positions(exclude=unit.uid)
        if ev.target not in reachable(self.grid, unit.pos, unit.move_range, blocked):
            self.bus.publish(MoveRejected(unit.uid, ev.target, "out_of_range"))
            return

        result = self.motion.assign(unit, ev.target, blocked)
        if result.status is not PathStatus.FOUND:
            logger.info("unit %d: no path to %r (%s)", unit.uid, ev.target, result.status.value)
            self.bus.publish(MoveRejected(unit.uid, ev.target, result.status.value))
            return

        self._assigned_this_tick.add(unit.uid)
        logger.info("unit %d: path of %d steps to %r", unit.uid, len(result), ev.target)
        self.bus.publish(PathAssigned(unit.uid, ev.target, result.path))
