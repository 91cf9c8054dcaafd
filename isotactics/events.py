from __future__ import annotations

import logging
import types
import weakref
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, Deque, FrozenSet, List, Optional, Tuple, Type, TypeVar

from .components import SelectMode
from .errors import IsoTacticsError
from .pos import Pos

logger = logging.getLogger(__name__)

E = TypeVar("E")  # event type variable
Handler = Callable[[Any], None]


@dataclass(frozen=True)
class Event:
    """Base event marker class."""


# --- App events ---
@dataclass(frozen=True)
class Quit(Event):
    pass


@dataclass(frozen=True)
class ToggleDebug(Event):
    pass


# --- Requests (queued, drained once per tick in stage order) ---
@dataclass(frozen=True)
class SelectUnit(Event):
    uid: int
    mode: SelectMode = SelectMode.MOVE


@dataclass(frozen=True)
class DeselectUnit(Event):
    pass


@dataclass(frozen=True)
class MoveCommand(Event):
    uid: int
    target: Pos


# --- Notifications for UI / overlays ---
@dataclass(frozen=True)
class HoverTileChanged(Event):
    pos: Optional[Pos]


@dataclass(frozen=True)
class ReachableChanged(Event):
    positions: FrozenSet[Pos]


@dataclass(frozen=True)
class UnitSelected(Event):
    uid: int
    mode: SelectMode


@dataclass(frozen=True)
class UnitDeselected(Event):
    uid: int


@dataclass(frozen=True)
class PathAssigned(Event):
    uid: int
    target: Pos
    path: Tuple[Pos, ...]


@dataclass(frozen=True)
class MoveRejected(Event):
    uid: int
    target: Pos
    reason: str


@dataclass(frozen=True)
class UnitArrived(Event):
    uid: int
    pos: Pos


class EventBus:
    """
    EventBus with once=True support, optional weakrefs and a tick queue.

    - publish() dispatches immediately; post() queues until dispatch_pending()
    - handler failures are logged and dispatch continues, except the core's
      own errors (invariant/configuration), which propagate
    - unsubscribe by handler or handle id
    """

    def __init__(self) -> None:
        self._subs: DefaultDict[Type[Event], List[Tuple[int, bool, Any]]] = DefaultDict(list)
        self._next_id: int = 1
        self._queue: Deque[Event] = deque()

    def subscribe(
        self, event_type: Type[E], handler: Handler, *, once: bool = False, weak: bool = False
    ) -> int:
        handle_id = self._next_id
        self._next_id += 1

        wrapped: Any
        if weak and isinstance(handler, types.MethodType):
            wrapped = weakref.WeakMethod(handler)  # returns None if dead
        else:
            wrapped = handler

        self._subs[event_type].append((handle_id, once, wrapped))
        return handle_id

    def unsubscribe(self, event_type: Type[E], handle_id: Optional[int] = None, handler: Optional[Handler] = None) -> None:
        subs = self._subs.get(event_type)
        if not subs:
            return
        keep: List[Tuple[int, bool, Any]] = []
        for hid, once, wrapped in subs:
            if handle_id is not None and hid == handle_id:
                continue
            if handler is not None:
                target = wrapped() if isinstance(wrapped, weakref.WeakMethod) else wrapped
                if target == handler:
                    continue
            keep.append((hid, once, wrapped))
        self._subs[event_type] = keep

    def publish(self, event: Event) -> None:
        subs = self._subs.get(type(event), [])
        if not subs:
            return

        remove_ids: List[int] = []
        try:
            for handle_id, once, wrapped in list(subs):
                callback = wrapped() if isinstance(wrapped, weakref.WeakMethod) else wrapped
                if callback is None:
                    remove_ids.append(handle_id)
                    continue
                if once:
                    remove_ids.append(handle_id)
                try:
                    callback(event)
                except IsoTacticsError:
                    raise
                except Exception:
                    logger.exception("handler for %s failed", type(event).__name__)
        finally:
            if remove_ids:
                self._subs[type(event)] = [t for t in self._subs[type(event)] if t[0] not in remove_ids]

    # ---- Tick queue ----
    def post(self, event: Event) -> None:
        self._queue.append(event)

    def pending(self) -> Tuple[Event, ...]:
        """Snapshot of the queue, for inspection only."""
        return tuple(self._queue)

    def dispatch_pending(self, *event_types: Type[Event]) -> int:
        """
        Publish queued events of the given types (all if none given) in
        posting order. Others stay queued. Events posted by handlers wait
        for the next call.
        """
        if event_types:
            batch = [ev for ev in self._queue if isinstance(ev, event_types)]
            self._queue = deque(ev for ev in self._queue if not isinstance(ev, event_types))
        else:
            batch = list(self._queue)
            self._queue.clear()
        for ev in batch:
            self.publish(ev)
        return len(batch)
