"""Drag-to-move and drag-to-resize sessions for a single event.

The controller holds at most one gesture at a time. Candidate times live only
in the session until the gesture ends; the event itself is never mutated, and
the only side effect is one EventChange handed to ``on_change`` on commit.
Settings are fetched from the provider on every call so a changed row height
takes effect mid-session. The enable toggles are checked only when a gesture
begins; turning one off leaves a gesture already in progress alone.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Protocol

from .events import Event, start_of_day
from .grid import DayColumns, TimeGridMapper, round_half_up

logger = logging.getLogger(__name__)


class SessionActiveError(Exception):
    """Raised when a gesture starts while another one is in progress."""

    pass


class NoActiveSessionError(Exception):
    """Raised when a gesture call has no matching session."""

    pass


class InteractionSettings(Protocol):
    """The slice of configuration the controller reads."""

    row_height_px: float
    start_hour: int
    end_hour: int
    enable_drag_and_drop: bool
    enable_resize: bool


class SessionState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


class Edge(Enum):
    """Which handle of an event is being resized."""

    TOP = "top"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class Pointer:
    """Pointer position in grid pixels (scroll offset already applied)."""

    x: float
    y: float


@dataclass(frozen=True)
class EventChange:
    """The record handed to persistence when a gesture commits."""

    event_id: str
    start: datetime
    end: datetime


@dataclass(frozen=True)
class Preview:
    """Where the in-progress candidate should be drawn."""

    event_id: str
    start: datetime
    end: datetime
    top: float
    height: float
    column: int | None


@dataclass(frozen=True)
class DragSession:
    event: Event
    original_start: datetime
    original_end: datetime
    grab_offset_y: float
    columns: DayColumns
    candidate_start: datetime | None = None
    candidate_end: datetime | None = None


@dataclass(frozen=True)
class ResizeSession:
    event: Event
    edge: Edge
    original_start: datetime
    original_end: datetime
    initial_y: float
    candidate_start: datetime
    candidate_end: datetime


class InteractionController:
    """
    Stateful manager for one pointer gesture at a time.

    Starting a gesture while another is active is rejected with
    SessionActiveError; the active session is left untouched.
    """

    def __init__(
        self,
        settings: Callable[[], InteractionSettings],
        on_change: Callable[[EventChange], None] | None = None,
    ):
        self._settings = settings
        self._on_change = on_change
        self._session: DragSession | ResizeSession | None = None

    @property
    def state(self) -> SessionState:
        if isinstance(self._session, DragSession):
            return SessionState.DRAGGING
        if isinstance(self._session, ResizeSession):
            return SessionState.RESIZING
        return SessionState.IDLE

    @property
    def session(self) -> DragSession | ResizeSession | None:
        return self._session

    def _mapper(self, settings: InteractionSettings) -> TimeGridMapper:
        return TimeGridMapper(
            row_height_px=settings.row_height_px,
            start_hour=settings.start_hour,
            end_hour=settings.end_hour,
        )

    def _ensure_idle(self) -> None:
        if self._session is not None:
            raise SessionActiveError(
                f"Cannot start a new gesture while {self.state.value} "
                f"event {self._session.event.id!r}"
            )

    def _require(self, kind: type) -> DragSession | ResizeSession:
        if not isinstance(self._session, kind):
            raise NoActiveSessionError(f"No active {kind.__name__}")
        return self._session

    def _commit(self, event: Event, start: datetime, end: datetime) -> Event:
        self._session = None
        change = EventChange(event_id=event.id, start=start, end=end)
        logger.debug(f"Committing {event.id}: {start.isoformat()} - {end.isoformat()}")
        if self._on_change:
            self._on_change(change)
        return event.with_times(start, end)

    # ============== Drag ==============

    def begin_drag(
        self,
        event: Event,
        pointer: Pointer,
        columns: DayColumns | None = None,
    ) -> DragSession | None:
        """Start moving an event. Returns None when dragging is disabled."""
        settings = self._settings()
        if not settings.enable_drag_and_drop:
            logger.debug("Drag and drop disabled, ignoring drag start")
            return None
        self._ensure_idle()

        box_top = self._mapper(settings).time_to_offset(event.start)
        self._session = DragSession(
            event=event,
            original_start=event.start,
            original_end=event.end,
            grab_offset_y=pointer.y - box_top,
            columns=columns or DayColumns.single(event.start.date()),
        )
        logger.debug(f"Drag started for {event.id}")
        return self._session

    def update_drag(self, pointer: Pointer) -> Preview:
        """Recompute the snapped candidate for a pointer move."""
        session = self._require(DragSession)
        mapper = self._mapper(self._settings())

        row = mapper.nearest_row(pointer.y - session.grab_offset_y)
        day = session.columns.day_at(pointer.x)
        start = start_of_day(day) + timedelta(hours=row)
        end = start + (session.original_end - session.original_start)

        self._session = replace(session, candidate_start=start, candidate_end=end)
        return self.preview()

    def end_drag(self) -> Event | None:
        """
        Finish a drag.

        Returns the moved event, or None when the pointer never produced a
        candidate (nothing is emitted in that case).
        """
        session = self._require(DragSession)
        if session.candidate_start is None or session.candidate_end is None:
            self._session = None
            logger.debug(f"Drag of {session.event.id} ended without a move, discarded")
            return None
        return self._commit(session.event, session.candidate_start, session.candidate_end)

    # ============== Resize ==============

    def begin_resize(self, event: Event, edge: Edge, pointer: Pointer) -> ResizeSession | None:
        """Start resizing an event by one edge. Returns None when disabled."""
        settings = self._settings()
        if not settings.enable_resize:
            logger.debug("Resize disabled, ignoring resize start")
            return None
        self._ensure_idle()

        self._session = ResizeSession(
            event=event,
            edge=edge,
            original_start=event.start,
            original_end=event.end,
            initial_y=pointer.y,
            candidate_start=event.start,
            candidate_end=event.end,
        )
        logger.debug(f"Resize ({edge.value}) started for {event.id}")
        return self._session

    def update_resize(self, pointer: Pointer) -> bool:
        """
        Move the dragged edge by whole hours.

        Returns False (keeping the previous candidate) when the new edge would
        leave the event with no positive duration.
        """
        session = self._require(ResizeSession)
        settings = self._settings()
        hours = round_half_up((pointer.y - session.initial_y) / settings.row_height_px)
        delta = timedelta(hours=hours)

        if session.edge is Edge.TOP:
            start = session.original_start + delta
            if start >= session.candidate_end:
                return False
            self._session = replace(session, candidate_start=start)
        else:
            end = session.original_end + delta
            if end <= session.candidate_start:
                return False
            self._session = replace(session, candidate_end=end)
        return True

    def end_resize(self) -> Event:
        """Finish a resize with the last accepted candidate."""
        session = self._require(ResizeSession)
        return self._commit(session.event, session.candidate_start, session.candidate_end)

    # ============== Shared ==============

    def cancel(self) -> Event | None:
        """Abandon the active gesture; returns the untouched original event."""
        if self._session is None:
            return None
        event = self._session.event
        self._session = None
        logger.debug(f"Gesture on {event.id} cancelled")
        return event

    def preview(self) -> Preview | None:
        """Geometry of the current candidate, or None when idle."""
        session = self._session
        if session is None:
            return None

        start = session.candidate_start or session.original_start
        end = session.candidate_end or session.original_end
        mapper = self._mapper(self._settings())
        top = mapper.time_to_offset(start)
        bottom = mapper.time_to_offset(end, start.date())

        column = None
        if isinstance(session, DragSession):
            column = session.columns.index_of(start.date())

        return Preview(
            event_id=session.event.id,
            start=start,
            end=end,
            top=top,
            height=bottom - top,
            column=column,
        )
