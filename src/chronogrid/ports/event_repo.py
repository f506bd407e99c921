"""Event repository interface."""

from typing import Protocol

from chronogrid.core.events import Event


class EventRepository(Protocol):
    """Interface for storing calendar events in any backend."""

    def list_events(self) -> list[Event]:
        """Fetch all base events (recurring ones unexpanded)."""
        ...

    def get_event(self, event_id: str) -> Event:
        """Fetch one event. Raises RecordNotFoundError if missing."""
        ...

    def create_event(self, event: Event) -> Event:
        """Store a new event. Returns it with its assigned identity."""
        ...

    def update_event(self, event: Event) -> Event:
        """Replace an existing event. Returns the stored version."""
        ...

    def delete_event(self, event_id: str) -> None:
        """Delete an event. Raises RecordNotFoundError if missing."""
        ...
