"""Calendar REST API adapter - HTTP client for events and tasks."""

import logging
from typing import Any

import requests

from chronogrid.config import Config, load_config
from chronogrid.core.events import Event
from chronogrid.core.tasks import Task
from chronogrid.ports.errors import RecordNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "http://localhost:3001/api"
REQUEST_TIMEOUT = 30


class AuthenticationError(Exception):
    """Raised when the API rejects the configured token."""

    pass


class CalendarApiAdapter:
    """
    Calendar backend API adapter.

    Implements EventRepository and TaskRepository protocols. Handles the
    bearer token and API calls. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self.base_url = (self.config.api_base_url or DEFAULT_API_BASE).rstrip("/")
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        if not self.config.api_token:
            raise AuthenticationError("No API token. Set API_TOKEN in chronogrid.conf.")
        return {"Authorization": f"Bearer {self.config.api_token}"}

    def _api_request(self, method: str, endpoint: str, payload: dict | None = None) -> Any:
        """Make authenticated API request."""
        resp = self._session.request(
            method,
            f"{self.base_url}{endpoint}",
            headers=self._headers(),
            json=payload,
            timeout=REQUEST_TIMEOUT,
        )

        if resp.status_code == 401:
            raise AuthenticationError(f"API rejected token: {resp.text}")
        if resp.status_code == 404:
            raise RecordNotFoundError(endpoint)
        resp.raise_for_status()

        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    @staticmethod
    def _payload(record: dict) -> dict:
        # The backend owns ids; they travel in the URL, not the body
        return {k: v for k, v in record.items() if k != "id"}

    # ============== Events ==============

    def list_events(self) -> list[Event]:
        events = []
        for data in self._api_request("GET", "/events") or []:
            try:
                events.append(Event.from_api(data))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed event {data.get('id')}: {e}")
        return events

    def get_event(self, event_id: str) -> Event:
        return Event.from_api(self._api_request("GET", f"/events/{event_id}"))

    def create_event(self, event: Event) -> Event:
        data = self._api_request("POST", "/events", self._payload(event.to_api()))
        return Event.from_api(data)

    def update_event(self, event: Event) -> Event:
        data = self._api_request("PUT", f"/events/{event.id}", self._payload(event.to_api()))
        return Event.from_api(data)

    def delete_event(self, event_id: str) -> None:
        self._api_request("DELETE", f"/events/{event_id}")

    # ============== Tasks ==============

    def list_tasks(self) -> list[Task]:
        return [Task.from_api(data) for data in self._api_request("GET", "/tasks") or []]

    def get_task(self, task_id: str) -> Task:
        return Task.from_api(self._api_request("GET", f"/tasks/{task_id}"))

    def create_task(self, task: Task) -> Task:
        return Task.from_api(self._api_request("POST", "/tasks", self._payload(task.to_api())))

    def update_task(self, task: Task) -> Task:
        data = self._api_request("PUT", f"/tasks/{task.id}", self._payload(task.to_api()))
        return Task.from_api(data)

    def delete_task(self, task_id: str) -> None:
        self._api_request("DELETE", f"/tasks/{task_id}")
