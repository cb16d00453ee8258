"""
Hosted store backed by a Supabase project.

Talks to the project's PostgREST endpoint (/rest/v1/Todo) with the anon key.
The table itself is created by the postgres migrations, applied against the
project's database; this store never runs DDL.
"""

import logging
from typing import Optional

import httpx

from todos.errors import StoreError
from todos.models import Todo
from todos.stores.interface import TodoStore

logger = logging.getLogger(__name__)

TABLE = "Todo"


class SupabaseTodoStore(TodoStore):
    """Todo store using the Supabase REST API over httpx."""

    name = "supabase"

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            url: Project URL (https://<ref>.supabase.co)
            anon_key: Project anon (public) API key
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        if not url or not anon_key:
            raise ValueError("Missing Supabase environment variables")

        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def endpoint(self) -> str:
        return f"{self.url}/rest/v1/{TABLE}"

    async def connect(self) -> None:
        if self._client is not None:
            return

        self._client = httpx.AsyncClient(
            headers={
                "apikey": self.anon_key,
                "Authorization": f"Bearer {self.anon_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=self._transport,
        )
        logger.info(f"Supabase client initialized: {self.url}")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Supabase client closed")

    async def _request(self, method: str, message: str, **kwargs) -> list[dict]:
        """Send one request; return the JSON rows or raise StoreError."""
        if self._client is None:
            await self.connect()

        try:
            response = await self._client.request(method, self.endpoint, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Supabase request failed: {method} {self.endpoint}: {e}")
            raise StoreError.wrap(message, e) from e

        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.error(f"Supabase error {response.status_code}: {detail}")
            raise StoreError(message, details=detail)

        if not response.content:
            return []
        return response.json()

    async def list_all(self) -> list[Todo]:
        rows = await self._request(
            "GET",
            "Failed to fetch todos",
            params={"select": "*", "order": "createdAt.desc"},
        )
        return [Todo.from_dict(row) for row in rows]

    async def insert(self, title: str) -> Todo:
        rows = await self._request(
            "POST",
            "Failed to create todo",
            json={"title": title, "done": False},
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise StoreError("Failed to create todo", details="No row returned")

        todo = Todo.from_dict(rows[0])
        logger.info(f"Created todo: {todo.id} - {todo.title}")
        return todo

    async def update_done(self, todo_id: str, done: bool) -> Todo | None:
        rows = await self._request(
            "PATCH",
            "Failed to update todo",
            params={"id": f"eq.{todo_id}", "select": "*"},
            json={"done": done},
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            return None
        logger.info(f"Updated todo: {todo_id} done={done}")
        return Todo.from_dict(rows[0])

    async def delete_by_id(self, todo_id: str) -> bool:
        rows = await self._request(
            "DELETE",
            "Failed to delete todo",
            params={"id": f"eq.{todo_id}", "select": "id"},
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            return False
        logger.info(f"Deleted todo: {todo_id}")
        return True


def _error_detail(response: httpx.Response) -> str:
    """PostgREST errors are JSON objects with a `message` field."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or str(body)
    return str(body)
