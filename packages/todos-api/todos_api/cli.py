"""
`todos` command line.

Runs the API server and migrations, and doubles as a terminal client for the
API: list (with completed/pending stats), add, toggle, rm.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional

import httpx

from todos.config import TodosConfig, get_config
from todos.models import Todo

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://127.0.0.1:8000/api"


class ClientError(Exception):
    """The API answered with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{message} (HTTP {status_code})")
        self.status_code = status_code
        self.message = message


class TodoClient:
    """Synchronous httpx client for the todos API."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 10.0,
    ):
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            transport=transport,
            timeout=timeout,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TodoClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _send(self, method: str, body: Optional[dict] = None):
        response = self._client.request(method, "/todos", json=body)
        if response.is_error:
            try:
                message = response.json().get("error", response.text)
            except ValueError:
                message = response.text
            raise ClientError(response.status_code, message)
        return response.json()

    def list(self) -> list[Todo]:
        return [Todo.from_dict(row) for row in self._send("GET")]

    def add(self, title: str) -> Todo:
        return Todo.from_dict(self._send("POST", {"title": title}))

    def set_done(self, todo_id: str, done: bool) -> Todo:
        return Todo.from_dict(self._send("PUT", {"id": todo_id, "done": done}))

    def toggle(self, todo_id: str) -> Todo:
        """Flip `done` by reading the current value and sending its negation."""
        current = next((t for t in self.list() if t.id == todo_id), None)
        if current is None:
            raise ClientError(404, "Todo not found")
        return self.set_done(todo_id, not current.done)

    def delete(self, todo_id: str) -> None:
        self._send("DELETE", {"id": todo_id})


def render_todos(todos: list[Todo]) -> str:
    """Render the list the way the web page shows it: stats, then one line per todo."""
    completed = sum(1 for t in todos if t.done)
    lines = [f"Total: {len(todos)}  Completed: {completed}  Pending: {len(todos) - completed}"]

    if not todos:
        lines.append("No todos yet.")
    for todo in todos:
        mark = "x" if todo.done else " "
        created = todo.created_at.strftime("%Y-%m-%d %H:%M") if todo.created_at else ""
        lines.append(f"[{mark}] {todo.title}  ({todo.id}) {created}".rstrip())

    return "\n".join(lines)


def configure_logging(config: TodosConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _serve(config: TodosConfig) -> int:
    import uvicorn

    from todos_api.app import create_app

    uvicorn.run(
        create_app(config),
        host=config.api.host,
        port=config.api.port,
        log_level=config.logging.level.lower(),
    )
    return 0


def _migrate(config: TodosConfig) -> int:
    from todos.stores import init_store

    async def do_migrate():
        store = await init_store(config, migrate=False)
        try:
            return await store.ensure_schema()
        finally:
            await store.close()

    applied = asyncio.run(do_migrate())
    print(f"Applied: {', '.join(applied)}" if applied else "Migrations complete")
    return 0


def _confirm(prompt: str) -> bool:
    return input(f"{prompt} [y/N] ").strip().lower() in ("y", "yes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todos", description="Todo list server and client")
    parser.add_argument(
        "--url",
        default=os.environ.get("TODOS_API_URL", DEFAULT_API_URL),
        help="API base URL for client commands",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Run the HTTP API")
    sub.add_parser("migrate", help="Apply pending database migrations")
    sub.add_parser("config", help="Show effective configuration (secrets masked)")
    sub.add_parser("list", help="List todos, newest first")

    add = sub.add_parser("add", help="Create a todo")
    add.add_argument("title")

    toggle = sub.add_parser("toggle", help="Flip a todo between done and pending")
    toggle.add_argument("id")

    rm = sub.add_parser("rm", help="Delete a todo")
    rm.add_argument("id")
    rm.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    return parser


def run_client_command(args: argparse.Namespace, client: TodoClient) -> int:
    """Execute one client subcommand, printing results. Returns the exit code."""
    try:
        if args.command == "list":
            print(render_todos(client.list()))
        elif args.command == "add":
            todo = client.add(args.title)
            print(f"Created {todo.id}: {todo.title}")
        elif args.command == "toggle":
            todo = client.toggle(args.id)
            print(f"{todo.title}: {'done' if todo.done else 'pending'}")
        elif args.command == "rm":
            if not args.yes and not _confirm(f"Delete todo {args.id}?"):
                print("Cancelled")
                return 1
            client.delete(args.id)
            print(f"Deleted {args.id}")
    except ClientError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"Error: could not reach API: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the `todos` command."""
    args = build_parser().parse_args(argv)
    config = get_config()
    configure_logging(config)

    command = args.command or "list"
    if command == "serve":
        return _serve(config)
    if command == "migrate":
        return _migrate(config)
    if command == "config":
        import json
        print(json.dumps(config.to_dict(), indent=2))
        return 0

    args.command = command
    with TodoClient(args.url) as client:
        return run_client_command(args, client)


if __name__ == "__main__":
    sys.exit(main())
