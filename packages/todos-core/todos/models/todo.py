"""
Todo model.

A todo is the single entity of the application: a title plus a completion flag.
The store assigns `id` and `created_at`; only `done` ever changes afterwards.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass
class Todo:
    """
    A todo item.

    Attributes:
        id: Store-assigned identifier (opaque text)
        title: Trimmed, non-empty title
        done: Completion flag
        created_at: When the store inserted the row
    """

    id: str
    title: str
    done: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to the JSON wire shape."""
        return {
            "id": self.id,
            "title": self.title,
            "done": self.done,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Todo":
        """Create Todo from a database row or API payload."""
        created_at = data.get("createdAt", data.get("created_at"))
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            done=_parse_bool(data.get("done", False)),
            created_at=_parse_datetime(created_at),
        )


def _parse_bool(value: Any) -> bool:
    # SQLite hands back 0/1
    if isinstance(value, str):
        return value.lower() in ("1", "t", "true")
    return bool(value)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).strip().replace(" ", "T", 1)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)
