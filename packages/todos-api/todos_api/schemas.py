"""
Request and response schemas for the todos API.

Request fields are typed loosely on purpose: TodoService owns validation so
that every variant reports the same 400 messages.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class CreateTodoRequest(BaseModel):
    title: Any = None


class UpdateTodoRequest(BaseModel):
    id: Any = None
    done: Any = None


class DeleteTodoRequest(BaseModel):
    id: Any = None


class TodoResponse(BaseModel):
    id: str
    title: str
    done: bool
    createdAt: Optional[datetime] = None


class DeleteTodoResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
