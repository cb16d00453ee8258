"""
HTTP routes for the todos API.

One resource endpoint; the verb selects the operation. Errors are raised as
TodoError subclasses and rendered by the handlers registered in app.py.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from todos.errors import StoreError
from todos.services import TodoService

from todos_api.dependencies import get_todo_service
from todos_api.schemas import (
    CreateTodoRequest,
    DeleteTodoRequest,
    DeleteTodoResponse,
    ErrorResponse,
    TodoResponse,
    UpdateTodoRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("/todos", response_model=list[TodoResponse], responses={500: _ERRORS[500]})
async def list_todos(service: TodoService = Depends(get_todo_service)):
    """All todos, newest first."""
    try:
        todos = await service.list()
    except StoreError as e:
        logger.error(f"GET Error: {e.details}")
        raise
    return [todo.to_dict() for todo in todos]


@router.post(
    "/todos",
    response_model=TodoResponse,
    status_code=201,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
)
async def create_todo(
    payload: CreateTodoRequest,
    service: TodoService = Depends(get_todo_service),
):
    try:
        todo = await service.create(payload.title)
    except StoreError as e:
        logger.error(f"POST Error: {e.details}")
        raise
    return todo.to_dict()


@router.put("/todos", response_model=TodoResponse, responses=_ERRORS)
async def update_todo(
    payload: UpdateTodoRequest,
    service: TodoService = Depends(get_todo_service),
):
    """Set `done` to the supplied value."""
    try:
        todo = await service.set_done(payload.id, payload.done)
    except StoreError as e:
        logger.error(f"PUT Error: {e.details}")
        raise
    return todo.to_dict()


@router.delete("/todos", response_model=DeleteTodoResponse, responses=_ERRORS)
async def delete_todo(
    payload: DeleteTodoRequest,
    service: TodoService = Depends(get_todo_service),
):
    try:
        await service.delete(payload.id)
    except StoreError as e:
        logger.error(f"DELETE Error: {e.details}")
        raise
    return {"success": True}
