"""HTTP handlers for task operations.

Handlers convert between DTOs (API contracts) and service calls. Errors are
raised as ``AppError`` subclasses and rendered by the app's exception handler.
"""

from newsletter_api.dto import CreateTaskRequest, TaskItem, TaskListResponse, UpdateTaskRequest
from newsletter_api.services import TaskService


class TaskHandler:
    """HTTP handlers for the public task list."""

    def __init__(self, task_service: TaskService) -> None:
        self._tasks = task_service

    async def list_tasks(self) -> TaskListResponse:
        """Handle GET /tasks (read-through cached)."""
        result = await self._tasks.list()
        return TaskListResponse(
            cache=result.origin.value,
            data=[TaskItem.model_validate(record) for record in result.records],
        )

    async def get_task(self, task_id: int) -> TaskItem:
        """Handle GET /tasks/{id}."""
        return TaskItem.model_validate(await self._tasks.get(task_id))

    async def create_task(self, request: CreateTaskRequest) -> TaskItem:
        """Handle POST /tasks."""
        return TaskItem.model_validate(await self._tasks.create(request.description))

    async def update_task(self, task_id: int, request: UpdateTaskRequest) -> TaskItem:
        """Handle PUT /tasks/{id}."""
        return TaskItem.model_validate(await self._tasks.update(task_id, request.changes()))

    async def delete_task(self, task_id: int) -> None:
        """Handle DELETE /tasks/{id}."""
        await self._tasks.delete(task_id)
