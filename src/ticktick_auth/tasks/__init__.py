"""TickTick Open API client.

Manage TickTick projects and tasks with an OAuth access token.

Usage:
    from ticktick_auth.oauth import begin_auth
    from ticktick_auth.tasks import TickTickClient

    flow = begin_auth(client_id, "http://localhost:8080")
    # ... user visits flow.get_url(), browser is redirected back ...
    token = flow.finish_from_redirect(client_secret, redirect_url)

    with TickTickClient(token) as client:
        for project in client.list_projects():
            print(project.name)
"""

from __future__ import annotations

from ticktick_auth.tasks.client import TickTickClient
from ticktick_auth.tasks.exceptions import TickTickAPIError, TickTickError, UnauthorizedError
from ticktick_auth.tasks.models import (
    Column,
    Project,
    ProjectData,
    Subtask,
    SubtaskStatus,
    Task,
    TaskPriority,
    TaskStatus,
)

__all__ = [
    "TickTickClient",
    "Task",
    "Subtask",
    "Project",
    "ProjectData",
    "Column",
    "TaskPriority",
    "TaskStatus",
    "SubtaskStatus",
    "TickTickError",
    "TickTickAPIError",
    "UnauthorizedError",
]
