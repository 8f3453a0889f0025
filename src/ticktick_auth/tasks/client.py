"""TickTick Open API client implementation."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from ticktick_auth.oauth.models import AccessToken
from ticktick_auth.tasks.exceptions import TickTickAPIError, UnauthorizedError
from ticktick_auth.tasks.models import (
    Project,
    ProjectData,
    ProjectKind,
    ProjectViewMode,
    Subtask,
    Task,
    TaskPriority,
    TaskStatus,
    format_datetime,
)

logger = logging.getLogger(__name__)


class TickTickClient:
    """TickTick Open API client authenticated with an OAuth access token.

    Covers the project and task calls needed to read and manage tasks; the
    token itself comes from an AuthorizationFlow.

    Usage:
        client = TickTickClient(token)

        # List projects
        projects = client.list_projects()

        # Create a task
        task = client.create_task("Review PR", project_id=projects[0].id)

        # Complete a task
        client.complete_task(task.project_id, task.id)
    """

    BASE_URL = "https://ticktick.com/open/v1"

    def __init__(
        self,
        access_token: AccessToken | str,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize TickTick client.

        Args:
            access_token: Token from AuthorizationFlow.finish_auth, or a raw token string.
            base_url: API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests).

        Raises:
            ValueError: If the access token is empty.
        """
        token = access_token.token if isinstance(access_token, AccessToken) else access_token
        if not token:
            raise ValueError("access_token must not be empty")

        if isinstance(access_token, AccessToken) and access_token.is_expired:
            logger.warning("Access token has expired; requests will likely be rejected")

        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    def _request(
        self,
        method: str,
        endpoint: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make an authenticated API request.

        Args:
            method: HTTP method.
            endpoint: API endpoint (e.g., "/project").
            json: JSON body for POST.

        Returns:
            Decoded JSON response, or None for an empty body.

        Raises:
            UnauthorizedError: If the token is rejected.
            TickTickAPIError: If the API returns an error or the request fails.
        """
        logger.debug(f"{method} {endpoint}")
        try:
            response = self._client.request(method, endpoint, json=json)
        except httpx.HTTPError as e:
            raise TickTickAPIError(f"Request failed: {e}") from e

        if response.status_code == 401:
            raise UnauthorizedError()
        elif response.status_code >= 400:
            raise TickTickAPIError(
                f"API error: {response.text}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TickTickAPIError(
                f"Invalid JSON response from {endpoint}",
                status_code=response.status_code,
            ) from e

    # =========================================================================
    # Projects
    # =========================================================================

    def list_projects(self) -> list[Project]:
        """List all projects of the authorized user."""
        items = self._request("GET", "/project") or []
        return [Project.from_api(item) for item in items]

    def get_project(self, project_id: str) -> Project:
        """Get a specific project.

        Args:
            project_id: Project ID.

        Returns:
            The Project.
        """
        return Project.from_api(self._request("GET", f"/project/{project_id}"))

    def get_project_data(self, project_id: str) -> ProjectData:
        """Get a project with its tasks and kanban columns.

        Args:
            project_id: Project ID.

        Returns:
            ProjectData for the project.
        """
        return ProjectData.from_api(self._request("GET", f"/project/{project_id}/data") or {})

    def create_project(
        self,
        name: str,
        color: str | None = None,
        view_mode: ProjectViewMode | None = None,
        kind: ProjectKind | None = None,
        sort_order: int | None = None,
    ) -> Project:
        """Create a new project.

        Args:
            name: Project name.
            color: Hex color, e.g. "#F18181".
            view_mode: "list", "kanban" or "timeline".
            kind: "TASK" or "NOTE".
            sort_order: Sort order value.

        Returns:
            Created Project.
        """
        if not name:
            raise ValueError("name must not be empty")

        body: dict[str, Any] = {"name": name}
        optional = {
            "color": color,
            "viewMode": ProjectViewMode(view_mode).value if view_mode is not None else None,
            "kind": ProjectKind(kind).value if kind is not None else None,
            "sortOrder": sort_order,
        }
        body.update({key: value for key, value in optional.items() if value is not None})

        return Project.from_api(self._request("POST", "/project", json=body))

    def update_project(self, project: Project) -> Project:
        """Send local changes made to a project.

        Args:
            project: Project with modified fields. Must have an id.

        Returns:
            Updated Project as returned by the API.
        """
        if not project.id:
            raise ValueError("project must have an id to be updated")
        result = self._request("POST", f"/project/{project.id}", json=project.to_api())
        return Project.from_api(result) if result else project

    def list_all_tasks(self) -> list[Task]:
        """List the tasks of every project."""
        tasks: list[Task] = []
        for project in self.list_projects():
            tasks.extend(self.get_project_data(project.id).tasks)
        return tasks

    # =========================================================================
    # Tasks
    # =========================================================================

    def get_task(self, project_id: str, task_id: str) -> Task:
        """Get a specific task.

        Args:
            project_id: ID of the project containing the task.
            task_id: Task ID.

        Returns:
            The Task.
        """
        return Task.from_api(self._request("GET", f"/project/{project_id}/task/{task_id}"))

    def create_task(
        self,
        title: str,
        project_id: str | None = None,
        content: str | None = None,
        desc: str | None = None,
        start_date: datetime | None = None,
        due_date: datetime | None = None,
        is_all_day: bool | None = None,
        time_zone: str | None = None,
        priority: TaskPriority | None = None,
        reminders: list[str] | None = None,
        repeat_flag: str | None = None,
        tags: list[str] | None = None,
        subtasks: list[Subtask] | None = None,
        sort_order: int | None = None,
        status: TaskStatus | None = None,
        completed_time: datetime | None = None,
    ) -> Task:
        """Create a new task.

        Args:
            title: Task title.
            project_id: Project to add the task to. Defaults to the inbox.
            content: Task content.
            desc: Checklist description.
            start_date: Start time.
            due_date: Due time.
            is_all_day: Whether the task is all-day.
            time_zone: IANA time zone name, e.g. "America/Los_Angeles".
            priority: Task priority.
            reminders: Reminder triggers, e.g. ["TRIGGER:P0DT9H0M0S"].
            repeat_flag: Recurrence rule, e.g. "RRULE:FREQ=DAILY;INTERVAL=1".
            tags: Tag names.
            subtasks: Checklist items.
            sort_order: Sort order value.
            status: Initial status, e.g. TaskStatus.COMPLETED.
            completed_time: Completion time for tasks created as completed.

        Returns:
            Created Task.
        """
        if not title:
            raise ValueError("title must not be empty")

        body: dict[str, Any] = {"title": title}
        optional = {
            "projectId": project_id,
            "content": content,
            "desc": desc,
            "startDate": format_datetime(start_date),
            "dueDate": format_datetime(due_date),
            "isAllDay": is_all_day,
            "timeZone": time_zone,
            "priority": int(priority) if priority is not None else None,
            "reminders": reminders,
            "repeatFlag": repeat_flag,
            "tags": tags,
            "sortOrder": sort_order,
            "status": int(status) if status is not None else None,
            "completedTime": format_datetime(completed_time),
        }
        body.update({key: value for key, value in optional.items() if value is not None})
        if subtasks:
            body["items"] = [subtask.to_api() for subtask in subtasks]

        return Task.from_api(self._request("POST", "/task", json=body))

    def update_task(self, task: Task) -> Task:
        """Send local changes made to a task.

        Args:
            task: Task with modified fields. Must have id and project_id.

        Returns:
            Updated Task as returned by the API.
        """
        if not task.id or not task.project_id:
            raise ValueError("task must have id and project_id to be updated")
        result = self._request("POST", f"/task/{task.id}", json=task.to_api())
        return Task.from_api(result) if result else task

    def complete_task(self, project_id: str, task_id: str) -> None:
        """Mark a task as completed.

        Args:
            project_id: ID of the project containing the task.
            task_id: Task ID to complete.
        """
        self._request("POST", f"/project/{project_id}/task/{task_id}/complete")

    def delete_task(self, project_id: str, task_id: str) -> None:
        """Delete a task.

        Args:
            project_id: ID of the project containing the task.
            task_id: Task ID to delete.
        """
        self._request("DELETE", f"/project/{project_id}/task/{task_id}")

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
