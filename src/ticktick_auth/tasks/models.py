"""TickTick project and task data types.

Field names follow the Open API reference, converted to snake_case.
Timestamps use TickTick's "yyyy-MM-dd'T'HH:mm:ssZ" format, e.g.
"2019-11-13T03:00:00+0000".
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any

DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def parse_datetime(value: str | None) -> datetime | None:
    """Parse a TickTick timestamp, returning None for empty or invalid values."""
    if not value:
        return None
    with contextlib.suppress(ValueError):
        return datetime.strptime(value, DATETIME_FORMAT)
    with contextlib.suppress(ValueError):
        # Some endpoints include milliseconds
        return datetime.strptime(value, "%Y-%m-%dT%H:%M:%S.%f%z")
    return None


def format_datetime(value: datetime | None) -> str | None:
    """Format a datetime for the TickTick API. Naive datetimes are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.strftime(DATETIME_FORMAT)


class TaskPriority(IntEnum):
    NONE = 0
    LOW = 1
    MEDIUM = 3
    HIGH = 5


class TaskStatus(IntEnum):
    NORMAL = 0
    COMPLETED = 2


class SubtaskStatus(IntEnum):
    NORMAL = 0
    COMPLETED = 1


class ProjectViewMode(str, Enum):
    LIST = "list"
    KANBAN = "kanban"
    TIMELINE = "timeline"


class ProjectPermission(str, Enum):
    READ = "read"
    WRITE = "write"
    COMMENT = "comment"


class ProjectKind(str, Enum):
    TASK = "TASK"
    NOTE = "NOTE"


def _enum_or_default(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass
class Subtask:
    """A checklist item inside a task (called "ChecklistItem" by the API)."""

    title: str
    id: str | None = None
    status: SubtaskStatus = SubtaskStatus.NORMAL
    completed_time: datetime | None = None
    is_all_day: bool = False
    sort_order: int = 0
    start_date: datetime | None = None
    time_zone: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Subtask:
        return cls(
            id=data.get("id"),
            title=data.get("title", ""),
            status=_enum_or_default(SubtaskStatus, data.get("status", 0), SubtaskStatus.NORMAL),
            completed_time=parse_datetime(data.get("completedTime")),
            is_all_day=bool(data.get("isAllDay", False)),
            sort_order=data.get("sortOrder", 0),
            start_date=parse_datetime(data.get("startDate")),
            time_zone=data.get("timeZone"),
        )

    def to_api(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "title": self.title,
            "status": int(self.status),
            "isAllDay": self.is_all_day,
            "sortOrder": self.sort_order,
        }
        if self.id:
            body["id"] = self.id
        if self.completed_time:
            body["completedTime"] = format_datetime(self.completed_time)
        if self.start_date:
            body["startDate"] = format_datetime(self.start_date)
        if self.time_zone:
            body["timeZone"] = self.time_zone
        return body


@dataclass
class Task:
    """Represents a TickTick task."""

    id: str
    project_id: str
    title: str
    content: str | None = None
    desc: str | None = None
    is_all_day: bool = False
    start_date: datetime | None = None
    due_date: datetime | None = None
    completed_time: datetime | None = None
    time_zone: str | None = None
    priority: TaskPriority = TaskPriority.NONE
    status: TaskStatus = TaskStatus.NORMAL
    sort_order: int = 0
    repeat_flag: str | None = None
    reminders: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    subtasks: list[Subtask] = field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        """Check if task is completed."""
        return self.status == TaskStatus.COMPLETED

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Task:
        """Parse task from API response."""
        return cls(
            id=data.get("id", ""),
            project_id=data.get("projectId", ""),
            title=data.get("title", ""),
            content=data.get("content"),
            desc=data.get("desc"),
            is_all_day=bool(data.get("isAllDay", False)),
            start_date=parse_datetime(data.get("startDate")),
            due_date=parse_datetime(data.get("dueDate")),
            completed_time=parse_datetime(data.get("completedTime")),
            time_zone=data.get("timeZone"),
            priority=_enum_or_default(TaskPriority, data.get("priority", 0), TaskPriority.NONE),
            status=_enum_or_default(TaskStatus, data.get("status", 0), TaskStatus.NORMAL),
            sort_order=data.get("sortOrder", 0),
            repeat_flag=data.get("repeatFlag"),
            reminders=list(data.get("reminders") or []),
            tags=list(data.get("tags") or []),
            # The API calls subtasks "items"
            subtasks=[Subtask.from_api(item) for item in data.get("items") or []],
        )

    def to_api(self) -> dict[str, Any]:
        """Serialize to an API request body, omitting unset fields."""
        body: dict[str, Any] = {
            "title": self.title,
            "isAllDay": self.is_all_day,
            "priority": int(self.priority),
            "status": int(self.status),
            "sortOrder": self.sort_order,
        }
        if self.id:
            body["id"] = self.id
        if self.project_id:
            body["projectId"] = self.project_id

        optional = {
            "content": self.content,
            "desc": self.desc,
            "startDate": format_datetime(self.start_date),
            "dueDate": format_datetime(self.due_date),
            "completedTime": format_datetime(self.completed_time),
            "timeZone": self.time_zone,
            "repeatFlag": self.repeat_flag,
        }
        body.update({key: value for key, value in optional.items() if value is not None})

        if self.reminders:
            body["reminders"] = list(self.reminders)
        if self.tags:
            body["tags"] = list(self.tags)
        if self.subtasks:
            body["items"] = [subtask.to_api() for subtask in self.subtasks]
        return body


@dataclass
class Project:
    """Represents a TickTick project (task list)."""

    id: str
    name: str
    color: str | None = None
    sort_order: int = 0
    closed: bool = False
    group_id: str | None = None
    view_mode: ProjectViewMode = ProjectViewMode.LIST
    permission: ProjectPermission = ProjectPermission.READ
    kind: ProjectKind = ProjectKind.TASK

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Project:
        """Parse project from API response. Unknown enum values fall back to defaults."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            color=data.get("color"),
            sort_order=data.get("sortOrder", 0),
            closed=bool(data.get("closed") or False),
            group_id=data.get("groupId"),
            view_mode=_enum_or_default(ProjectViewMode, data.get("viewMode"), ProjectViewMode.LIST),
            permission=_enum_or_default(
                ProjectPermission, data.get("permission"), ProjectPermission.READ
            ),
            kind=_enum_or_default(ProjectKind, data.get("kind"), ProjectKind.TASK),
        )

    def to_api(self) -> dict[str, Any]:
        """Serialize the writable project fields to an API request body."""
        body: dict[str, Any] = {
            "name": self.name,
            "sortOrder": self.sort_order,
            "viewMode": self.view_mode.value,
            "kind": self.kind.value,
        }
        if self.id:
            body["id"] = self.id
        if self.color:
            body["color"] = self.color
        return body


@dataclass
class Column:
    """A kanban column within a project."""

    id: str
    project_id: str
    name: str
    sort_order: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Column:
        return cls(
            id=data.get("id", ""),
            project_id=data.get("projectId", ""),
            name=data.get("name", ""),
            sort_order=data.get("sortOrder", 0),
        )


@dataclass
class ProjectData:
    """A project together with its undone tasks and kanban columns."""

    project: Project | None
    tasks: list[Task] = field(default_factory=list)
    columns: list[Column] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ProjectData:
        project = data.get("project")
        return cls(
            project=Project.from_api(project) if project else None,
            tasks=[Task.from_api(item) for item in data.get("tasks") or []],
            columns=[Column.from_api(item) for item in data.get("columns") or []],
        )
