"""Tasks module."""

from .task import ITask, Task, TaskResult

__all__ = ["ITask", "Task", "TaskResult"]
