"""Flat task manager (tkmn)."""

from .models import Task, TaskManager

__all__ = [
    'Task',
    'TaskManager',
]
