# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import ProjectRepo, TaskNotifier, TaskRepo


@dataclass
class AppState:
    """
    Wired application objects, built once in cli/bootstrap.py.

    Settings are kept on the state for easy access in command handlers.
    """

    settings: object

    tasks: TaskRepo
    projects: ProjectRepo
    notifier: TaskNotifier
