# Exp_Tracker/animations/cleanup.py
"""
TaskBin - Explicit disposer list.

Every subscription or handle acquired by an owner is added here at
acquisition time. do_cleaning() releases everything in reverse order.

Accepted tasks:
- Connections (anything with disconnect())
- Objects with destroy() (Signals, AnimationTracks, nested TaskBins)
- Plain callables (called with no arguments)
"""

from typing import Any, List


def _is_cleanable(task: Any) -> bool:
    return (
        callable(getattr(task, "disconnect", None))
        or callable(getattr(task, "destroy", None))
        or callable(task)
    )


def _release(task: Any) -> None:
    if callable(getattr(task, "disconnect", None)):
        task.disconnect()
    elif callable(getattr(task, "destroy", None)):
        task.destroy()
    else:
        task()


class TaskBin:
    """Ordered collection of things to release together."""

    def __init__(self):
        self._tasks: List[Any] = []

    def add(self, task: Any) -> Any:
        """Take ownership of a task and return it unchanged."""
        if not _is_cleanable(task):
            raise TypeError(f"Cannot clean up task of type {type(task).__name__}")
        self._tasks.append(task)
        return task

    def give_task(self, task: Any) -> int:
        """Take ownership of a task. Returns the number of held tasks."""
        self.add(task)
        return len(self._tasks)

    def do_cleaning(self) -> None:
        """Release every held task, newest first. The bin stays usable."""
        # Tasks added while releasing are kept for the next cleaning
        tasks, self._tasks = self._tasks, []
        for task in reversed(tasks):
            _release(task)

    destroy = do_cleaning

    def __len__(self) -> int:
        return len(self._tasks)

    def __repr__(self) -> str:
        return f"TaskBin({len(self._tasks)} tasks)"
