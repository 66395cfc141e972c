"""Personal task tracker: tasks, epics and subtasks with derived epic state."""

__version__ = "0.1.0"
