"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Subtask, Epic, TaskStatus, TaskType)
- id_allocator.py: id counter shared by all entity kinds of one store
- history.py: recently viewed entities (dedup by id, newest at the tail)
- prioritized.py: start-time ordered index + overlap check
- task_store.py: in-memory store, CRUD and epic aggregation
- task_codec.py / file_store.py: line-based data file and the write-through store
"""
