"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, request objects)
- task_store.py: in-memory store with an atomic read-modify-write primitive
- task_service.py: validation, timestamps, filtering, expiry policy
- task_sweeper.py: periodic sweep that drops old completed tasks
"""
