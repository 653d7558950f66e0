"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, AppSettings, TaskStats)
- task_store.py: authoritative in-memory list + mutation API, saves after every change
- autosave.py: periodic redundant flush in a background thread
"""
