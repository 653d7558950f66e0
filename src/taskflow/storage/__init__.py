"""
Storage subsystem.

- kv_store.py: key-value backends (memory, JSON file, SQLite)
- persistence.py: task-store state <-> key-value layout, demo seed data
"""
