"""TaskFlow: a persistent, filterable task list."""

__version__ = "0.1.0"
