"""Taskboard: role-scoped task management for sales teams."""

__version__ = "1.0.0"
