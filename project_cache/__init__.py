"""Read-through cache layer for the project backend (projects, teams, reports)."""

__version__ = "1.0.0"
