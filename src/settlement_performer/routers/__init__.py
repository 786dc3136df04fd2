"""API routers."""

from settlement_performer.routers import health, tasks

__all__ = ["health", "tasks"]
