"""Celery tasks for background job processing."""

from recipe2shop.tasks.regeneration import regenerate_shopping_list_task

__all__ = [
    "regenerate_shopping_list_task",
]
