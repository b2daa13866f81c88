"""Celery application configuration for background task processing."""

import os

from celery import Celery

from recipe2shop.config import settings

# Create Celery application
celery_app = Celery(
    "recipe2shop",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "recipe2shop.tasks.regeneration",
    ],
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="Europe/Paris",
    enable_utc=True,
    # Task execution settings
    task_acks_late=True,  # Acknowledge after task completes
    task_reject_on_worker_lost=True,  # Requeue if worker dies
    worker_prefetch_multiplier=1,  # One task at a time per worker
    # Result settings
    result_expires=86400,  # Results expire after 1 day
    # Queue routing
    task_routes={
        "recipe2shop.tasks.regeneration.*": {"queue": "shopping-lists"},
    },
    # Logging
    worker_hijack_root_logger=False,  # Don't hijack root logger
)

if os.name == "nt":
    celery_app.conf.update(
        worker_pool="solo",  # Use solo pool on Windows
    )
