"""
Celery tasks package.

Tasks are organized by domain:
- token_tasks: periodic removal of long-dead one-time code records
"""

from app.tasks import token_tasks

__all__ = ["token_tasks"]
