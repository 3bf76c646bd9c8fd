"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between flow logic and database operations,
following the Repository pattern.
"""

from app.crud import account_token, user

__all__ = ["account_token", "user"]
