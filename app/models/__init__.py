"""
Database models package.
"""

from app.models.user import User
from app.models.account_token import AccountToken, TokenPurpose

__all__ = ["User", "AccountToken", "TokenPurpose"]
