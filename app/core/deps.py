"""
FastAPI dependencies shared by the account endpoints.

Long-lived collaborators are created in the application lifespan and stored
on app.state; endpoints receive them through these functions so tests can
swap them with dependency_overrides.
"""

from fastapi import Request

from app.services.email_service import EmailService


def get_email_service(request: Request) -> EmailService:
    """Return the process-wide email dispatcher built at startup."""
    return request.app.state.email_service
