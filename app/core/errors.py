"""
Failure taxonomy for the account token flows.

Flows raise FlowError subclasses at the point a branch fails. The
flow_boundary decorator converts them, and any storage error that escapes,
into a tagged FlowResult so nothing propagates past a flow as an unhandled
fault.
"""

import enum
import functools
import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class FlowStatus(str, enum.Enum):
    """Outcome tag carried by every flow response"""
    SUCCESS = "Success"
    FAILED = "Failed"
    PENDING = "Pending"


@dataclass
class FlowResult:
    status: FlowStatus
    message: str
    reason: Optional[str] = None
    data: Any = None

    @classmethod
    def success(cls, message: str, data: Any = None) -> "FlowResult":
        return cls(status=FlowStatus.SUCCESS, message=message, data=data)

    @classmethod
    def pending(cls, message: str, data: Any = None) -> "FlowResult":
        return cls(status=FlowStatus.PENDING, message=message, data=data)


class FlowError(Exception):
    """Base class for a failed flow branch."""
    reason = "error"
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, reason: Optional[str] = None):
        self.message = message or self.default_message
        if reason:
            self.reason = reason
        super().__init__(self.message)

    def to_result(self) -> FlowResult:
        return FlowResult(status=FlowStatus.FAILED, message=self.message, reason=self.reason)


class InvalidInputError(FlowError):
    """Missing or malformed field, detected before any I/O."""
    reason = "invalid_input"
    default_message = "All fields are required"


class NotFoundError(FlowError):
    """Subject account absent."""
    reason = "not_found"
    default_message = "User not found"


class NoPendingRequestError(FlowError):
    """No outstanding token record for the subject and purpose."""
    reason = "no_pending_request"
    default_message = "Request not found"


class NotVerifiedError(FlowError):
    reason = "not_verified"
    default_message = "Email hasn't been verified"


class AlreadyVerifiedError(FlowError):
    """Resend requested for an account that is already confirmed."""
    reason = "already_verified"
    default_message = "Email has already been verified. You can login"


class ExpiredError(FlowError):
    """Token past its expiry; cleanup has already run when this is raised."""
    reason = "expired"
    default_message = "The code you entered has expired"


class MismatchError(FlowError):
    """Wrong code or password. Non-terminal: the caller may retry."""
    reason = "invalid_code"
    default_message = "Invalid code"


class ConflictError(FlowError):
    """Email or phone number already in use."""
    reason = "already_exists"
    default_message = "User with the given email/phone number already exists"


class DependencyError(FlowError):
    """Storage or dispatch failure, reported generically."""
    reason = "storage_error"
    default_message = "A storage error occurred. Please try again later"


class DispatchError(DependencyError):
    reason = "dispatch_error"
    default_message = "Error occurred sending verification email"


def flow_boundary(func):
    """
    Convert FlowError and SQLAlchemyError raised by a flow into a FlowResult.

    The wrapped function must take the SQLAlchemy session as its first
    argument; it is rolled back before any failure is reported.
    """
    @functools.wraps(func)
    def wrapper(db, *args, **kwargs) -> FlowResult:
        try:
            return func(db, *args, **kwargs)
        except FlowError as e:
            db.rollback()
            if isinstance(e, DependencyError):
                logger.error(f"{func.__name__} failed: {e.reason}")
            return e.to_result()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Storage failure in {func.__name__}")
            return DependencyError().to_result()
    return wrapper
