"""Authentication outcome.

Every login attempt ends in exactly one of three shapes:

- success:   user set, no error
- failure:   no user, error set (operational problem, e.g. Steam API down)
- rejection: no user, no error, message set (invalid assertion)

Rejections are not errors; applications show the message and let the user
retry. Failures are server-side problems.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class AuthOutcome:
    """Result of a single authentication attempt"""

    user: Optional[Any] = None
    error: Optional[Exception] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, user: Any) -> "AuthOutcome":
        return cls(user=user)

    @classmethod
    def failure(cls, error: Exception) -> "AuthOutcome":
        return cls(error=error)

    @classmethod
    def reject(cls, message: str) -> "AuthOutcome":
        return cls(message=message)

    @property
    def is_success(self) -> bool:
        return self.user is not None and self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @property
    def is_rejected(self) -> bool:
        return self.user is None and self.error is None
