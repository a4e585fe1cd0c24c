"""
Shared route dependencies: caller identity, path validation, rate limits.

The trusted gateway in front of the API verifies the Supabase session
and forwards the user id (X-User-Id) and role (X-User-Role).
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Response

from channelsite.core.exceptions import AuthenticationRequired, ValidationError
from channelsite.core.rate_limiter import get_rate_limiter
from channelsite.core.validators import validate_project_id


@dataclass
class CurrentUser:
    id: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None)
) -> CurrentUser:
    """
    Raises:
        AuthenticationRequired: If no user id was forwarded
    """
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationRequired()
    return CurrentUser(id=x_user_id.strip(), role=(x_user_role or "user").strip().lower())


def valid_project_id(project_id: str) -> str:
    is_valid, error = validate_project_id(project_id)
    if not is_valid:
        raise ValidationError(error, field="project_id")
    return project_id


def rate_limited_user(
    response: Response,
    user: CurrentUser = Depends(get_current_user)
) -> CurrentUser:
    """
    Current user, counted against the per-minute limit.

    Raises:
        RateLimitExceeded: With retry_after until the oldest request expires
    """
    rate_limiter = get_rate_limiter()
    remaining = rate_limiter.check(user.id)

    response.headers["X-RateLimit-Limit"] = str(rate_limiter.limit)
    response.headers["X-RateLimit-Remaining"] = str(remaining)
    return user
