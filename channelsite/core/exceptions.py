"""
Custom Exceptions - Application-specific error classes.

This module defines a hierarchy of exceptions for clean error handling:
- Each exception has a status code and error code
- Used by the API layer for consistent error responses
- No stack traces leaked in production
"""
from typing import Optional


class ChannelSiteException(Exception):
    """
    Base exception for all website builder errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(ChannelSiteException):
    """Raised when input validation fails."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class AuthenticationRequired(ChannelSiteException):
    """Raised when a request carries no user identity."""
    status_code = 401
    error_code = "authentication_required"

    def __init__(self, message: str = "Authentication required. Please log in and try again."):
        super().__init__(message)


class ProjectLimitExceeded(ChannelSiteException):
    """Raised when a user already owns the maximum number of projects."""
    status_code = 403
    error_code = "project_limit_exceeded"

    def __init__(self, limit: int):
        super().__init__(
            message=f"Project limit reached ({limit}). Delete a project or upgrade your plan.",
            details=f"limit={limit}"
        )
        self.limit = limit


class ProjectNotFoundError(ChannelSiteException):
    """Raised when a project does not exist or belongs to another user."""
    status_code = 404
    error_code = "project_not_found"

    def __init__(self, project_id: str):
        super().__init__(
            message=f"Project not found: {project_id[:8]}...",
            details=f"project_id={project_id}"
        )
        self.project_id = project_id


class TargetNotFoundError(ChannelSiteException):
    """Raised when no component can be identified for a targeted edit."""
    status_code = 422
    error_code = "target_not_found"

    def __init__(self, user_request: str):
        super().__init__(
            message=f'Unable to identify target component from request: "{user_request}"'
        )
        self.user_request = user_request


class RateLimitExceeded(ChannelSiteException):
    """Raised when a client exceeds the rate limit."""
    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(self, retry_after: int = 60):
        super().__init__(
            message=f"Rate limit exceeded. Please wait {retry_after} seconds.",
            details=f"retry_after={retry_after}"
        )
        self.retry_after = retry_after


class DatabaseError(ChannelSiteException):
    """Raised when database operations fail."""
    status_code = 503
    error_code = "database_error"

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)


class LLMError(ChannelSiteException):
    """Raised when every LLM provider in the fallback chain fails."""
    status_code = 503
    error_code = "llm_error"

    def __init__(self, message: str = "LLM service unavailable"):
        super().__init__(message)


class YouTubeError(ChannelSiteException):
    """Raised when the YouTube Data API cannot be reached or rejects a call."""
    status_code = 502
    error_code = "youtube_error"

    def __init__(self, message: str = "Failed to fetch YouTube data"):
        super().__init__(message)


class ChannelNotFoundError(ChannelSiteException):
    """Raised when the YouTube channel lookup returns no items."""
    status_code = 404
    error_code = "channel_not_found"

    def __init__(self, identifier: str):
        super().__init__(
            message="Channel not found",
            details=f"identifier={identifier}"
        )
        self.identifier = identifier


class GitHubNotConfiguredError(ChannelSiteException):
    """Raised when no GitHub token is available for the user."""
    status_code = 400
    error_code = "github_not_configured"

    def __init__(self):
        super().__init__(
            message=(
                "No active GitHub token found. Please configure GitHub "
                "integration in your settings first."
            )
        )


class GitHubSyncError(ChannelSiteException):
    """Raised when a GitHub REST call fails."""
    status_code = 502
    error_code = "github_sync_error"

    def __init__(self, message: str):
        super().__init__(message)


class NetlifyNotConfiguredError(ChannelSiteException):
    """Raised when no Netlify token is available for the user."""
    status_code = 400
    error_code = "netlify_not_configured"

    def __init__(self):
        super().__init__(
            message=(
                "No active Netlify token found. Please configure Netlify "
                "integration in your settings first."
            )
        )


class NetlifyDeployError(ChannelSiteException):
    """Raised when a Netlify API call or deploy fails."""
    status_code = 502
    error_code = "netlify_deploy_error"

    def __init__(self, message: str):
        super().__init__(message)
