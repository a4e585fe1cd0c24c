"""
Input Validators - Sanitization and validation utilities.

This module provides input validation for the API layer:
- Chat message sanitization
- Project ID validation
- YouTube URL validation
- Prompt-injection heuristics (warning only)
"""
import re
import uuid
from typing import Optional, Tuple
from urllib.parse import urlparse

from channelsite.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 4000

# Phrases that usually mean someone is trying to steer the model off-task
SUSPICIOUS_PATTERNS = [
    r"ignore\s+(all\s+)?(previous|prior)\s+instructions",
    r"disregard\s+(the\s+)?system\s+prompt",
    r"reveal\s+(your\s+)?(system\s+prompt|api\s+key)",
    r"<\s*script[^>]*>\s*fetch\(",
    r"document\.cookie",
]

_SUSPICIOUS_REGEX = [re.compile(p, re.IGNORECASE) for p in SUSPICIOUS_PATTERNS]

YOUTUBE_HOSTS = {
    "youtube.com",
    "www.youtube.com",
    "m.youtube.com",
    "youtu.be",
}


def sanitize_message(message: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """
    Sanitize a user message.

    - Strips leading/trailing whitespace
    - Removes null bytes
    - Limits length

    Internal whitespace is kept: users paste HTML snippets and quoted
    text into edit requests.
    """
    if not message:
        return ""

    cleaned = message.replace("\x00", "").strip()

    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]

    return cleaned


def validate_project_id(project_id: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a project ID is a proper UUID.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not project_id:
        return False, "project_id is required"

    try:
        uuid.UUID(project_id)
        return True, None
    except ValueError:
        return False, "Invalid project_id format (must be UUID)"


def detect_suspicious_patterns(message: str) -> Tuple[bool, Optional[str]]:
    """
    Check if a message contains suspicious patterns.

    This is a heuristic check - not a security guarantee.

    Returns:
        Tuple of (is_suspicious, matched_pattern)
    """
    for pattern in _SUSPICIOUS_REGEX:
        match = pattern.search(message)
        if match:
            logger.warning(
                f"Suspicious pattern detected: {match.group()[:50]}..."
            )
            return True, match.group()

    return False, None


def validate_message(message: str) -> Tuple[bool, str, Optional[str]]:
    """
    Full validation and sanitization of a message.

    Returns:
        Tuple of (is_valid, sanitized_message, error_message)
    """
    if not message or not message.strip():
        return False, "", "Message cannot be empty"

    if len(message.strip()) > MAX_MESSAGE_LENGTH:
        return False, "", f"Message too long (max {MAX_MESSAGE_LENGTH} characters)"

    sanitized = sanitize_message(message)

    if not sanitized:
        return False, "", "Message cannot be empty after sanitization"

    # Warning only, don't block
    is_suspicious, pattern = detect_suspicious_patterns(sanitized)
    if is_suspicious:
        logger.warning(f"Suspicious message detected but allowed: {pattern}")

    return True, sanitized, None


def validate_youtube_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate that a URL points at YouTube.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not url.strip():
        return False, "YouTube URL cannot be empty"

    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https"):
        return False, "YouTube URL must start with http:// or https://"

    if parsed.netloc.lower() not in YOUTUBE_HOSTS:
        return False, f"Not a YouTube URL: {parsed.netloc}"

    return True, None
