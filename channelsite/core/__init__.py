"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based configuration management
- logging_config.py : Centralized logging setup
- exceptions.py     : Error hierarchy mapped to HTTP responses
- rate_limiter.py   : Per-user request throttling
- validators.py     : Input sanitization
- audit.py          : Request logging and security headers
"""
from channelsite.core.config import get_settings, Settings
from channelsite.core.logging_config import setup_logging, get_logger, LoggerMixin

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "LoggerMixin",
]
