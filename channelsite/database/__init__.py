"""
Database module - Supabase Postgres access layer.

This module handles:
- Database connection management
- ORM models mirroring the Supabase tables
- Table initialization
"""
from channelsite.database.connection import DatabaseConnection, get_database, reset_database
from channelsite.database.models import (
    Base,
    Project,
    ProjectChatMessage,
    ApiKey,
    DeploymentToken,
    GitSyncStatus,
)
from channelsite.database.init_db import init_tables, drop_tables

__all__ = [
    "DatabaseConnection",
    "get_database",
    "reset_database",
    "Base",
    "Project",
    "ProjectChatMessage",
    "ApiKey",
    "DeploymentToken",
    "GitSyncStatus",
    "init_tables",
    "drop_tables",
]
