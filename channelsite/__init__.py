"""
YouTube channel website builder.

This package contains all application source code organized by responsibility:
- api/          : FastAPI routes and HTTP handling
- core/         : Configuration, logging, validation and cross-cutting utilities
- services/     : Business logic and orchestration
- llm/          : Provider fallback chain and prompt management
- editing/      : Component mapping, intent parsing and DOM edits
- integrations/ : YouTube Data API and GitHub REST clients
- database/     : Supabase Postgres access through SQLAlchemy
- memory/       : Per-project conversation memory
- models/       : Pydantic models for request/response schemas
"""
__version__ = "1.0.0"
