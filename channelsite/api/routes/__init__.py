"""
API Routes module - Endpoint definitions.

Each file in this module defines routes for a specific domain:
- health.py     : Health and readiness checks
- projects.py   : Project CRUD, preview and chat history
- chat.py       : Website assistant
- generation.py : Website generation and targeted edits
- youtube.py    : Channel lookup
- sync.py       : GitHub sync
- deploy.py     : Netlify deploy
- providers.py  : LLM provider status
"""
from channelsite.api.routes.health import router as health_router
from channelsite.api.routes.projects import router as projects_router
from channelsite.api.routes.chat import router as chat_router
from channelsite.api.routes.generation import router as generation_router
from channelsite.api.routes.youtube import router as youtube_router
from channelsite.api.routes.sync import router as sync_router
from channelsite.api.routes.deploy import router as deploy_router
from channelsite.api.routes.providers import router as providers_router

__all__ = [
    "health_router",
    "projects_router",
    "chat_router",
    "generation_router",
    "youtube_router",
    "sync_router",
    "deploy_router",
    "providers_router",
]
