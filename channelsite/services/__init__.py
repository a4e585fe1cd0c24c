"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP concerns (those belong in api/)
- Orchestrate between LLM, editing, integrations, database and memory
"""
from channelsite.services.project_service import (
    ProjectService,
    get_project_service,
    reset_project_service,
)
from channelsite.services.generation_service import (
    GenerationService,
    GenerationResult,
    get_generation_service,
    reset_generation_service,
)
from channelsite.services.chat_service import (
    ChatService,
    ChatReply,
    get_chat_service,
    reset_chat_service,
)
from channelsite.services.sync_service import (
    SyncService,
    SyncResult,
    get_sync_service,
    reset_sync_service,
)
from channelsite.services.deploy_service import (
    DeployService,
    DeployResult,
    get_deploy_service,
    reset_deploy_service,
)

__all__ = [
    "ProjectService",
    "get_project_service",
    "reset_project_service",
    "GenerationService",
    "GenerationResult",
    "get_generation_service",
    "reset_generation_service",
    "ChatService",
    "ChatReply",
    "get_chat_service",
    "reset_chat_service",
    "SyncService",
    "SyncResult",
    "get_sync_service",
    "reset_sync_service",
    "DeployService",
    "DeployResult",
    "get_deploy_service",
    "reset_deploy_service",
]
