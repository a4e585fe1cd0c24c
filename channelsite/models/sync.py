"""
Request and Response models for GitHub sync.
"""
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class SyncRequest(BaseModel):
    """
    Request model for POST /projects/{id}/sync/github.

    Without files, the project's index.html and README.md are pushed.
    """
    files: Optional[Dict[str, str]] = None
    commit_message: str = Field(default="AI Website Update", min_length=1, max_length=200)
    create_repo: bool = False


class FileSyncResult(BaseModel):
    path: str
    success: bool
    sha: Optional[str] = None
    error: Optional[str] = None


class SyncResponse(BaseModel):
    success: bool
    sync_status: str
    repository_url: str
    synced_files: int
    failed_files: int
    total_files: int
    commit_hash: str = ""
    results: List[FileSyncResult] = Field(default_factory=list)
    message: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class SyncStatusResponse(BaseModel):
    project_id: str
    sync_status: str
    files_synced: int = 0
    commit_hash: Optional[str] = None
    error_message: Optional[str] = None
    last_sync_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
