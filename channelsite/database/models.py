"""
Database Models - SQLAlchemy ORM models for the Supabase schema.

This module defines the tables the website builder reads and writes:
- projects              : one generated website per row
- project_chat_history  : chat messages per project
- api_keys              : LLM provider keys managed by admins
- deployment_tokens     : per-user GitHub and Netlify tokens
- git_sync_status       : last GitHub sync outcome per user/project
"""
import uuid
from datetime import datetime
from typing import Dict, Any

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


def _iso(value: datetime) -> Any:
    return value.isoformat() if value else None


class Project(Base):
    """
    A generated website.

    channel_data holds the ChannelInfo snapshot taken when the project
    was created; source_code is the full single-file HTML document.
    """
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    youtube_url = Column(String(500), nullable=True)
    channel_data = Column(JSON, nullable=True)
    source_code = Column(Text, nullable=True)
    status = Column(String(20), default="active", nullable=False)
    github_url = Column(String(500), nullable=True)
    netlify_url = Column(String(500), nullable=True)
    verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    messages = relationship(
        "ProjectChatMessage",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectChatMessage.created_at"
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "description": self.description,
            "youtube_url": self.youtube_url,
            "channel_data": self.channel_data,
            "source_code": self.source_code,
            "status": self.status,
            "github_url": self.github_url,
            "netlify_url": self.netlify_url,
            "verified": self.verified,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class ProjectChatMessage(Base):
    """
    A single chat message attached to a project.

    The Supabase column is called "metadata", which SQLAlchemy reserves
    on declarative classes, hence the extra_data attribute name.
    """
    __tablename__ = "project_chat_history"

    id = Column(String(36), primary_key=True, default=_uuid)
    project_id = Column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id = Column(String(36), nullable=False)
    message_type = Column(String(20), nullable=False)  # 'user' or 'assistant'
    content = Column(Text, nullable=False)
    extra_data = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="messages")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "message_type": self.message_type,
            "content": self.content,
            "metadata": self.extra_data,
            "created_at": _iso(self.created_at),
        }


class ApiKey(Base):
    """LLM provider key. Rows with user_id NULL are shared platform keys."""
    __tablename__ = "api_keys"

    id = Column(String(36), primary_key=True, default=_uuid)
    provider = Column(String(50), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    key_value = Column(Text, nullable=False)
    model = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    requests_count = Column(Integer, default=0, nullable=False)
    last_used_at = Column(DateTime, nullable=True)
    user_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class DeploymentToken(Base):
    """Per-user token for a deployment provider (github or netlify)."""
    __tablename__ = "deployment_tokens"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    provider = Column(String(50), nullable=False)
    token_name = Column(String(255), nullable=False)
    token_value = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class GitSyncStatus(Base):
    """Outcome of the most recent GitHub sync for a user's project."""
    __tablename__ = "git_sync_status"
    __table_args__ = (UniqueConstraint("user_id", "project_id", name="uq_git_sync_user_project"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), nullable=False)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    sync_status = Column(String(20), nullable=False)  # syncing, success, partial, error
    files_synced = Column(Integer, default=0, nullable=False)
    commit_hash = Column(String(40), nullable=True)
    error_message = Column(Text, nullable=True)
    last_sync_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "sync_status": self.sync_status,
            "files_synced": self.files_synced,
            "commit_hash": self.commit_hash,
            "error_message": self.error_message,
            "last_sync_at": _iso(self.last_sync_at),
            "updated_at": _iso(self.updated_at),
        }
