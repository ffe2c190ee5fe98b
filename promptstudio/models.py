"""
SQLAlchemy models for Prompt Framework Studio.
Users, login sessions, saved prompts, custom criteria and analytics events.
"""
import json
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String, Integer, Boolean, DateTime, Text,
    ForeignKey, Index, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from promptstudio.database import Base
from promptstudio.utils.clock import utcnow


class User(Base):
    """
    User model.
    Carries the subscription tier; premium is only honoured while
    subscription_expires_at lies in the future (see services.subscription).
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)

    # Subscription
    subscription_tier: Mapped[str] = mapped_column(String(20), default="free")
    subscription_expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Timestamps
    last_password_change: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    # Relationships
    sessions: Mapped[list["UserSession"]] = relationship(
        "UserSession", back_populates="user", cascade="all, delete-orphan"
    )
    prompts: Mapped[list["Prompt"]] = relationship(
        "Prompt", back_populates="user", cascade="all, delete-orphan"
    )
    custom_criteria: Mapped[list["CustomCriteria"]] = relationship(
        "CustomCriteria", back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.subscription_tier})>"


class UserSession(Base):
    """
    Server-side login session. Enforces a single active session per user
    and holds the in-progress wizard answers.
    """
    __tablename__ = "user_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    session_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, index=True)

    # Session metadata
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Wizard progress (JSON list of {"questionId", "selectedOptionIds"})
    _wizard_answers: Mapped[Optional[str]] = mapped_column("wizard_answers", Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    last_activity: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    user: Mapped["User"] = relationship("User", back_populates="sessions")

    __table_args__ = (
        Index("ix_user_sessions_user_active", "user_id", "is_active"),
    )

    @property
    def wizard_answers(self) -> list[dict]:
        """Get stored wizard answers as a list."""
        if not self._wizard_answers:
            return []
        try:
            return json.loads(self._wizard_answers)
        except (json.JSONDecodeError, TypeError):
            return []

    @wizard_answers.setter
    def wizard_answers(self, value: list[dict]) -> None:
        self._wizard_answers = json.dumps(value) if value else None

    def __repr__(self) -> str:
        return f"<UserSession {self.session_id[:8]}... for user_id={self.user_id}>"


class Prompt(Base):
    """A generated prompt the user chose to save."""
    __tablename__ = "prompts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    framework_type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    final_prompt_text: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="prompts")

    __table_args__ = (
        Index("ix_prompts_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Prompt {self.id} ({self.framework_type}) for user_id={self.user_id}>"


class CustomCriteria(Base):
    """User-defined evaluation criterion (premium feature)."""
    __tablename__ = "custom_criteria"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    criteria_name: Mapped[str] = mapped_column(String(200), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="custom_criteria")

    __table_args__ = (
        UniqueConstraint("user_id", "criteria_name", name="uq_custom_criteria_user_name"),
    )

    def __repr__(self) -> str:
        return f"<CustomCriteria {self.criteria_name!r} for user_id={self.user_id}>"


class Event(Base):
    """
    Analytics event. Written best-effort by services.analytics.log_event.
    """
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    event_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    # Stored as JSON text; "metadata" is reserved on declarative classes
    _metadata: Mapped[Optional[str]] = mapped_column("metadata", Text, nullable=True)

    # Traffic source
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    device_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    browser: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    os: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_events_type_created", "event_type", "created_at"),
    )

    @property
    def event_metadata(self) -> dict:
        if not self._metadata:
            return {}
        try:
            return json.loads(self._metadata)
        except (json.JSONDecodeError, TypeError):
            return {}

    @event_metadata.setter
    def event_metadata(self, value: Optional[dict]) -> None:
        self._metadata = json.dumps(value) if value else None

    def __repr__(self) -> str:
        return f"<Event {self.event_type} user_id={self.user_id}>"
