# performance_api/infrastructure/database/models.py

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from performance_api.infrastructure.database.session import Base


class UserRecord(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, index=True)
    department = Column(String, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    two_factor_enabled = Column(Boolean, nullable=False, default=False)
    two_factor_secret = Column(Text, nullable=True)
    avatar = Column(String, nullable=False, default="")
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class TaskRecord(Base):
    __tablename__ = "tasks"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String, nullable=False, default="todo", index=True)
    assigned_to = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    assigned_by = Column(String, ForeignKey("users.id"), nullable=True)
    priority = Column(String, nullable=False, default="medium")
    project = Column(String, nullable=True)
    deadline = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    status_history = Column(JSON, nullable=False, default=list)


class ScoreRecord(Base):
    __tablename__ = "scores"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    kpi_id = Column(String, nullable=False, index=True)
    value = Column(Float, nullable=False)
    target = Column(Float, nullable=False)
    month = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    final_score = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    verified = Column(Boolean, nullable=False, default=False)
    verified_by = Column(String, ForeignKey("users.id"), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)


class AuditLogRecord(Base):
    """Append-only. Repositories never issue UPDATE or DELETE against this table."""

    __tablename__ = "audit_logs"

    id = Column(String, primary_key=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    actor_id = Column(String, nullable=True, index=True)
    actor_name = Column(String, nullable=False)
    action = Column(String, nullable=False, index=True)
    entity_type = Column(String, nullable=False, index=True)
    entity_id = Column(String, nullable=True, index=True)
    details = Column(Text, nullable=False)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)
    category = Column(String, nullable=False, index=True)
    severity = Column(String, nullable=False, index=True)
    correlation_id = Column(String, nullable=True)
    metadata_ = Column("metadata", JSON, nullable=True)
