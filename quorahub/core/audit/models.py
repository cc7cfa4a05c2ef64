"""Append-only audit trail written by the audit-log-events listener."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from quorahub.extensions import db


class AuditLogEntry(db.Model):
    __tablename__ = "audit_log"
    __table_args__ = (db.Index("ix_audit_log_resource", "resource_type", "resource_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    # No FK: entries outlive the users and resources they describe.
    user_id: Mapped[int | None] = mapped_column(index=True)
    action: Mapped[str] = mapped_column(db.String(32), nullable=False)
    resource_type: Mapped[str] = mapped_column(db.String(64), nullable=False)
    resource_id: Mapped[int | None] = mapped_column()
    details: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[datetime] = mapped_column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
