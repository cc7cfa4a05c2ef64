"""Audit trail writes."""

from __future__ import annotations

from typing import Optional

from quorahub.core.audit.models import AuditLogEntry
from quorahub.extensions import db


def record_audit(
    user_id: Optional[int],
    action: str,
    resource_type: str,
    resource_id: Optional[int] = None,
    details: Optional[str] = None,
) -> AuditLogEntry:
    entry = AuditLogEntry(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        details=details,
    )
    db.session.add(entry)
    db.session.commit()
    return entry
