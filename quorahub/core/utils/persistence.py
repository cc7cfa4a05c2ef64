"""Session helpers shared by services."""

from __future__ import annotations

from quorahub.extensions import db


def delete_and_commit(instance) -> None:
    """Delete ``instance`` and drop stale copies of it from loaded collections."""
    db.session.delete(instance)
    db.session.commit()
    # expire_on_commit is off, so loaded parents would still list the deleted rows.
    db.session.expire_all()
