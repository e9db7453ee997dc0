"""Gang history log.

Entries are added to the caller's unit of work and committed with the
change they describe.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from mundamanager.models import GangLog

logger = logging.getLogger(__name__)

CUSTOM_ACTION_TYPE = "custom"
MAX_PAGE_SIZE = 200


def create_gang_log(
    session: Session,
    gang_id: int,
    action_type: str,
    description: str,
    *,
    user_id: str | None = None,
    fighter_id: int | None = None,
    vehicle_id: int | None = None,
) -> GangLog:
    """Add a log entry for a gang.

    Args:
        session: Database session (the caller commits)
        gang_id: Gang the entry belongs to
        action_type: Machine-readable action, e.g. 'fighter_killed'
        description: Human-readable description
        user_id: Acting user
        fighter_id: Fighter involved, if any
        vehicle_id: Vehicle involved, if any

    Returns:
        The pending GangLog row
    """
    entry = GangLog(
        gang_id=gang_id,
        user_id=user_id,
        action_type=action_type,
        description=description,
        fighter_id=fighter_id,
        vehicle_id=vehicle_id,
    )
    session.add(entry)
    logger.debug("gang %s log %s: %s", gang_id, action_type, description)
    return entry


def list_gang_logs(
    session: Session, gang_id: int, *, limit: int = 50, offset: int = 0
) -> list[GangLog]:
    """Return a page of a gang's log, newest first."""
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    if offset < 0:
        raise ValueError("offset cannot be negative")

    stmt = (
        select(GangLog)
        .where(GangLog.gang_id == gang_id)
        .order_by(GangLog.created_at.desc(), GangLog.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(session.execute(stmt).scalars())
