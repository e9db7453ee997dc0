"""Ownership and role checks.

Authentication happens upstream; these helpers only decide whether an
already-identified user may act on a gang or campaign.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from mundamanager.cache import TagCache
from mundamanager.cache.invalidation import invalidate_user_count
from mundamanager.domain.enums import CampaignRole, UserRole
from mundamanager.exceptions import PermissionDeniedError
from mundamanager.models import Campaign, CampaignMember, Gang, Profile

logger = logging.getLogger(__name__)

CAMPAIGN_MANAGER_ROLES = frozenset({CampaignRole.OWNER, CampaignRole.ARBITRATOR})


def get_profile(session: Session, user_id: str) -> Profile:
    """Load the acting user's profile.

    Raises:
        PermissionDeniedError: If no profile exists for ``user_id``
    """
    profile = session.get(Profile, user_id)
    if profile is None:
        raise PermissionDeniedError(f"Unknown user {user_id}")
    return profile


def register_profile(
    session: Session,
    cache: TagCache,
    user_id: str,
    username: str,
    *,
    user_role: UserRole = UserRole.USER,
) -> Profile:
    """Create the profile mirror for a user the auth provider already knows.

    Raises:
        ValueError: If the id or username is already taken
    """
    try:
        username = username.strip()
        if not username:
            raise ValueError("Username cannot be empty")
        if session.get(Profile, user_id) is not None:
            raise ValueError(f"Profile {user_id} already exists")
        taken = session.execute(
            select(Profile.id).where(Profile.username == username)
        ).scalar_one_or_none()
        if taken is not None:
            raise ValueError(f"Username '{username}' is already taken")

        profile = Profile(id=user_id, username=username, user_role=str(user_role))
        session.add(profile)
        session.commit()
    except Exception:
        session.rollback()
        raise

    invalidate_user_count(cache)
    return profile


def is_admin(session: Session, user_id: str) -> bool:
    profile = session.get(Profile, user_id)
    return profile is not None and profile.is_admin


def require_gang_owner(session: Session, gang: Gang, user_id: str) -> None:
    """Allow the gang's owner and admins.

    Raises:
        PermissionDeniedError: For anyone else
    """
    if gang.user_id == user_id or is_admin(session, user_id):
        return
    logger.info("user %s denied access to gang %s", user_id, gang.id)
    raise PermissionDeniedError("You do not have permission to modify this gang")


def campaign_role(session: Session, campaign_id: int, user_id: str) -> CampaignRole | None:
    role = session.execute(
        select(CampaignMember.role).where(
            CampaignMember.campaign_id == campaign_id, CampaignMember.user_id == user_id
        )
    ).scalar_one_or_none()
    return CampaignRole(role) if role is not None else None


def require_campaign_manager(session: Session, campaign: Campaign, user_id: str) -> None:
    """Allow campaign owners, arbitrators and admins."""
    if campaign_role(session, campaign.id, user_id) in CAMPAIGN_MANAGER_ROLES:
        return
    if is_admin(session, user_id):
        return
    raise PermissionDeniedError("Only the campaign owner or an arbitrator can do this")


def require_campaign_owner(session: Session, campaign: Campaign, user_id: str) -> None:
    """Allow the campaign owner and admins."""
    if campaign_role(session, campaign.id, user_id) is CampaignRole.OWNER:
        return
    if is_admin(session, user_id):
        return
    raise PermissionDeniedError("Only the campaign owner can do this")


def require_campaign_member(session: Session, campaign: Campaign, user_id: str) -> CampaignRole:
    """Allow any campaign member. Admins are treated as arbitrators."""
    role = campaign_role(session, campaign.id, user_id)
    if role is not None:
        return role
    if is_admin(session, user_id):
        return CampaignRole.ARBITRATOR
    raise PermissionDeniedError("You are not a member of this campaign")
