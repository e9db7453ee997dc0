"""User profile model.

Accounts live with the upstream auth provider; this table only mirrors the
fields the backend needs for ownership and role checks.
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .gang import Gang


class Profile(Base, TimestampMixin):
    """A registered user.

    Attributes:
        id: User id issued by the auth provider
        username: Display name, unique across users
        user_role: 'user' or 'admin'
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    user_role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")

    gangs: Mapped[list["Gang"]] = relationship("Gang", back_populates="owner")

    __table_args__ = (CheckConstraint("user_role IN ('user', 'admin')", name="ck_profile_role"),)

    @property
    def is_admin(self) -> bool:
        return self.user_role == "admin"

    def __repr__(self) -> str:
        return f"<Profile(id={self.id!r}, username={self.username!r})>"
