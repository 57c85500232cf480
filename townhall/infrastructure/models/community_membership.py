"""SQLAlchemy model for community memberships."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, UniqueConstraint

from townhall.infrastructure.database import Base


class CommunityMembershipModel(Base):
    """Membership of a user in a community, with notification preferences."""

    __tablename__ = "community_memberships"
    __table_args__ = (
        UniqueConstraint("userId", "communityId", name="uq_membership_user_community"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column("userId", String(128), nullable=False, index=True)
    community_id = Column("communityId", String(128), nullable=False, index=True)
    status = Column("status", String(20), nullable=False, default="active")
    notification_preferences = Column("notificationPreferences", JSON, nullable=True)
    join_date = Column("joinDate", DateTime(), nullable=True)


__all__ = ["CommunityMembershipModel"]
