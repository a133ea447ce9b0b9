"""Achievement catalog and per-user unlocks."""

import enum
from datetime import datetime

from sqlalchemy import Integer, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class AchievementType(str, enum.Enum):
    """Counter an achievement threshold is checked against."""

    RECIPES_SAVED = "recipes_saved"
    RECIPES_COOKED = "recipes_cooked"
    STREAK = "streak"
    SWIPE_COUNT = "swipe_count"


class AchievementDefinition(Base, TimestampMixin):
    """Read-only, externally curated milestone definition.

    Example: id="10-swipes", type=swipe_count, requirement=10
    """

    __tablename__ = "achievements"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[AchievementType] = mapped_column(
        Enum(AchievementType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    requirement: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<AchievementDefinition(id='{self.id}', type={self.type.value}, requirement={self.requirement})>"


class UserAchievement(Base):
    """An unlocked achievement. Rows are only ever inserted."""

    __tablename__ = "user_achievements"

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id"), primary_key=True
    )
    achievement_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("achievements.id"), primary_key=True
    )
    unlocked_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<UserAchievement(user='{self.user_id}', achievement='{self.achievement_id}')>"
